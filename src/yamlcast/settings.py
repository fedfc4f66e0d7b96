"""Runtime conversion settings.

Defaults used by `load` and `dump` when the caller does not pass them
explicitly. Every setting may be overridden through an environment
variable with the `YAMLCAST_` prefix, for example `YAMLCAST_DEPTH=4`.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from yamlcast.models import SettingsModel


class ConversionSettings(SettingsModel):
    """Environment driven conversion defaults."""

    model_config = SettingsConfigDict(
        env_prefix='YAMLCAST_',
        frozen=True,
        extra='ignore',
    )

    schema_name: str = Field(
        default='yaml12',
        title='Schema',
        description='Name of the registered schema used for conversion.',
    )

    depth: int = Field(
        default=2,
        ge=0,
        title='Depth',
        description='Number of collection levels emitted below the root.',
    )

    indent: int = Field(
        default=2,
        ge=2,
        le=9,
        title='Indent',
        description='Number of spaces per block indentation level.',
    )

    width: int = Field(
        default=80,
        gt=0,
        title='Width',
        description='Preferred maximum line width of emitted YAML.',
    )

    allow_unicode: bool = Field(
        default=True,
        title='Allow unicode',
        description='Whether non-ASCII characters are written unescaped.',
    )
