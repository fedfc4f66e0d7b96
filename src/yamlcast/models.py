"""Base Pydantic models for conversion primitives.

This module defines the foundational model classes used by node values,
format metadata, and runtime settings. Node values are immutable so that
a single instance can be shared between schemas, hooks, and emitters
without side effects.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for node values and metadata.

    Design principles enforced by this model:
        - Immutability: values cannot be modified after creation.
          Custom schema hooks receive the same instance the converter
          holds, so mutation would leak between operations.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in hook code.

    All node and metadata models must inherit from this class.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for conversion settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so the surrounding environment may contain unrelated variables.

    All settings models must inherit from this class.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
