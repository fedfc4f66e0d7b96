"""Schema driven YAML conversion with round-trip formatting.

The `yamlcast` package converts YAML streams into native Python values
and back, with the typing of scalars decided by a pluggable schema.

Key features:
- YAML 1.1, YAML 1.2 Core and YAML 1.2 JSON schemas with strict
  precedence of the implicit scalar grammars;
- custom schemas overriding selected operations or tags;
- depth bounded emission of arbitrary objects, including pydantic
  models, dataclasses and plain objects;
- style and comment annotations preserved on the emitted document.
"""

from .dumper import dump, dump_all, dumps, dumps_all
from .errors import (
    ClassificationError,
    FormatWarning,
    MemberAccessError,
    ParseDocumentError,
    SchemaNotFoundError,
    TruncationWarning,
    YamlCastError,
)
from .formats import FormatMetadata, Formatted, annotate
from .loader import load, loads
from .numerics import IntWidth, int_width
from .schemas import (
    CustomSchema,
    Schema,
    Yaml11Schema,
    Yaml12JsonSchema,
    Yaml12Schema,
    get_schema,
    new_schema,
)
from .settings import ConversionSettings
from .values import (
    NULL_KEY,
    CollectionStyle,
    ComplexKey,
    MapValue,
    NullKey,
    ScalarStyle,
    ScalarValue,
    SequenceValue,
)

__all__ = (
    'NULL_KEY',
    'ClassificationError',
    'CollectionStyle',
    'ComplexKey',
    'ConversionSettings',
    'CustomSchema',
    'FormatMetadata',
    'FormatWarning',
    'Formatted',
    'IntWidth',
    'MapValue',
    'MemberAccessError',
    'NullKey',
    'ParseDocumentError',
    'ScalarStyle',
    'ScalarValue',
    'Schema',
    'SchemaNotFoundError',
    'SequenceValue',
    'TruncationWarning',
    'Yaml11Schema',
    'Yaml12JsonSchema',
    'Yaml12Schema',
    'YamlCastError',
    'annotate',
    'dump',
    'dump_all',
    'dumps',
    'dumps_all',
    'get_schema',
    'int_width',
    'load',
    'loads',
    'new_schema',
)
