"""Schema registry and factory.

Built-in schemas are registered by name: `blank` (failsafe), `yaml11`,
`yaml12` (the Core schema, used by default) and `yaml12json`. Schema
instances are stateless, so one shared instance per name is kept.
"""

from typing import TYPE_CHECKING

from yamlcast.errors import SchemaNotFoundError

from .base import Schema
from .custom import CustomSchema
from .yaml11 import Yaml11Schema
from .yaml12 import Yaml12Schema
from .yaml12json import Yaml12JsonSchema

if TYPE_CHECKING:
    from .custom import (
        IsScalarHook,
        MapEmitter,
        MapParser,
        ScalarEmitter,
        ScalarParser,
        SequenceEmitter,
        SequenceParser,
        TagHandler,
    )

#: Name of the schema used when none is given.
DEFAULT_SCHEMA = Yaml12Schema.name

#: Shared schema instances keyed by lowercase name.
SCHEMAS: dict[str, Schema] = {
    schema.name: schema
    for schema in (
        Schema(),
        Yaml11Schema(),
        Yaml12Schema(),
        Yaml12JsonSchema(),
    )
}


def get_schema(schema: 'Schema | str | None' = None) -> Schema:
    """Resolve a schema instance.

    Args:
        schema: A schema instance, returned unchanged, a registered name
            (case-insensitive), or `None` for the default schema.

    Returns:
        The schema instance.

    Raises:
        SchemaNotFoundError: If the name is not registered.
    """
    if isinstance(schema, Schema):
        return schema

    name = (schema or DEFAULT_SCHEMA).lower()
    if name not in SCHEMAS:
        available = ', '.join(sorted(SCHEMAS))
        raise SchemaNotFoundError(f'Unknown schema {schema!r}, expected one of: {available}')

    return SCHEMAS[name]


def new_schema(base: 'Schema | str | None' = None, *,  # noqa: PLR0913
               tags: 'dict[str, TagHandler] | None' = None,
               is_scalar: 'IsScalarHook | None' = None,
               emit_map: 'MapEmitter | None' = None,
               emit_scalar: 'ScalarEmitter | None' = None,
               emit_sequence: 'SequenceEmitter | None' = None,
               parse_map: 'MapParser | None' = None,
               parse_scalar: 'ScalarParser | None' = None,
               parse_sequence: 'SequenceParser | None' = None) -> Schema:
    """Create a schema overriding selected operations of a base schema.

    Args:
        base: Base schema instance or name; the default schema if omitted.
        tags: Handlers keyed by tag for parsed node values.
        is_scalar: Hook deciding whether a value is an opaque scalar.
        emit_map: Hook wrapping a native mapping.
        emit_scalar: Hook rendering a native scalar.
        emit_sequence: Hook wrapping a native sequence.
        parse_map: Hook converting a parsed mapping.
        parse_scalar: Hook converting a parsed scalar.
        parse_sequence: Hook converting a parsed sequence.

    Returns:
        The base schema itself when nothing is overridden,
        otherwise a `CustomSchema` wrapping it.
    """
    base_schema = get_schema(base)
    hooks = {
        'is_scalar': is_scalar,
        'emit_map': emit_map,
        'emit_scalar': emit_scalar,
        'emit_sequence': emit_sequence,
        'parse_map': parse_map,
        'parse_scalar': parse_scalar,
        'parse_sequence': parse_sequence,
    }

    if not tags and all(hook is None for hook in hooks.values()):
        return base_schema

    return CustomSchema(base_schema, tags=tags, **hooks)
