"""User overridable schema decorator.

A `CustomSchema` wraps a base schema and overrides any subset of its
operations. Every operation is dispatched through `resolve_hook`, which
applies a fixed precedence:

1. the per-tag table, when the incoming node value carries a tag that
   has an entry (parse operations only);
2. the custom hook registered for the operation, if any;
3. the base schema's own operation.

Hooks and tag handlers receive the value and the base schema, so they
can delegate part of the work back to it.
"""

from collections.abc import Callable, Iterable, Mapping
from enum import StrEnum
from functools import partial
from typing import TYPE_CHECKING, Any, ClassVar, TypeAlias

from yamlcast.schemas.base import Schema
from yamlcast.values import MapValue, ScalarValue, SequenceValue, TaggedMixin, expand_tag

if TYPE_CHECKING:
    from yamlcast.values import NativeValue

#: Hook signatures, each receiving the base schema as second argument.
IsScalarHook: TypeAlias = Callable[[Any, Schema], bool]
ScalarEmitter: TypeAlias = Callable[[Any, Schema], ScalarValue]
MapEmitter: TypeAlias = Callable[[Mapping, Schema], MapValue]
SequenceEmitter: TypeAlias = Callable[[Iterable, Schema], SequenceValue]
ScalarParser: TypeAlias = Callable[[ScalarValue, Schema], Any]
MapParser: TypeAlias = Callable[[MapValue, Schema], Any]
SequenceParser: TypeAlias = Callable[[SequenceValue, Schema], Any]

#: Tag handler for any parsed node value carrying the tag.
TagHandler: TypeAlias = Callable[[ScalarValue | MapValue | SequenceValue, Schema], Any]

#: Names of the overridable operations.
OPERATIONS = (
    'is_scalar',
    'emit_map',
    'emit_scalar',
    'emit_sequence',
    'parse_map',
    'parse_scalar',
    'parse_sequence',
)


class HookSource(StrEnum):
    """Tier that handled an operation."""

    TAG = 'tag'
    HOOK = 'hook'
    BASE = 'base'


class CustomSchema(Schema):
    """Schema overriding selected operations of a base schema."""

    name: ClassVar[str] = 'custom'

    def __init__(self, base: Schema, *,  # noqa: PLR0913
                 tags: Mapping[str, TagHandler] | None = None,
                 is_scalar: IsScalarHook | None = None,
                 emit_map: MapEmitter | None = None,
                 emit_scalar: ScalarEmitter | None = None,
                 emit_sequence: SequenceEmitter | None = None,
                 parse_map: MapParser | None = None,
                 parse_scalar: ScalarParser | None = None,
                 parse_sequence: SequenceParser | None = None) -> None:
        """Initialize a custom schema.

        Args:
            base: Schema handling every operation that is not overridden.
            tags: Handlers keyed by tag; `!!name` shorthands are expanded.
            is_scalar: Hook deciding whether a value is an opaque scalar.
            emit_map: Hook wrapping a native mapping.
            emit_scalar: Hook rendering a native scalar.
            emit_sequence: Hook wrapping a native sequence.
            parse_map: Hook converting a parsed mapping.
            parse_scalar: Hook converting a parsed scalar.
            parse_sequence: Hook converting a parsed sequence.
        """
        self.base = base
        self.tags: dict[str, TagHandler] = {
            expand_tag(tag) or tag: handler
            for tag, handler in (tags or {}).items()
        }
        self.hooks: dict[str, Callable[..., Any]] = {
            operation: hook
            for operation, hook in (
                ('is_scalar', is_scalar),
                ('emit_map', emit_map),
                ('emit_scalar', emit_scalar),
                ('emit_sequence', emit_sequence),
                ('parse_map', parse_map),
                ('parse_scalar', parse_scalar),
                ('parse_sequence', parse_sequence),
            )
            if hook is not None
        }

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.base!r}, hooks={sorted(self.hooks)})'

    def is_scalar(self, value: 'NativeValue') -> bool:
        return bool(self.dispatch('is_scalar', value))

    def emit_map(self, value: Mapping) -> MapValue:
        return self.dispatch('emit_map', value)

    def emit_scalar(self, value: 'NativeValue') -> ScalarValue:
        return self.dispatch('emit_scalar', value)

    def emit_sequence(self, value: Iterable) -> SequenceValue:
        return self.dispatch('emit_sequence', value)

    def collect_entry(self, entries: dict, key: 'NativeValue', value: 'NativeValue') -> None:
        self.base.collect_entry(entries, key, value)

    def parse_map(self, value: MapValue) -> 'NativeValue':
        return self.dispatch('parse_map', value)

    def parse_scalar(self, value: ScalarValue) -> 'NativeValue':
        return self.dispatch('parse_scalar', value)

    def parse_sequence(self, value: SequenceValue) -> 'NativeValue':
        return self.dispatch('parse_sequence', value)

    def dispatch(self, operation: str, value: 'NativeValue') -> 'NativeValue':
        """Run an operation through the tier chosen by `resolve_hook`."""
        _, handler = resolve_hook(self, operation, value)

        return handler()


def resolve_hook(schema: CustomSchema, operation: str,
                 value: 'NativeValue') -> tuple[HookSource, Callable[[], Any]]:
    """Select the handler of an operation.

    Args:
        schema: Custom schema holding the tag table and hooks.
        operation: One of `OPERATIONS`.
        value: Argument of the operation.

    Returns:
        The tier that was selected and a callable running it.

    Raises:
        ValueError: If the operation name is unknown.
    """
    if operation not in OPERATIONS:
        raise ValueError(f'Unknown schema operation {operation!r}')

    if (
        operation.startswith('parse_')
        and isinstance(value, TaggedMixin)
        and value.tag is not None
        and (handler := schema.tags.get(value.tag)) is not None
    ):
        return HookSource.TAG, partial(handler, value, schema.base)

    if (hook := schema.hooks.get(operation)) is not None:
        return HookSource.HOOK, partial(hook, value, schema.base)

    return HookSource.BASE, partial(getattr(schema.base, operation), value)
