"""Node model exchanged with the YAML engine.

This module defines the generic scalar, sequence and mapping values that
sit between the YAML engine and native Python values. Schemas receive
these values when parsing and produce them when emitting.

It also defines the sentinel used for null mapping keys and a hashable
wrapper for keys that are themselves collections.
"""

from collections.abc import Mapping, Set
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum, StrEnum
from pathlib import PurePath
from typing import Any, TypeAlias
from uuid import UUID

from pydantic import Field, field_validator

from yamlcast.models import SchemaModel

#: Native value produced by parsing or accepted for emitting.
NativeValue: TypeAlias = Any

#: Types emitted as opaque scalars before any schema hook is consulted.
SCALAR_LIKE = (bool, str, bytes, bytearray, date, datetime, time, timedelta, UUID, PurePath, Enum)

#: Tag values meaning "resolve implicitly".
NON_SPECIFIC_TAGS = ('', '?', '!')

#: Prefix of the standard YAML tags and its shorthand.
TAG_PREFIX = 'tag:yaml.org,2002:'
SHORT_TAG_PREFIX = '!!'

TAG_NULL = f'{TAG_PREFIX}null'
TAG_BOOL = f'{TAG_PREFIX}bool'
TAG_INT = f'{TAG_PREFIX}int'
TAG_FLOAT = f'{TAG_PREFIX}float'
TAG_STR = f'{TAG_PREFIX}str'
TAG_BINARY = f'{TAG_PREFIX}binary'
TAG_TIMESTAMP = f'{TAG_PREFIX}timestamp'
TAG_MERGE = f'{TAG_PREFIX}merge'


class ScalarStyle(StrEnum):
    """Surface syntax of a scalar node."""

    ANY = 'any'
    PLAIN = 'plain'
    SINGLE_QUOTED = 'single-quoted'
    DOUBLE_QUOTED = 'double-quoted'
    LITERAL = 'literal'
    FOLDED = 'folded'

    @property
    def multiline(self) -> bool:
        """Whether the style is a block scalar spanning several lines."""
        return self in (ScalarStyle.LITERAL, ScalarStyle.FOLDED)


class CollectionStyle(StrEnum):
    """Surface syntax of a sequence or mapping node."""

    ANY = 'any'
    BLOCK = 'block'
    FLOW = 'flow'


def expand_tag(value: str | None) -> str | None:
    """Normalize a tag to the form reported by the YAML engine.

    Blank, `?` and `!` tags mean "resolve implicitly" and become `None`;
    the `!!` shorthand is expanded to the `tag:yaml.org,2002:` prefix.
    """
    if value is None or value.strip() in NON_SPECIFIC_TAGS:
        return None

    if value.startswith(SHORT_TAG_PREFIX):
        return f'{TAG_PREFIX}{value[len(SHORT_TAG_PREFIX):]}'

    return value


class TaggedMixin(SchemaModel):
    """Mixin providing the optional explicit tag of a node."""

    tag: str | None = Field(
        default=None,
        title='Tag',
        description='Explicit tag, or nothing to resolve implicitly.',
    )

    @field_validator('tag')
    @classmethod
    def normalize_tag(cls, value: str | None) -> str | None:
        """Collapse blank and non-specific tags into `None`."""
        return expand_tag(value)


class ScalarValue(TaggedMixin):
    """Scalar text together with its style and optional tag.

    The text is always the decoded scalar content, without quotes or
    escapes. A missing tag means the scalar is resolved implicitly.
    """

    text: str = Field(
        title='Text',
        description='Decoded scalar content.',
    )

    style: ScalarStyle = Field(
        default=ScalarStyle.ANY,
        title='Style',
        description='Surface syntax of the scalar.',
    )

    @property
    def is_implicit(self) -> bool:
        """Whether the scalar is eligible for implicit type resolution.

        Only untagged plain scalars are resolved; an unspecified style
        counts as plain.
        """
        return self.tag is None and self.style in (ScalarStyle.ANY, ScalarStyle.PLAIN)


class MapValue(TaggedMixin):
    """Ordered key/value entries together with a collection style."""

    entries: dict[Any, Any] = Field(
        default_factory=dict,
        title='Entries',
        description='Resolved entries in insertion order.',
    )

    style: CollectionStyle = Field(
        default=CollectionStyle.ANY,
        title='Style',
        description='Surface syntax of the mapping.',
    )


class SequenceValue(TaggedMixin):
    """Ordered items together with a collection style."""

    items: list[Any] = Field(
        default_factory=list,
        title='Items',
        description='Resolved items in document order.',
    )

    style: CollectionStyle = Field(
        default=CollectionStyle.ANY,
        title='Style',
        description='Surface syntax of the sequence.',
    )


class NullKey:
    """Sentinel standing in for a null mapping key.

    The single instance compares equal to itself and to `None`, and hashes
    like `None`, so a null key and the sentinel collapse to one entry in
    a dictionary.
    """

    __slots__ = ()

    _instance: 'NullKey | None' = None

    def __new__(cls) -> 'NullKey':
        """Return the shared instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)

        return cls._instance

    def __eq__(self, other: object) -> bool:
        return other is None or isinstance(other, NullKey)

    def __hash__(self) -> int:
        return hash(None)

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'NULL_KEY'

    def __reduce__(self) -> str:
        return 'NULL_KEY'


NULL_KEY = NullKey()


def freeze(value: NativeValue) -> NativeValue:
    """Build a hashable snapshot of a parsed value.

    Args:
        value: A parsed value, possibly a nested collection.

    Returns:
        The value itself when already hashable, otherwise a tuple
        (or frozenset for sets) mirroring its structure.
    """
    if isinstance(value, ComplexKey):
        return value.snapshot

    if isinstance(value, Mapping):
        return tuple(
            (freeze(key), freeze(item))
            for key, item in value.items()
        )

    if isinstance(value, Set):
        return frozenset(freeze(item) for item in value)

    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)

    if isinstance(value, bytearray):
        return bytes(value)

    return value


@dataclass(frozen=True, eq=False)
class ComplexKey:
    """Hashable wrapper for mapping keys that are collections.

    YAML allows sequences and mappings as keys. The wrapper keeps the
    original value and compares by its structure.
    """

    value: NativeValue

    @property
    def snapshot(self) -> NativeValue:
        return freeze(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComplexKey):
            return NotImplemented

        return self.snapshot == other.snapshot

    def __hash__(self) -> int:
        return hash(self.snapshot)


def as_key(value: NativeValue) -> NativeValue:
    """Turn a parsed value into a usable dictionary key.

    Args:
        value: A parsed key value.

    Returns:
        `NULL_KEY` for null keys, a `ComplexKey` for unhashable
        values, and the value itself otherwise.
    """
    if value is None:
        return NULL_KEY

    try:
        hash(value)
    except TypeError:
        return ComplexKey(value)

    return value
