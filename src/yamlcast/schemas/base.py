"""Failsafe schema and the schema strategy contract.

A schema decides how scalar text is typed when parsing and how native
values are rendered when emitting. The failsafe schema defined here
performs no typing at all: every scalar stays a string and collections
are returned as plain dictionaries and lists.

Schemas are stateless and may be shared between conversions.
"""

from base64 import b64encode
from collections.abc import Iterable, Mapping
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from yamlcast.numerics import int_text
from yamlcast.values import TAG_BINARY, MapValue, ScalarStyle, ScalarValue, SequenceValue

if TYPE_CHECKING:
    from yamlcast.values import NativeValue


class Schema:
    """Failsafe schema.

    Parsing returns scalar text unchanged and collections as plain
    `dict` and `list` instances. Emitting renders every scalar as its
    string form with an unspecified style.

    Subclasses override the operations they type; the contract is:

    - `is_scalar(value)`: whether a native value is emitted as an opaque
      scalar instead of being decomposed;
    - `emit_scalar`, `emit_map`, `emit_sequence`: wrap a native value
      into a node value with the schema's default style;
    - `parse_scalar`, `parse_map`, `parse_sequence`: the inverse.
    """

    #: Registry name of the schema.
    name: ClassVar[str] = 'blank'

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'

    def is_scalar(self, value: 'NativeValue') -> bool:  # noqa: ARG002
        """Check whether a native value is treated as a scalar."""
        return False

    def emit_scalar(self, value: 'NativeValue') -> ScalarValue:
        """Render a native value as scalar text.

        Args:
            value: Native value classified as a scalar.

        Returns:
            A scalar value with an unspecified style.
        """
        if value is None:
            return ScalarValue(text='')

        if isinstance(value, Enum):
            return self.emit_scalar(value.value)

        if isinstance(value, (bytes, bytearray)):
            return ScalarValue(
                text=b64encode(value).decode('ascii'),
                tag=TAG_BINARY,
                style=ScalarStyle.PLAIN,
            )

        if isinstance(value, date):
            return ScalarValue(text=value.isoformat())

        if isinstance(value, int) and not isinstance(value, bool):
            return ScalarValue(text=int_text(value))

        return ScalarValue(text=str(value))

    def emit_map(self, value: Mapping) -> MapValue:
        """Wrap a native mapping with the default collection style."""
        return MapValue(entries=dict(value.items()))

    def emit_sequence(self, value: Iterable) -> SequenceValue:
        """Wrap a native iterable with the default collection style."""
        return SequenceValue(items=list(value))

    def collect_entry(self, entries: dict, key: 'NativeValue', value: 'NativeValue') -> None:
        """Store a parsed mapping entry before `parse_map` runs.

        A repeated key keeps its first position and takes the last value.
        """
        entries[key] = value

    def parse_scalar(self, value: ScalarValue) -> 'NativeValue':
        """Return scalar text unchanged."""
        return value.text

    def parse_map(self, value: MapValue) -> 'NativeValue':
        """Return mapping entries as a plain dictionary."""
        return dict(value.entries)

    def parse_sequence(self, value: SequenceValue) -> 'NativeValue':
        """Return sequence items as a plain list."""
        return list(value.items)


def plain_or_quoted(text: str, plain: bool) -> ScalarValue:
    """Build an untagged string scalar in plain or double quoted style."""
    return ScalarValue(
        text=text,
        style=ScalarStyle.PLAIN if plain else ScalarStyle.DOUBLE_QUOTED,
    )
