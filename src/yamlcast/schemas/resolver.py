"""Shared machinery of the typed YAML schemas.

A typed schema owns a closed set of literal grammars. Each grammar is a
matcher returning the typed value or `UNRESOLVED`. Explicitly tagged
scalars go straight to the matcher registered for the tag and must
match; untagged plain scalars try the implicit matchers in precedence
order and fall back to the original text.

Emission renders canonical text for a native value and feeds it back
through the same implicit chain: when the text would not come back as
an equivalent value, the scalar is tagged (numbers and keywords) or
double quoted (strings).
"""

from base64 import b64decode
from binascii import Error as BinasciiError
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from math import isnan
from numbers import Integral, Real
from typing import TYPE_CHECKING, Any, Final, TypeAlias

from yamlcast.errors import ClassificationError
from yamlcast.numerics import float_text, int_text
from yamlcast.schemas.base import Schema, plain_or_quoted
from yamlcast.values import (
    TAG_BOOL,
    TAG_FLOAT,
    TAG_INT,
    TAG_NULL,
    TAG_STR,
    ScalarStyle,
    ScalarValue,
)

if TYPE_CHECKING:
    from yamlcast.values import NativeValue


class _Unresolved:
    """Marker returned by matchers when text does not match."""

    __slots__ = ()

    def __repr__(self) -> str:
        return 'UNRESOLVED'


UNRESOLVED: Final = _Unresolved()

#: A literal grammar: text in, typed value or `UNRESOLVED` out.
Matcher: TypeAlias = Callable[[str], Any]

#: Canonical keyword spellings used when emitting.
NULL_TEXT = 'null'
TRUE_TEXT = 'true'
FALSE_TEXT = 'false'


def equivalent(left: 'NativeValue', right: 'NativeValue') -> bool:
    """Compare two typed values, telling `bool` from `int` and NaN from NaN.

    Args:
        left: First value.
        right: Second value.

    Returns:
        True if both values have the same type and compare equal.
    """
    if isinstance(left, float) and isinstance(right, float) and isnan(left) and isnan(right):
        return True

    return type(left) is type(right) and left == right


def match_literals(text: str, literals: dict[str, Any]) -> Any:  # noqa: ANN401
    """Look up text in a closed literal set."""
    return literals.get(text, UNRESOLVED)


def decode_binary(text: str) -> Any:  # noqa: ANN401
    """Decode base64 text, ignoring whitespace."""
    try:
        return b64decode(''.join(text.split()), validate=True)
    except (BinasciiError, ValueError):
        return UNRESOLVED


class ResolvingSchema(Schema):
    """Base class of schemas with typed scalar grammars.

    Subclasses provide the literal sets and grammars through the
    `match_*` methods; this class wires them into tag dispatch,
    implicit resolution, and round trip safe emission.
    """

    #: Literals resolving to null.
    null_literals: dict[str, Any] = {}
    #: Literals resolving to booleans.
    bool_literals: dict[str, bool] = {}

    def __init__(self) -> None:
        """Build the tag table and the implicit resolution chain."""
        self.tags: dict[str, Matcher] = self.build_tags()
        self.resolvers: tuple[Matcher, ...] = self.build_resolvers()

    def build_tags(self) -> dict[str, Matcher]:
        """Return matchers keyed by the tags this schema understands."""
        return {
            TAG_NULL: self.match_null,
            TAG_BOOL: self.match_bool,
            TAG_INT: self.match_int,
            TAG_FLOAT: self.match_tagged_float,
            TAG_STR: str,
        }

    def build_resolvers(self) -> tuple[Matcher, ...]:
        """Return implicit matchers in precedence order."""
        return (
            self.match_null,
            self.match_bool,
            self.match_int,
            self.match_float,
        )

    def match_null(self, text: str) -> Any:  # noqa: ANN401
        return match_literals(text, self.null_literals)

    def match_bool(self, text: str) -> Any:  # noqa: ANN401
        return match_literals(text, self.bool_literals)

    def match_int(self, text: str) -> Any:  # noqa: ANN401
        raise NotImplementedError

    def match_float(self, text: str) -> Any:  # noqa: ANN401
        raise NotImplementedError

    def match_tagged_float(self, text: str) -> Any:  # noqa: ANN401
        """Match text explicitly tagged as a float."""
        return self.match_float(text)

    def resolve(self, text: str) -> 'NativeValue':
        """Resolve untagged plain text through the implicit chain.

        Args:
            text: Plain scalar text.

        Returns:
            The first matching typed value, or the text itself.
        """
        for resolver in self.resolvers:
            result = resolver(text)
            if result is not UNRESOLVED:
                return result

        return text

    def parse_scalar(self, value: ScalarValue) -> 'NativeValue':
        """Type a scalar by its tag, or implicitly when untagged and plain.

        Args:
            value: Scalar text with style and tag.

        Returns:
            The typed value. Scalars with an unknown tag, or untagged
            scalars with a non-plain style, are returned as text.

        Raises:
            ClassificationError: If the text does not match its tag.
        """
        if value.tag is not None:
            matcher = self.tags.get(value.tag)
            if matcher is None:
                return value.text

            result = matcher(value.text)
            if result is UNRESOLVED:
                raise ClassificationError(
                    f'Value {value.text!r} does not match tag {value.tag!r}',
                    value=value.text,
                    tag=value.tag,
                )
            return result

        if not value.is_implicit:
            return value.text

        return self.resolve(value.text)

    def emit_typed(self, text: str, tag: str, expected: 'NativeValue') -> ScalarValue:
        """Emit canonical text, tagging it when it would not round trip.

        Args:
            text: Canonical text of the value.
            tag: Tag forcing the intended type.
            expected: The native value the text stands for.

        Returns:
            A plain scalar, tagged when implicit resolution of the text
            would not reproduce an equivalent value.
        """
        if equivalent(self.resolve(text), expected):
            return ScalarValue(text=text, style=ScalarStyle.PLAIN)

        return ScalarValue(text=text, style=ScalarStyle.PLAIN, tag=tag)

    def emit_string(self, text: str) -> ScalarValue:
        """Emit a string, quoting it when plain text would change type."""
        plain = equivalent(self.resolve(text), text) and not self.is_reserved(text)

        return plain_or_quoted(text, plain)

    def emit_timestamp(self, value: date) -> ScalarValue:
        """Emit a date or date-time; typed schemas without timestamps use text."""
        return self.emit_string(value.isoformat())

    def is_reserved(self, text: str) -> bool:  # noqa: ARG002
        """Check whether a string has a special meaning as a plain key."""
        return False

    def emit_scalar(self, value: 'NativeValue') -> ScalarValue:
        """Render a native value as canonical scalar text.

        Args:
            value: Native value classified as a scalar.

        Returns:
            A scalar value that this schema parses back to an
            equivalent value.
        """
        if value is None:
            return self.emit_typed(NULL_TEXT, TAG_NULL, None)

        if isinstance(value, Enum):
            return self.emit_scalar(value.value)

        if isinstance(value, bool):
            return self.emit_typed(TRUE_TEXT if value else FALSE_TEXT, TAG_BOOL, value)

        if isinstance(value, Integral):
            value = int(value)
            return self.emit_typed(int_text(value), TAG_INT, value)

        if isinstance(value, (Real, Decimal)):
            value = float(value)
            return self.emit_typed(float_text(value), TAG_FLOAT, value)

        if isinstance(value, str):
            return self.emit_string(value)

        if isinstance(value, (bytes, bytearray)):
            return super().emit_scalar(value)

        if isinstance(value, (datetime, date)):
            return self.emit_timestamp(value)

        return self.emit_string(str(value))
