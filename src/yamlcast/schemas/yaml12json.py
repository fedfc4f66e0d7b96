"""YAML 1.2 JSON schema.

See https://yaml.org/spec/1.2.2/#1022-tag-resolution for the grammars.
Only the lowercase `null`, `true` and `false` keywords and JSON numbers
are resolved. Untagged text that matches nothing stays a string.

Strings are always emitted double quoted and collections in flow style,
so the output reads as JSON wherever the values allow it.
"""

from collections.abc import Iterable, Mapping
from re import VERBOSE
from re import compile as regexp
from typing import TYPE_CHECKING, Any, ClassVar

from yamlcast.numerics import NEGATIVE_INFINITY, NOT_A_NUMBER, POSITIVE_INFINITY, parse_signed
from yamlcast.schemas.base import plain_or_quoted
from yamlcast.schemas.resolver import UNRESOLVED, ResolvingSchema
from yamlcast.values import CollectionStyle, MapValue, SequenceValue

if TYPE_CHECKING:
    from yamlcast.values import ScalarValue

#: Integer grammar: no sign other than minus and no leading zeros.
INT_PATTERN = regexp(r'^-?(?:0|[1-9][0-9]*)$')

#: Float grammar of JSON numbers.
FLOAT_PATTERN = regexp(r'''
    ^-?
    (?:0|[1-9][0-9]*)
    (?:\.[0-9]*)?
    (?:[eE][-+]?[0-9]+)?
    $
''', flags=VERBOSE)

#: Non-finite spellings accepted only with an explicit float tag.
TAGGED_FLOATS = {
    POSITIVE_INFINITY: float('inf'),
    NEGATIVE_INFINITY: float('-inf'),
    NOT_A_NUMBER: float('nan'),
}


class Yaml12JsonSchema(ResolvingSchema):
    """YAML 1.2 JSON schema."""

    name: ClassVar[str] = 'yaml12json'

    null_literals: ClassVar[dict[str, Any]] = {
        'null': None,
    }

    bool_literals: ClassVar[dict[str, bool]] = {
        'true': True,
        'false': False,
    }

    def match_int(self, text: str) -> Any:  # noqa: ANN401
        if not INT_PATTERN.match(text):
            return UNRESOLVED

        return parse_signed(text, 10)

    def match_float(self, text: str) -> Any:  # noqa: ANN401
        if not FLOAT_PATTERN.match(text):
            return UNRESOLVED

        return float(text)

    def match_tagged_float(self, text: str) -> Any:  # noqa: ANN401
        if text in TAGGED_FLOATS:
            return TAGGED_FLOATS[text]

        return self.match_float(text)

    def emit_string(self, text: str) -> 'ScalarValue':
        return plain_or_quoted(text, plain=False)

    def emit_map(self, value: Mapping) -> MapValue:
        return MapValue(entries=dict(value.items()), style=CollectionStyle.FLOW)

    def emit_sequence(self, value: Iterable) -> SequenceValue:
        return SequenceValue(items=list(value), style=CollectionStyle.FLOW)
