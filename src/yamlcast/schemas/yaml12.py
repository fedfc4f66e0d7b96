"""YAML 1.2 Core schema.

See https://yaml.org/spec/1.2.2/#1032-tag-resolution for the grammars.
Integers are decimal with an optional sign, `0o` octal or `0x` hex
(hex is read unsigned). Floats accept an optional fractional part and
exponent, plus the `.inf` and `.nan` spellings in three casings.
"""

from re import VERBOSE
from re import compile as regexp
from typing import Any, ClassVar

from yamlcast.numerics import fold_digits, parse_signed
from yamlcast.schemas.resolver import UNRESOLVED, ResolvingSchema

#: Integer grammar, one named group per base.
INT_PATTERN = regexp(r'''
    ^(?:
        (?P<octal>0o[0-7]+)
      | (?P<decimal>[-+]?[0-9]+)
      | (?P<hex>0x[0-9a-fA-F]+)
    )$
''', flags=VERBOSE)

#: Float grammar, including infinities and not-a-number.
FLOAT_PATTERN = regexp(r'''
    ^(?:
        (?P<number>[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?)
      | (?P<infinity>[-+]?\.(?:inf|Inf|INF))
      | (?P<nan>\.(?:nan|NaN|NAN))
    )$
''', flags=VERBOSE)


def match_float_pattern(text: str) -> Any:  # noqa: ANN401
    """Match the Core float grammar shared with the JSON schema tags."""
    if not (match := FLOAT_PATTERN.match(text)):
        return UNRESOLVED

    if match['nan']:
        return float('nan')

    if infinity := match['infinity']:
        return float('-inf') if infinity.startswith('-') else float('inf')

    return float(match['number'])


class Yaml12Schema(ResolvingSchema):
    """YAML 1.2 Core schema, the default schema."""

    name: ClassVar[str] = 'yaml12'

    null_literals: ClassVar[dict[str, Any]] = {
        'null': None,
        'Null': None,
        'NULL': None,
        '~': None,
        '': None,
    }

    bool_literals: ClassVar[dict[str, bool]] = {
        'true': True,
        'True': True,
        'TRUE': True,
        'false': False,
        'False': False,
        'FALSE': False,
    }

    def match_int(self, text: str) -> Any:  # noqa: ANN401
        if not (match := INT_PATTERN.match(text)):
            return UNRESOLVED

        if octal := match['octal']:
            return fold_digits(octal[2:], 8)

        if hex_ := match['hex']:
            return fold_digits(hex_[2:], 16)

        return parse_signed(match['decimal'], 10)

    def match_float(self, text: str) -> Any:  # noqa: ANN401
        return match_float_pattern(text)
