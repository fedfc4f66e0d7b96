"""YAML 1.1 types schema.

See https://yaml.org/type/ for the grammars. Compared to the 1.2 Core
schema this schema adds the extended boolean lexicon (`yes`, `on`, `y`
and their negatives), binary, legacy octal and sexagesimal integers,
underscore digit separators, timestamps, base64 binary values, and the
`<<` merge key for mappings.

Hex literals follow two's complement on 32-bit words: the digits are
left padded to a multiple of eight and the top bit gives the sign, a
`+` sign forces an unsigned reading.
"""

from collections.abc import Mapping, Sequence
from datetime import UTC, date, datetime, timedelta, timezone
from re import VERBOSE
from re import compile as regexp
from typing import TYPE_CHECKING, Any, ClassVar

from yamlcast.numerics import fold_digits, parse_hex_word, parse_sexagesimal, split_sign
from yamlcast.schemas.resolver import UNRESOLVED, ResolvingSchema, decode_binary
from yamlcast.values import TAG_BINARY, TAG_MERGE, TAG_TIMESTAMP, ScalarStyle, ScalarValue

if TYPE_CHECKING:
    from yamlcast.schemas.resolver import Matcher
    from yamlcast.values import MapValue, NativeValue

#: Key whose mapping value is merged into the enclosing mapping.
MERGE_KEY = '<<'

#: Integer grammar, one named group per base.
INT_PATTERN = regexp(r'''
    ^(?:
        (?P<binary>[-+]?0b[0-1_]+)
      | (?P<octal>[-+]?0[0-7_]+)
      | (?P<decimal>[-+]?(?:0|[1-9][0-9_]*))
      | (?P<hex>[-+]?0x[0-9a-fA-F_]+)
      | (?P<sexagesimal>[-+]?[1-9][0-9_]*(?::[0-5]?[0-9])+)
    )$
''', flags=VERBOSE)

#: Float grammar, including base 60 floats, infinities and not-a-number.
FLOAT_PATTERN = regexp(r'''
    ^(?:
        (?P<number>[-+]?(?:[0-9][0-9_]*)?\.[0-9_]*(?:[eE][-+][0-9]+)?)
      | (?P<sexagesimal>[-+]?[0-9][0-9_]*(?::[0-5]?[0-9])+\.[0-9_]*)
      | (?P<infinity>[-+]?\.(?:inf|Inf|INF))
      | (?P<nan>\.(?:nan|NaN|NAN))
    )$
''', flags=VERBOSE)

#: Timestamp grammar: a date, or a date-time with optional zone.
TIMESTAMP_PATTERN = regexp(r'''
    ^(?:
        (?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})
      | (?P<year>[0-9]{4})
        -(?P<month>[0-9]{1,2})
        -(?P<day>[0-9]{1,2})
        (?:[Tt]|[ \t]+)
        (?P<hour>[0-9]{1,2})
        :(?P<minute>[0-9]{2})
        :(?P<second>[0-9]{2})
        (?:\.(?P<fraction>[0-9]*))?
        (?:
            [ \t]*
            (?:
                (?P<zulu>Z)
              | (?P<tz_sign>[-+])(?P<tz_hour>[0-9]{1,2})(?::(?P<tz_minute>[0-9]{2}))?
            )
        )?
    )$
''', flags=VERBOSE)

#: Microsecond digits kept from a fractional second.
FRACTION_DIGITS = 6


def _sexagesimal_float(text: str) -> float:
    sign, rest = split_sign(text)
    whole, _, fraction = rest.partition('.')

    return sign * float(f'{parse_sexagesimal(whole)}.{fraction.replace("_", "")}')


def _timestamp(match: Any) -> datetime:  # noqa: ANN401
    if day := match['date']:
        return datetime.combine(date.fromisoformat(day), datetime.min.time(), tzinfo=UTC)

    zone = UTC
    if match['tz_sign']:
        offset = timedelta(
            hours=int(match['tz_hour']),
            minutes=int(match['tz_minute'] or 0),
        )
        zone = timezone(-offset if match['tz_sign'] == '-' else offset)

    fraction = (match['fraction'] or '')[:FRACTION_DIGITS]

    return datetime(
        int(match['year']),
        int(match['month']),
        int(match['day']),
        int(match['hour']),
        int(match['minute']),
        int(match['second']),
        int(fraction.ljust(FRACTION_DIGITS, '0')),
        tzinfo=zone,
    )


class Yaml11Schema(ResolvingSchema):
    """YAML 1.1 types schema."""

    name: ClassVar[str] = 'yaml11'

    null_literals: ClassVar[dict[str, Any]] = {
        'null': None,
        'Null': None,
        'NULL': None,
        '~': None,
        '': None,
    }

    bool_literals: ClassVar[dict[str, bool]] = {
        **dict.fromkeys(('y', 'Y', 'yes', 'Yes', 'YES', 'true', 'True', 'TRUE', 'on', 'On', 'ON'), True),
        **dict.fromkeys(('n', 'N', 'no', 'No', 'NO', 'false', 'False', 'FALSE', 'off', 'Off', 'OFF'), False),
    }

    def build_tags(self) -> dict[str, 'Matcher']:
        return {
            **super().build_tags(),
            TAG_BINARY: decode_binary,
            TAG_TIMESTAMP: self.match_timestamp,
            TAG_MERGE: self.match_merge,
        }

    def build_resolvers(self) -> tuple['Matcher', ...]:
        return (
            *super().build_resolvers(),
            self.match_timestamp,
        )

    def match_int(self, text: str) -> Any:  # noqa: ANN401
        if not (match := INT_PATTERN.match(text)):
            return UNRESOLVED

        try:
            if binary := match['binary']:
                sign, rest = split_sign(binary)
                return sign * fold_digits(rest[2:], 2)

            if octal := match['octal']:
                sign, rest = split_sign(octal)
                return sign * fold_digits(rest[1:], 8)

            if hex_ := match['hex']:
                return parse_hex_word(hex_)

            if sexagesimal := match['sexagesimal']:
                return parse_sexagesimal(sexagesimal)

            sign, rest = split_sign(match['decimal'])
            return sign * fold_digits(rest, 10)

        except ValueError:
            return UNRESOLVED

    def match_float(self, text: str) -> Any:  # noqa: ANN401
        if not (match := FLOAT_PATTERN.match(text)):
            return UNRESOLVED

        if match['nan']:
            return float('nan')

        if infinity := match['infinity']:
            return float('-inf') if infinity.startswith('-') else float('inf')

        try:
            if sexagesimal := match['sexagesimal']:
                return _sexagesimal_float(sexagesimal)

            return float(match['number'].replace('_', ''))

        except ValueError:
            return UNRESOLVED

    def match_tagged_float(self, text: str) -> Any:  # noqa: ANN401
        """Match a tagged float, also accepting any integer literal."""
        result = self.match_float(text)
        if result is UNRESOLVED and (result := self.match_int(text)) is not UNRESOLVED:
            return float(result)

        return result

    def match_timestamp(self, text: str) -> Any:  # noqa: ANN401
        if not (match := TIMESTAMP_PATTERN.match(text)):
            return UNRESOLVED

        try:
            return _timestamp(match)
        except ValueError:
            return UNRESOLVED

    def match_merge(self, text: str) -> Any:  # noqa: ANN401
        return text if text == MERGE_KEY else UNRESOLVED

    def is_reserved(self, text: str) -> bool:
        return text == MERGE_KEY

    def emit_timestamp(self, value: date) -> ScalarValue:
        """Emit a date or date-time as a plain timestamp when it resolves."""
        text = value.isoformat()
        if self.match_timestamp(text) is UNRESOLVED:
            return self.emit_string(text)

        return ScalarValue(text=text, style=ScalarStyle.PLAIN)

    def collect_entry(self, entries: dict, key: 'NativeValue', value: 'NativeValue') -> None:
        """Store an entry, joining the sources of repeated merge keys.

        Sources of a later `<<` entry are appended after the earlier
        ones, so the earlier merge keeps precedence.
        """
        if key == MERGE_KEY and key in entries:
            previous = _merge_sources(entries[key])
            sources = _merge_sources(value)
            if previous is not None and sources is not None:
                entries[key] = [*previous, *sources]
                return

        entries[key] = value

    def parse_map(self, value: 'MapValue') -> 'NativeValue':
        """Build a dictionary, expanding `<<` merge keys in place.

        A merge value may be a mapping or a sequence of mappings, earlier
        mappings taking precedence. Merged entries never overwrite keys
        already present.
        """
        result = {}

        for key, item in value.entries.items():
            sources = _merge_sources(item) if key == MERGE_KEY else None
            if sources is None:
                result[key] = item
                continue

            for source in sources:
                for merge_key, merge_item in source.items():
                    result.setdefault(merge_key, merge_item)

        return result


def _merge_sources(value: 'NativeValue') -> Sequence[Mapping] | None:
    if isinstance(value, Mapping):
        return (value,)

    if (
        isinstance(value, Sequence)
        and not isinstance(value, (str, bytes))
        and value
        and all(isinstance(item, Mapping) for item in value)
    ):
        return value

    return None
