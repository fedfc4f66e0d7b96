"""Tests for scalar classification and emission of built-in schemas."""

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from math import isnan
from typing import TYPE_CHECKING, Any

import pytest

from yamlcast.errors import ClassificationError, SchemaNotFoundError
from yamlcast.schemas import SCHEMAS, Schema, Yaml12Schema, get_schema
from yamlcast.values import (
    TAG_BINARY,
    TAG_BOOL,
    TAG_FLOAT,
    TAG_INT,
    TAG_NULL,
    TAG_STR,
    TAG_TIMESTAMP,
    MapValue,
    ScalarStyle,
    ScalarValue,
)

if TYPE_CHECKING:
    from yamlcast.schemas import ResolvingSchema


class Color(Enum):
    RED = 'red'
    GREEN = 2


def plain(text: str, tag: str | None = None) -> ScalarValue:
    return ScalarValue(text=text, style=ScalarStyle.PLAIN, tag=tag)


def same(left: Any, right: Any) -> bool:  # noqa: ANN401
    if isinstance(left, float) and isinstance(right, float) and isnan(left):
        return isnan(right)

    return type(left) is type(right) and left == right


@pytest.mark.parametrize('text, expected', (
    pytest.param('null', None, id='null'),
    pytest.param('NULL', None, id='upper null'),
    pytest.param('~', None, id='tilde'),
    pytest.param('', None, id='empty'),
    pytest.param('True', True, id='capitalized true'),
    pytest.param('FALSE', False, id='upper false'),
    pytest.param('yes', 'yes', id='yes is a string'),
    pytest.param('42', 42, id='decimal'),
    pytest.param('-17', -17, id='negative'),
    pytest.param('+12', 12, id='plus sign'),
    pytest.param('012', 12, id='leading zero is decimal'),
    pytest.param('0o17', 15, id='octal'),
    pytest.param('0x1F', 31, id='hex'),
    pytest.param('0xFFFFFFFF', 2 ** 32 - 1, id='hex is unsigned'),
    pytest.param('123456789012345678901234567890', 123456789012345678901234567890, id='big integer'),
    pytest.param('1.5', 1.5, id='float'),
    pytest.param('1.', 1.0, id='trailing dot'),
    pytest.param('.5', 0.5, id='leading dot'),
    pytest.param('1e3', 1000.0, id='exponent without dot'),
    pytest.param('-.inf', float('-inf'), id='negative infinity'),
    pytest.param('.Inf', float('inf'), id='capitalized infinity'),
    pytest.param('.NaN', float('nan'), id='not a number'),
    pytest.param('1_000', '1_000', id='no separators'),
    pytest.param('0b101', '0b101', id='no binary'),
    pytest.param('2001-12-14', '2001-12-14', id='no timestamps'),
    pytest.param('hello', 'hello', id='string fallback'),
))
def test_core_implicit_resolution(core: 'ResolvingSchema', text: str, expected: Any) -> None:  # noqa: ANN401
    """Verify untagged plain scalars in the Core schema."""
    assert same(core.parse_scalar(plain(text)), expected)


@pytest.mark.parametrize('text, expected', (
    pytest.param('null', None, id='null'),
    pytest.param('Null', 'Null', id='capitalized null is a string'),
    pytest.param('', '', id='empty is a string'),
    pytest.param('true', True, id='true'),
    pytest.param('True', 'True', id='capitalized true is a string'),
    pytest.param('-0', 0, id='negative zero'),
    pytest.param('01', '01', id='leading zero is a string'),
    pytest.param('+1', '+1', id='plus sign is a string'),
    pytest.param('0x1F', '0x1F', id='hex is a string'),
    pytest.param('-1.5e3', -1500.0, id='float with exponent'),
    pytest.param('1e3', 1000.0, id='exponent without dot'),
    pytest.param('.inf', '.inf', id='untagged infinity is a string'),
))
def test_json_implicit_resolution(json: 'ResolvingSchema', text: str, expected: Any) -> None:  # noqa: ANN401
    """Verify untagged plain scalars in the JSON schema."""
    assert same(json.parse_scalar(plain(text)), expected)


@pytest.mark.parametrize('text, expected', (
    pytest.param('~', None, id='tilde'),
    pytest.param('yes', True, id='yes'),
    pytest.param('Off', False, id='off'),
    pytest.param('y', True, id='single letter'),
    pytest.param('N', False, id='single upper letter'),
    pytest.param('0b101', 5, id='binary'),
    pytest.param('-0b11', -3, id='negative binary'),
    pytest.param('017', 15, id='legacy octal'),
    pytest.param('0o17', '0o17', id='no core octal'),
    pytest.param('1_000', 1000, id='separators'),
    pytest.param('0xFFFFFFFF', -1, id='hex word'),
    pytest.param('+0xFFFFFFFF', 2 ** 32 - 1, id='unsigned hex word'),
    pytest.param('1:20', 80, id='sexagesimal'),
    pytest.param('190:20:30', 685230, id='sexagesimal hours'),
    pytest.param('1.5', 1.5, id='float'),
    pytest.param('1.5e+3', 1500.0, id='float with exponent'),
    pytest.param('1e3', '1e3', id='float needs a dot'),
    pytest.param('190:20:30.15', 685230.15, id='sexagesimal float'),
    pytest.param('-.INF', float('-inf'), id='negative infinity'),
    pytest.param('.nan', float('nan'), id='not a number'),
))
def test_yaml11_implicit_resolution(yaml11: 'ResolvingSchema', text: str, expected: Any) -> None:  # noqa: ANN401
    """Verify untagged plain scalars in the YAML 1.1 schema."""
    assert same(yaml11.parse_scalar(plain(text)), expected)


@pytest.mark.parametrize('text, expected', (
    pytest.param(
        '2001-12-14',
        datetime(2001, 12, 14, tzinfo=UTC),
        id='date only',
    ),
    pytest.param(
        '2001-12-14t21:59:43.10-05:00',
        datetime(2001, 12, 14, 21, 59, 43, 100000, tzinfo=timezone(timedelta(hours=-5))),
        id='iso8601',
    ),
    pytest.param(
        '2001-12-14 21:59:43.10 -5',
        datetime(2001, 12, 14, 21, 59, 43, 100000, tzinfo=timezone(timedelta(hours=-5))),
        id='space separated',
    ),
    pytest.param(
        '2001-12-15 2:59:43.123456789Z',
        datetime(2001, 12, 15, 2, 59, 43, 123456, tzinfo=UTC),
        id='truncated fraction',
    ),
    pytest.param(
        '2001-12-15T02:59:43',
        datetime(2001, 12, 15, 2, 59, 43, tzinfo=UTC),
        id='no zone means utc',
    ),
))
def test_yaml11_timestamps(yaml11: 'ResolvingSchema', text: str, expected: datetime) -> None:
    """Verify timestamps are timezone aware datetimes."""
    result = yaml11.parse_scalar(plain(text))

    assert result == expected
    assert result.utcoffset() == expected.utcoffset()


def test_yaml11_invalid_timestamp_is_text(yaml11: 'ResolvingSchema') -> None:
    """Verify a timestamp shaped text with an invalid date stays a string."""
    assert yaml11.parse_scalar(plain('2001-13-40')) == '2001-13-40'


@pytest.mark.parametrize('style', (
    pytest.param(ScalarStyle.SINGLE_QUOTED, id='single quoted'),
    pytest.param(ScalarStyle.DOUBLE_QUOTED, id='double quoted'),
    pytest.param(ScalarStyle.LITERAL, id='literal'),
    pytest.param(ScalarStyle.FOLDED, id='folded'),
))
def test_quoted_scalars_are_strings(core: 'ResolvingSchema', style: ScalarStyle) -> None:
    """Verify only plain scalars are resolved implicitly."""
    assert core.parse_scalar(ScalarValue(text='42', style=style)) == '42'


def test_unspecified_style_is_resolved(core: 'ResolvingSchema') -> None:
    """Verify a scalar without a style is treated as plain."""
    assert core.parse_scalar(ScalarValue(text='42')) == 42


@pytest.mark.parametrize('schema_name, text, tag, expected', (
    pytest.param('yaml12', '12', '!!int', 12, id='core int'),
    pytest.param('yaml12', '1', '!!float', 1.0, id='core float from int text'),
    pytest.param('yaml12', '123', '!!str', '123', id='core str'),
    pytest.param('yaml12', '~', '!!null', None, id='core null'),
    pytest.param('yaml12', 'value', '!custom', 'value', id='core unknown tag'),
    pytest.param('yaml12json', '.nan', '!!float', float('nan'), id='json tagged nan'),
    pytest.param('yaml12json', '-.inf', '!!float', float('-inf'), id='json tagged infinity'),
    pytest.param('yaml11', '12', '!!float', 12.0, id='yaml11 float from int'),
    pytest.param('yaml11', 'aGk=', '!!binary', b'hi', id='yaml11 binary'),
    pytest.param('yaml11', 'aG\n  k=', '!!binary', b'hi', id='yaml11 binary with whitespace'),
    pytest.param(
        'yaml11', '2002-12-14', '!!timestamp',
        datetime(2002, 12, 14, tzinfo=UTC),
        id='yaml11 timestamp',
    ),
))
def test_tagged_scalars(schema_name: str, text: str, tag: str, expected: Any) -> None:  # noqa: ANN401
    """Verify explicitly tagged scalars use the tag grammar."""
    schema = SCHEMAS[schema_name]

    for style in (ScalarStyle.PLAIN, ScalarStyle.DOUBLE_QUOTED):
        assert same(schema.parse_scalar(ScalarValue(text=text, style=style, tag=tag)), expected)


@pytest.mark.parametrize('schema_name, text, tag', (
    pytest.param('yaml12', 'abc', TAG_INT, id='core int'),
    pytest.param('yaml12', '1.5', TAG_INT, id='core int from float'),
    pytest.param('yaml12', 'yes', TAG_BOOL, id='core bool'),
    pytest.param('yaml12', 'nil', TAG_NULL, id='core null'),
    pytest.param('yaml12', 'x', TAG_FLOAT, id='core float'),
    pytest.param('yaml12json', 'True', TAG_BOOL, id='json bool'),
    pytest.param('yaml12json', '.Inf', TAG_FLOAT, id='json float'),
    pytest.param('yaml11', 'maybe', TAG_BOOL, id='yaml11 bool'),
    pytest.param('yaml11', '!!!', TAG_BINARY, id='yaml11 binary'),
    pytest.param('yaml11', 'today', TAG_TIMESTAMP, id='yaml11 timestamp'),
))
def test_tagged_scalar_errors(schema_name: str, text: str, tag: str) -> None:
    """Verify an explicit tag is a strict contract."""
    schema = SCHEMAS[schema_name]

    with pytest.raises(ClassificationError, match=r'does not match tag') as error:
        schema.parse_scalar(plain(text, tag))

    assert error.value.value == text
    assert error.value.tag == tag


def test_failsafe_schema() -> None:
    """Verify the failsafe schema keeps text and structures."""
    schema = get_schema('blank')

    assert schema.parse_scalar(plain('42')) == '42'
    assert schema.parse_scalar(plain('42', '!!int')) == '42'
    assert schema.parse_map(MapValue(entries={'a': '1'})) == {'a': '1'}
    assert schema.emit_scalar(42) == ScalarValue(text='42')
    assert schema.emit_scalar(None) == ScalarValue(text='')
    assert schema.is_scalar(object()) is False


@pytest.mark.parametrize('name', ('yaml12', 'YAML12', None))
def test_get_schema_by_name(name: str | None) -> None:
    """Verify schema lookup is case-insensitive with a default."""
    assert isinstance(get_schema(name), Yaml12Schema)


def test_get_schema_passes_instances() -> None:
    """Verify schema instances are returned unchanged."""
    schema = Schema()

    assert get_schema(schema) is schema


def test_get_schema_unknown() -> None:
    """Verify unknown schema names are rejected."""
    with pytest.raises(SchemaNotFoundError, match=r"^Unknown schema 'yaml13'"):
        get_schema('yaml13')


@pytest.mark.parametrize('value, expected', (
    pytest.param(None, plain('null'), id='null'),
    pytest.param(True, plain('true'), id='true'),
    pytest.param(False, plain('false'), id='false'),
    pytest.param(42, plain('42'), id='int'),
    pytest.param(2 ** 80, plain(str(2 ** 80)), id='big int'),
    pytest.param(1.5, plain('1.5'), id='float'),
    pytest.param(1e16, plain('1.0e+16'), id='float exponent'),
    pytest.param(float('inf'), plain('.inf'), id='infinity'),
    pytest.param(Decimal('2.5'), plain('2.5'), id='decimal'),
    pytest.param(Color.RED, plain('red'), id='string enum'),
    pytest.param(Color.GREEN, plain('2'), id='int enum'),
    pytest.param('text', plain('text'), id='plain string'),
    pytest.param('123', ScalarValue(text='123', style=ScalarStyle.DOUBLE_QUOTED), id='numeric string'),
    pytest.param('true', ScalarValue(text='true', style=ScalarStyle.DOUBLE_QUOTED), id='keyword string'),
    pytest.param('', ScalarValue(text='', style=ScalarStyle.DOUBLE_QUOTED), id='empty string'),
    pytest.param('yes', plain('yes'), id='yes string'),
    pytest.param(b'hi', plain('aGk=', TAG_BINARY), id='bytes'),
    pytest.param(date(2002, 12, 14), plain('2002-12-14'), id='date'),
))
def test_core_emit_scalar(core: 'ResolvingSchema', value: Any, expected: ScalarValue) -> None:  # noqa: ANN401
    """Verify Core schema canonical emission."""
    assert core.emit_scalar(value) == expected


@pytest.mark.parametrize('value, expected', (
    pytest.param('yes', ScalarValue(text='yes', style=ScalarStyle.DOUBLE_QUOTED), id='yes string'),
    pytest.param('1:20', ScalarValue(text='1:20', style=ScalarStyle.DOUBLE_QUOTED), id='sexagesimal string'),
    pytest.param('<<', ScalarValue(text='<<', style=ScalarStyle.DOUBLE_QUOTED), id='merge key string'),
    pytest.param(
        datetime(2001, 12, 14, 21, 59, 43, tzinfo=UTC),
        plain('2001-12-14T21:59:43+00:00'),
        id='timestamp',
    ),
))
def test_yaml11_emit_scalar(yaml11: 'ResolvingSchema', value: Any, expected: ScalarValue) -> None:  # noqa: ANN401
    """Verify YAML 1.1 schema canonical emission."""
    assert yaml11.emit_scalar(value) == expected


@pytest.mark.parametrize('value, expected', (
    pytest.param('text', ScalarValue(text='text', style=ScalarStyle.DOUBLE_QUOTED), id='string'),
    pytest.param(None, plain('null'), id='null'),
    pytest.param(float('inf'), plain('.inf', TAG_FLOAT), id='infinity'),
    pytest.param(float('-inf'), plain('-.inf', TAG_FLOAT), id='negative infinity'),
    pytest.param(float('nan'), plain('.nan', TAG_FLOAT), id='not a number'),
    pytest.param(1.5, plain('1.5'), id='float'),
))
def test_json_emit_scalar(json: 'ResolvingSchema', value: Any, expected: ScalarValue) -> None:  # noqa: ANN401
    """Verify JSON schema canonical emission."""
    assert json.emit_scalar(value) == expected


@pytest.mark.parametrize('schema_name', ('yaml11', 'yaml12', 'yaml12json'))
@pytest.mark.parametrize('value', (
    pytest.param(None, id='null'),
    pytest.param(True, id='bool'),
    pytest.param(-(2 ** 63), id='int64 min'),
    pytest.param(2 ** 100, id='big int'),
    pytest.param(0.1, id='float'),
    pytest.param(-1.5e-300, id='tiny float'),
    pytest.param(float('nan'), id='nan'),
    pytest.param('null', id='null string'),
    pytest.param('0', id='zero string'),
    pytest.param('.inf', id='infinity string'),
    pytest.param('', id='empty string'),
))
def test_emit_parse_identity(schema_name: str, value: Any) -> None:  # noqa: ANN401
    """Verify emitted scalars parse back to an equivalent value."""
    schema = SCHEMAS[schema_name]

    assert same(schema.parse_scalar(schema.emit_scalar(value)), value)


def test_yaml11_merge(yaml11: 'ResolvingSchema') -> None:
    """Verify merge keys expand without overriding own keys."""
    base = {'x': 1, 'y': 2}
    override = {'y': 3}

    result = yaml11.parse_map(MapValue(entries={
        '<<': [override, base],
        'z': 4,
        'x': 9,
    }))

    assert result == {'x': 9, 'y': 3, 'z': 4}


def test_yaml11_merge_requires_maps(yaml11: 'ResolvingSchema') -> None:
    """Verify a non-map merge value is kept as an ordinary entry."""
    assert yaml11.parse_map(MapValue(entries={'<<': 'text'})) == {'<<': 'text'}


def test_core_has_no_merge(core: 'ResolvingSchema') -> None:
    """Verify the Core schema keeps merge keys as strings."""
    assert core.parse_map(MapValue(entries={'<<': {'a': 1}})) == {'<<': {'a': 1}}


def test_str_tag_constant() -> None:
    """Verify the `!!` shorthand expands to the full tag."""
    assert plain('x', '!!str').tag == TAG_STR
