"""Tests for custom schema hooks and dispatch precedence."""

from typing import Any

import pytest

import yamlcast
from yamlcast.schemas import SCHEMAS, CustomSchema, HookSource, Schema, new_schema, resolve_hook
from yamlcast.values import TAG_INT, CollectionStyle, MapValue, ScalarStyle, ScalarValue, SequenceValue
from tests.examples.hosts import Point


def point_scalar(value: Any, base: Schema) -> ScalarValue:  # noqa: ANN401
    if isinstance(value, Point):
        return ScalarValue(text=f'{value.x},{value.y}', style=ScalarStyle.PLAIN, tag='!point')

    return base.emit_scalar(value)


def point_node(value: ScalarValue, base: Schema) -> Point:  # noqa: ARG001
    x, y = value.text.split(',')

    return Point(int(x), int(y))


def test_new_schema_without_overrides() -> None:
    """Verify the base schema is returned when nothing is overridden."""
    assert new_schema() is SCHEMAS['yaml12']
    assert new_schema('yaml11') is SCHEMAS['yaml11']


def test_new_schema_with_overrides() -> None:
    """Verify a custom schema wraps the requested base."""
    schema = new_schema('yaml12json', parse_scalar=lambda value, base: base.parse_scalar(value))

    assert isinstance(schema, CustomSchema)
    assert schema.base is SCHEMAS['yaml12json']
    assert set(schema.hooks) == {'parse_scalar'}


@pytest.mark.parametrize('operation, value, expected', (
    pytest.param(
        'parse_scalar', ScalarValue(text='7', tag='!!int'), HookSource.TAG,
        id='tagged scalar uses tag table',
    ),
    pytest.param(
        'parse_scalar', ScalarValue(text='7'), HookSource.HOOK,
        id='untagged scalar uses hook',
    ),
    pytest.param(
        'parse_scalar', ScalarValue(text='7', tag='!other'), HookSource.HOOK,
        id='unknown tag uses hook',
    ),
    pytest.param(
        'parse_map', MapValue(tag='!!int'), HookSource.TAG,
        id='tagged mapping uses tag table',
    ),
    pytest.param(
        'parse_sequence', SequenceValue(), HookSource.BASE,
        id='no hook uses base',
    ),
    pytest.param(
        'emit_scalar', ScalarValue(text='7', tag='!!int'), HookSource.BASE,
        id='tag table is not used when emitting',
    ),
))
def test_resolve_hook_precedence(operation: str, value: Any, expected: HookSource) -> None:  # noqa: ANN401
    """Verify tag table, then hook, then base schema."""
    schema = CustomSchema(
        SCHEMAS['yaml12'],
        tags={'!!int': lambda value, base: 'tag'},
        parse_scalar=lambda value, base: 'hook',
    )

    source, _ = resolve_hook(schema, operation, value)

    assert source == expected


def test_resolve_hook_unknown_operation() -> None:
    """Verify unknown operation names are rejected."""
    schema = CustomSchema(SCHEMAS['yaml12'])

    with pytest.raises(ValueError, match=r"^Unknown schema operation 'parse_stream'$"):
        resolve_hook(schema, 'parse_stream', None)


def test_tag_handler_receives_base() -> None:
    """Verify tag handlers get the node value and the base schema."""
    calls = []

    def handler(value: ScalarValue, base: Schema) -> int:
        calls.append((value.text, base))
        return base.parse_scalar(ScalarValue(text=value.text)) * 2

    schema = new_schema(tags={TAG_INT: handler})

    assert yamlcast.loads('!!int 21', schema) == [42]
    assert calls == [('21', SCHEMAS['yaml12'])]


def test_custom_scalar_round_trip() -> None:
    """Verify custom scalars through `is_scalar` and a tag handler."""
    schema = new_schema(
        is_scalar=lambda value, base: isinstance(value, Point),
        emit_scalar=point_scalar,
        tags={'!point': point_node},
    )

    document = yamlcast.dumps({'origin': Point(0, 0), 'size': 3}, schema)

    assert '!point' in document
    assert yamlcast.loads(document, schema) == [{'origin': Point(0, 0), 'size': 3}]


def test_custom_collection_hooks() -> None:
    """Verify map and sequence hooks replace collection handling."""
    schema = new_schema(
        parse_map=lambda value, base: sorted(value.entries),
        parse_sequence=lambda value, base: tuple(value.items),
    )

    assert yamlcast.loads('{b: 1, a: [1, 2]}', schema) == [['a', 'b']]
    assert yamlcast.loads('[1, [2, 3]]', schema) == [(1, (2, 3))]


def test_custom_emit_sequence_hook() -> None:
    """Verify an emit hook can change the collection style."""
    schema = new_schema(
        emit_sequence=lambda value, base: base.emit_sequence(value).model_copy(update={'style': CollectionStyle.FLOW}),
    )

    assert yamlcast.dumps({'items': [1, 2]}, schema) == 'items: [1, 2]\n'


def test_tag_table_on_yaml11() -> None:
    """Verify tag handlers take precedence over built-in tags."""
    schema = new_schema('yaml11', tags={'!!bool': lambda value, base: value.text.upper()})

    assert yamlcast.loads('a: !!bool yes\nb: yes', schema) == [{'a': 'YES', 'b': True}]


def test_custom_schema_keeps_base_merge_keys() -> None:
    """Verify repeated merge keys are joined by the wrapped base schema."""
    schema = new_schema('yaml11', parse_sequence=lambda value, base: tuple(value.items))

    result, = yamlcast.loads('a: &a {p: 1}\nb: &b {q: 2}\nc: {<<: *a, <<: *b}\n', schema)

    assert result['c'] == {'p': 1, 'q': 2}
