"""Bidirectional conversion between YAML nodes and native values.

`NodeParser` walks a composed PyYAML node tree depth first and hands
every scalar, mapping and sequence to the active schema. `ValueEmitter`
walks native values and builds the node tree to serialize, consulting
the schema for every value and applying format metadata on the way.

Emission is bounded by a depth limit: values nested deeper than the
limit, or re-entered through a reference cycle, are written as their
string form and a single `TruncationWarning` is emitted.
"""

from collections.abc import Iterable, Mapping
from dataclasses import fields, is_dataclass
from datetime import date
from decimal import Decimal
from numbers import Real
from reprlib import repr as short_repr
from typing import TYPE_CHECKING, Any
from warnings import warn

from pydantic import BaseModel
from yaml.nodes import MappingNode, ScalarNode, SequenceNode

from yamlcast.errors import (
    ClassificationError,
    FormatWarning,
    MemberAccessError,
    ParseDocumentError,
    TruncationWarning,
)
from yamlcast.formats import unwrap
from yamlcast.nodes import (
    FLOW_STYLES,
    PARSED_FLOW_STYLES,
    PARSED_SCALAR_STYLES,
    SCALAR_STYLES,
    CommentedScalarNode,
)
from yamlcast.values import (
    SCALAR_LIKE,
    TAG_BOOL,
    TAG_FLOAT,
    TAG_INT,
    TAG_NULL,
    TAG_STR,
    TAG_TIMESTAMP,
    CollectionStyle,
    ComplexKey,
    MapValue,
    NullKey,
    ScalarStyle,
    ScalarValue,
    SequenceValue,
    as_key,
)

if TYPE_CHECKING:
    from yaml.nodes import Node

if TYPE_CHECKING:
    from yamlcast.formats import FormatMetadata
    from yamlcast.schemas import Schema
    from yamlcast.values import NativeValue

#: Numeric types emitted as scalars.
NUMERIC = (Real, Decimal)

#: Default number of collection levels emitted below the root.
DEFAULT_DEPTH = 2

#: Tags restoring the type of an implicitly typed scalar, in match order.
RESOLVED_TAGS = (
    (type(None), TAG_NULL),
    (bool, TAG_BOOL),
    (int, TAG_INT),
    (float, TAG_FLOAT),
    (date, TAG_TIMESTAMP),
)


class NodeParser:
    """Convert composed PyYAML nodes into native values.

    Nodes reached through aliases are converted once and the result is
    shared, matching the identity semantics of anchors. A node that
    contains itself is rejected.
    """

    def __init__(self, schema: 'Schema') -> None:
        """Initialize the parser.

        Args:
            schema: Schema typing scalars and building collections.
        """
        self.schema = schema

        self._active: set[int] = set()
        self._resolved: dict[int, NativeValue] = {}

    def parse(self, node: 'Node') -> 'NativeValue':
        """Convert a node and its children.

        Args:
            node: Root node of a document or subtree.

        Returns:
            The native value produced by the schema.

        Raises:
            ParseDocumentError: If a tagged scalar does not match its
                tag or an alias refers to an enclosing node.
        """
        key = id(node)
        if key in self._resolved:
            return self._resolved[key]

        if key in self._active:
            raise ParseDocumentError.from_yaml_node('Recursive alias is not supported', node)

        self._active.add(key)
        try:
            if isinstance(node, MappingNode):
                result = self.parse_mapping(node)
            elif isinstance(node, SequenceNode):
                result = self.parse_sequence(node)
            else:
                result = self.parse_scalar(node)
        finally:
            self._active.discard(key)

        self._resolved[key] = result

        return result

    def parse_scalar(self, node: ScalarNode) -> 'NativeValue':
        value = ScalarValue(
            text=node.value,
            style=PARSED_SCALAR_STYLES.get(node.style, ScalarStyle.PLAIN),
            tag=node.tag,
        )

        try:
            return self.schema.parse_scalar(value)

        except ClassificationError as base:
            raise ParseDocumentError.from_yaml_node(
                f'Failed to unpack yaml node {value.text!r} with tag {value.tag!r}: {base.message}',
                node,
                base,
            ) from base

    def parse_mapping(self, node: MappingNode) -> 'NativeValue':
        entries: dict[Any, Any] = {}
        for key_node, value_node in node.value:
            key = as_key(self.parse(key_node))
            self.schema.collect_entry(entries, key, self.parse(value_node))

        return self.schema.parse_map(MapValue(
            entries=entries,
            style=PARSED_FLOW_STYLES.get(node.flow_style, CollectionStyle.ANY),
            tag=node.tag,
        ))

    def parse_sequence(self, node: SequenceNode) -> 'NativeValue':
        return self.schema.parse_sequence(SequenceValue(
            items=[self.parse(item) for item in node.value],
            style=PARSED_FLOW_STYLES.get(node.flow_style, CollectionStyle.ANY),
            tag=node.tag,
        ))


def read_member(value: 'NativeValue', name: str) -> 'NativeValue':
    """Read a host object member.

    Raises:
        MemberAccessError: If reading the member fails for any reason.
    """
    try:
        return getattr(value, name)

    except Exception as base:
        raise MemberAccessError(
            f'Exception getting "{name}": {type(base).__name__}: {base}',
            member=name,
        ) from base


def member_names(value: 'NativeValue') -> list[str]:
    """List the externally visible members of a host object.

    Pydantic models expose their declared fields and dataclasses their
    fields. Other objects expose public slots, public instance
    attributes and public properties, in declaration order.
    """
    if isinstance(value, BaseModel):
        return list(type(value).model_fields)

    if is_dataclass(value):
        return [field.name for field in fields(value)]

    names: dict[str, None] = {}
    for klass in reversed(type(value).__mro__):
        slots = klass.__dict__.get('__slots__', ())
        for name in (slots,) if isinstance(slots, str) else slots:
            names[name] = None

    names.update(dict.fromkeys(getattr(value, '__dict__', {})))

    for klass in reversed(type(value).__mro__):
        for name, attribute in klass.__dict__.items():
            if isinstance(attribute, property):
                names[name] = None

    return [
        name
        for name in names
        if not name.startswith('_')
    ]


def flatten(value: 'NativeValue') -> dict[str, 'NativeValue']:
    """Flatten a host object into an ordered member mapping.

    Members that cannot be read are replaced by the error message.
    """
    result: dict[str, NativeValue] = {}

    for name in member_names(value):
        try:
            result[name] = read_member(value, name)
        except MemberAccessError as error:
            result[name] = error.message

    return result


class ValueEmitter:
    """Convert native values into a PyYAML node tree."""

    def __init__(self, schema: 'Schema', depth: int = DEFAULT_DEPTH) -> None:
        """Initialize the emitter.

        Args:
            schema: Schema rendering scalars and wrapping collections.
            depth: Number of collection levels emitted below the root.
        """
        self.schema = schema
        self.depth = depth
        self.truncated = False

        self._active: set[int] = set()

    def emit(self, value: 'NativeValue') -> 'Node':
        """Convert a top level value.

        Args:
            value: Native value, optionally wrapped by `annotate`.

        Returns:
            The root node to serialize.
        """
        return self.convert(value, self.depth)

    def is_scalar(self, value: 'NativeValue') -> bool:
        if value is None or isinstance(value, (*SCALAR_LIKE, *NUMERIC)):
            return True

        return self.schema.is_scalar(value)

    def convert(self, value: 'NativeValue', depth: int, *, flow: bool = False) -> 'Node':
        """Convert a value at the given remaining depth.

        Args:
            value: Native value, optionally wrapped by `annotate`.
            depth: Remaining depth; collections below zero are truncated.
            flow: Whether an enclosing collection uses flow style.

        Returns:
            The converted node.
        """
        value, metadata = unwrap(value)

        if self.is_scalar(value):
            return self.scalar_node(self.schema.emit_scalar(value), metadata, flow=flow)

        if depth < 0 or id(value) in self._active:
            self.warn_truncated()
            return self.scalar_node(self.schema.emit_scalar(str(value)), metadata, flow=flow)

        self._active.add(id(value))
        try:
            if isinstance(value, Mapping):
                return self.mapping_node(self.schema.emit_map(value), metadata, depth, flow=flow)

            if isinstance(value, Iterable) and not isinstance(value, BaseModel):
                return self.sequence_node(self.schema.emit_sequence(value), metadata, depth, flow=flow)

            return self.mapping_node(self.schema.emit_map(flatten(value)), metadata, depth, flow=flow)

        finally:
            self._active.discard(id(value))

    def warn_truncated(self) -> None:
        if self.truncated:
            return

        self.truncated = True
        warn(
            'Resulting YAML is truncated as serialization has exceeded '
            f'the set depth of {self.depth}',
            category=TruncationWarning,
            stacklevel=2,
        )

    def scalar_node(self, scalar: ScalarValue, metadata: 'FormatMetadata | None', *,
                    flow: bool) -> CommentedScalarNode:
        style = scalar.style
        tag = scalar.tag

        if metadata and metadata.scalar_style != ScalarStyle.ANY:
            if tag is None:
                tag = self.restore_tag(scalar, metadata.scalar_style)
            style = metadata.scalar_style

        node = CommentedScalarNode(tag, scalar.text, style=SCALAR_STYLES[style])
        if not metadata or flow:
            return node

        node.pre_comment = metadata.pre_comment
        node.post_comment = metadata.post_comment

        if metadata.comment and style.multiline:
            warn(
                f'Inline comment on {short_repr(scalar.text)} is not supported '
                f'with {style} style and was dropped',
                category=FormatWarning,
                stacklevel=2,
            )
        else:
            node.comment = metadata.comment

        return node

    def restore_tag(self, scalar: ScalarValue, style: ScalarStyle) -> str | None:
        """Find the tag keeping an untagged scalar's type under a new style.

        Only plain scalars are resolved implicitly: a quoted string forced
        plain is tagged as a string, and a plain typed scalar forced into
        a quoted or block style is tagged with its resolved type.

        Args:
            scalar: Untagged scalar as rendered by the schema.
            style: Requested style.

        Returns:
            The tag to write, or `None` when the type survives as is.
        """
        was_plain = scalar.style in (ScalarStyle.ANY, ScalarStyle.PLAIN)

        if style == ScalarStyle.PLAIN:
            return None if was_plain else TAG_STR

        if not was_plain:
            return None

        resolved = self.schema.parse_scalar(ScalarValue(text=scalar.text, style=ScalarStyle.PLAIN))
        if isinstance(resolved, str):
            return None

        for types, tag in RESOLVED_TAGS:
            if isinstance(resolved, types):
                return tag

        return None

    def drop_collection_comments(self, value: MapValue | SequenceValue,
                                 metadata: 'FormatMetadata | None', *, flow: bool) -> None:
        if flow or not metadata or not metadata.has_comments:
            return

        container = value.entries if isinstance(value, MapValue) else value.items
        warn(
            f'Comments on collection {short_repr(container)} are not supported '
            'and were dropped, annotate contained values instead',
            category=FormatWarning,
            stacklevel=2,
        )

    def collection_style(self, value: MapValue | SequenceValue,
                         metadata: 'FormatMetadata | None') -> CollectionStyle:
        if metadata and metadata.collection_style != CollectionStyle.ANY:
            return metadata.collection_style

        return value.style

    def mapping_node(self, value: MapValue, metadata: 'FormatMetadata | None',
                     depth: int, *, flow: bool) -> MappingNode:
        self.drop_collection_comments(value, metadata, flow=flow)

        style = self.collection_style(value, metadata)
        flow = flow or style == CollectionStyle.FLOW

        items = []
        for key, item in value.entries.items():
            key_node = self.convert(_native_key(key), depth - 1, flow=flow)
            value_node = self.convert(item, depth - 1, flow=flow)
            items.append((key_node, value_node))

            self.place_key_comments(key_node, value_node)

        return MappingNode(value.tag, items, flow_style=FLOW_STYLES[style])

    def sequence_node(self, value: SequenceValue, metadata: 'FormatMetadata | None',
                      depth: int, *, flow: bool) -> SequenceNode:
        self.drop_collection_comments(value, metadata, flow=flow)

        style = self.collection_style(value, metadata)
        flow = flow or style == CollectionStyle.FLOW

        items = [
            self.convert(item, depth - 1, flow=flow)
            for item in value.items
        ]

        return SequenceNode(value.tag, items, flow_style=FLOW_STYLES[style])

    def place_key_comments(self, key_node: 'Node', value_node: 'Node') -> None:
        """Move a value pre comment before its key and drop key comments.

        A mapping key may only be preceded by comment lines: inline and
        post comments on keys, and any comment on a collection key, have
        no valid place and are dropped with a warning.
        """
        if not isinstance(key_node, CommentedScalarNode):
            if isinstance(value_node, CommentedScalarNode) and value_node.pre_comment:
                _warn_dropped('Pre comment of a value under a collection key')
                value_node.pre_comment = None
            return

        if key_node.comment or key_node.post_comment:
            _warn_dropped(f'Inline and post comments on key {short_repr(key_node.value)}')
            key_node.comment = key_node.post_comment = None

        if isinstance(value_node, CommentedScalarNode) and value_node.pre_comment:
            key_node.pre_comment = '\n'.join(
                comment
                for comment in (key_node.pre_comment, value_node.pre_comment)
                if comment
            )
            value_node.pre_comment = None


def _warn_dropped(subject: str) -> None:
    warn(
        f'{subject} are not supported and were dropped',
        category=FormatWarning,
        stacklevel=3,
    )


def _native_key(key: 'NativeValue') -> 'NativeValue':
    if isinstance(key, NullKey):
        return None

    if isinstance(key, ComplexKey):
        return key.value

    return key
