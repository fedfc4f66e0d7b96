"""YAML stream dumping.

This module converts native values into PyYAML node trees with the
active schema and serializes them with a PyYAML emitter extended to
write comments carried by scalar nodes:

- pre comments are written on their own lines before a mapping key,
  a sequence item, or a document root scalar;
- inline comments are written after the scalar on the same line;
- post comments are written on their own lines after the scalar.

Tagged scalars requested in plain style are written plain when PyYAML
allows it, so canonical forms such as `!!float .inf` stay unquoted.
"""

from io import StringIO
from typing import TYPE_CHECKING

from yaml.emitter import Emitter
from yaml.events import MappingEndEvent, SequenceEndEvent
from yaml.serializer import Serializer

from yamlcast.converter import ValueEmitter
from yamlcast.loader import PassthroughResolver
from yamlcast.nodes import CommentedScalarEvent, CommentedScalarNode
from yamlcast.schemas import get_schema
from yamlcast.settings import ConversionSettings

if TYPE_CHECKING:
    from collections.abc import Iterable
    from io import TextIOBase

if TYPE_CHECKING:
    from yaml.nodes import Node

if TYPE_CHECKING:
    from yamlcast.schemas import Schema
    from yamlcast.values import NativeValue

#: Leading marker of a comment line.
COMMENT_MARKER = '#'


class CommentEmitter(Emitter):
    """PyYAML emitter writing comments attached to scalar events."""

    def write_comment(self, text: str) -> None:
        self.write_indicator(f'{COMMENT_MARKER} {text}'.rstrip(), True)

    def write_pre_comment(self) -> None:
        """Write pre comment lines of the current event, if any."""
        comment = getattr(self.event, 'pre_comment', None)
        if not comment:
            return

        for line in comment.splitlines():
            self.write_indent()
            self.write_comment(line)
            self.write_line_break()

    def expect_document_root(self) -> None:
        self.write_pre_comment()
        super().expect_document_root()

    def expect_block_sequence_item(self, first: bool = False) -> None:
        if first or not isinstance(self.event, SequenceEndEvent):
            self.write_pre_comment()
        super().expect_block_sequence_item(first)

    def expect_block_mapping_key(self, first: bool = False) -> None:
        if first or not isinstance(self.event, MappingEndEvent):
            self.write_pre_comment()
        super().expect_block_mapping_key(first)

    def expect_scalar(self) -> None:
        event = self.event
        super().expect_scalar()

        if comment := getattr(event, 'comment', None):
            self.write_comment(' '.join(comment.splitlines()))

        if comment := getattr(event, 'post_comment', None):
            for line in comment.splitlines():
                self.write_indent()
                self.write_comment(line)

    def choose_scalar_style(self) -> str:
        """Choose a scalar style, keeping tagged plain scalars plain."""
        if self.analysis is None:
            self.analysis = self.analyze_scalar(self.event.value)

        if (
            self.event.style == ''
            and not self.event.implicit[0]
            and not self.canonical
            and self.allows_plain()
        ):
            return ''

        return super().choose_scalar_style()

    def allows_plain(self) -> bool:
        if self.simple_key_context and (self.analysis.empty or self.analysis.multiline):
            return False

        if self.flow_level:
            return self.analysis.allow_flow_plain

        return self.analysis.allow_block_plain


class NodeSerializer(Serializer):
    """PyYAML serializer emitting comment carrying scalar events.

    Untagged nodes are always implicit and tagged nodes always carry
    their tag, as no implicit resolution takes place.
    """

    def serialize_node(self, node: 'Node', parent: 'Node | None',
                       index: 'Node | int | None') -> None:
        if not isinstance(node, CommentedScalarNode) or node in self.serialized_nodes:
            super().serialize_node(node, parent, index)
            return

        self.serialized_nodes[node] = True
        self.descend_resolver(parent, index)

        implicit = node.tag is None
        self.emit(CommentedScalarEvent(node, (implicit, implicit)))

        self.ascend_resolver()


class NodeDumper(CommentEmitter, NodeSerializer, PassthroughResolver):
    """PyYAML dumper serializing raw node trees."""

    def __init__(self, stream: 'TextIOBase', *,
                 indent: int | None = None,
                 width: int | None = None,
                 allow_unicode: bool | None = None) -> None:
        CommentEmitter.__init__(
            self,
            stream,
            indent=indent,
            width=width,
            allow_unicode=allow_unicode,
        )
        NodeSerializer.__init__(self)
        PassthroughResolver.__init__(self)


def serialize_all(nodes: 'Iterable[Node]', stream: 'TextIOBase', *,
                  settings: ConversionSettings) -> None:
    """Serialize node trees as YAML documents into a stream."""
    dumper = NodeDumper(
        stream,
        indent=settings.indent,
        width=settings.width,
        allow_unicode=settings.allow_unicode,
    )
    try:
        dumper.open()
        for node in nodes:
            dumper.serialize(node)
        dumper.close()

    finally:
        dumper.dispose()


def dump_all(values: 'Iterable[NativeValue]', stream: 'TextIOBase',
             schema: 'Schema | str | None' = None,
             depth: int | None = None) -> None:
    """Write native values as a multi document YAML stream.

    Args:
        values: Native values, optionally wrapped by `annotate`.
        stream: Writable text stream.
        schema: Schema instance or registered name; the configured
            default is used when omitted.
        depth: Number of collection levels emitted below each root; the
            configured default is used when omitted.

    Raises:
        SchemaNotFoundError: If the schema name is not registered.
    """
    settings = ConversionSettings()
    active = get_schema(settings.schema_name if schema is None else schema)
    if depth is None:
        depth = settings.depth

    nodes = [
        ValueEmitter(active, depth).emit(value)
        for value in values
    ]

    serialize_all(nodes, stream, settings=settings)


def dump(value: 'NativeValue', stream: 'TextIOBase',
         schema: 'Schema | str | None' = None,
         depth: int | None = None) -> None:
    """Write a native value as a single YAML document.

    See `dump_all` for details.
    """
    dump_all((value,), stream, schema, depth)


def dumps_all(values: 'Iterable[NativeValue]',
              schema: 'Schema | str | None' = None,
              depth: int | None = None) -> str:
    """Convert native values into a multi document YAML string.

    See `dump_all` for details.
    """
    stream = StringIO()
    dump_all(values, stream, schema, depth)

    return stream.getvalue()


def dumps(value: 'NativeValue',
          schema: 'Schema | str | None' = None,
          depth: int | None = None) -> str:
    """Convert a native value into a YAML string.

    See `dump_all` for details.
    """
    return dumps_all((value,), schema, depth)
