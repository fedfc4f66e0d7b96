"""YAML stream loading.

This module composes YAML documents with PyYAML and converts every
document with the active schema. The PyYAML resolver is replaced with
one that never assigns implicit tags, so untagged nodes reach the schema
without a tag and all typing decisions are made by the schema.
"""

from typing import TYPE_CHECKING

from yaml.composer import Composer
from yaml.error import YAMLError
from yaml.parser import Parser
from yaml.reader import Reader
from yaml.resolver import BaseResolver
from yaml.scanner import Scanner

from yamlcast.converter import NodeParser
from yamlcast.errors import ParseDocumentError
from yamlcast.schemas import get_schema
from yamlcast.settings import ConversionSettings

if TYPE_CHECKING:
    from io import TextIOBase

if TYPE_CHECKING:
    from yaml.nodes import Node

if TYPE_CHECKING:
    from yamlcast.schemas import Schema
    from yamlcast.values import NativeValue


class PassthroughResolver(BaseResolver):
    """Resolver leaving untagged nodes without a tag.

    The composer asks the resolver for a tag of every node written
    without one; answering `None` keeps the node untagged. The dumper
    uses the same resolver so that only explicit tags are written.
    """

    def resolve(self, kind: type, value: object, implicit: object) -> None:  # noqa: ARG002
        return None


class NodeLoader(Reader, Scanner, Parser, Composer, PassthroughResolver):
    """PyYAML loader composing raw node trees."""

    def __init__(self, stream: 'TextIOBase | str | bytes') -> None:
        Reader.__init__(self, stream)
        Scanner.__init__(self)
        Parser.__init__(self)
        Composer.__init__(self)
        PassthroughResolver.__init__(self)


def compose_all(content: 'TextIOBase | str | bytes') -> list['Node']:
    """Compose every document of a YAML stream.

    Args:
        content: YAML content as a string or file-like object.

    Returns:
        Root nodes of the documents, in stream order.

    Raises:
        ParseDocumentError: If the stream is not valid YAML.
    """
    loader = NodeLoader(content)
    try:
        nodes = []
        while loader.check_node():
            nodes.append(loader.get_node())

    except YAMLError as base:
        raise ParseDocumentError.from_yaml_error(base) from base

    finally:
        loader.dispose()

    return nodes


def load(content: 'TextIOBase | str | bytes',
         schema: 'Schema | str | None' = None) -> list['NativeValue']:
    """Load every document of a YAML stream as native values.

    Args:
        content: YAML content as a string or file-like object.
        schema: Schema instance or registered name; the configured
            default is used when omitted.

    Returns:
        Native values, one per document. An empty stream yields an
        empty list.

    Raises:
        ParseDocumentError: If the stream is not valid YAML or a tagged
            scalar does not match its tag.
        SchemaNotFoundError: If the schema name is not registered.
    """
    if schema is None:
        schema = ConversionSettings().schema_name

    active = get_schema(schema)

    return [
        NodeParser(active).parse(node)
        for node in compose_all(content)
    ]


def loads(text: str, schema: 'Schema | str | None' = None) -> list['NativeValue']:
    """Load every document of a YAML string as native values.

    See `load` for details.
    """
    return load(text, schema)
