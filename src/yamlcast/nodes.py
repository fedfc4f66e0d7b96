"""PyYAML nodes and events carrying comments.

The converter builds a PyYAML node tree for emission; scalar nodes may
carry comments, which the serializer copies onto scalar events for the
emitter to write.
"""

from yaml.events import ScalarEvent
from yaml.nodes import ScalarNode

from yamlcast.values import CollectionStyle, ScalarStyle

#: PyYAML scalar style characters, keyed by scalar style.
#: An empty string requests plain style even for tagged scalars.
SCALAR_STYLES: dict[ScalarStyle, str | None] = {
    ScalarStyle.ANY: None,
    ScalarStyle.PLAIN: '',
    ScalarStyle.SINGLE_QUOTED: "'",
    ScalarStyle.DOUBLE_QUOTED: '"',
    ScalarStyle.LITERAL: '|',
    ScalarStyle.FOLDED: '>',
}

#: Scalar styles keyed by the style character reported by the parser.
PARSED_SCALAR_STYLES: dict[str | None, ScalarStyle] = {
    None: ScalarStyle.PLAIN,
    '': ScalarStyle.PLAIN,
    "'": ScalarStyle.SINGLE_QUOTED,
    '"': ScalarStyle.DOUBLE_QUOTED,
    '|': ScalarStyle.LITERAL,
    '>': ScalarStyle.FOLDED,
}

#: PyYAML flow style flags, keyed by collection style.
FLOW_STYLES: dict[CollectionStyle, bool | None] = {
    CollectionStyle.ANY: None,
    CollectionStyle.BLOCK: False,
    CollectionStyle.FLOW: True,
}

#: Collection styles keyed by the flow flag reported by the parser.
PARSED_FLOW_STYLES: dict[bool | None, CollectionStyle] = {
    None: CollectionStyle.ANY,
    False: CollectionStyle.BLOCK,
    True: CollectionStyle.FLOW,
}


class CommentedScalarNode(ScalarNode):
    """Scalar node with optional comments around it."""

    def __init__(self, tag: str | None, value: str, *,
                 style: str | None = None,
                 pre_comment: str | None = None,
                 comment: str | None = None,
                 post_comment: str | None = None) -> None:
        super().__init__(tag, value, style=style)

        self.pre_comment = pre_comment
        self.comment = comment
        self.post_comment = post_comment

    @property
    def has_comments(self) -> bool:
        return any((self.pre_comment, self.comment, self.post_comment))


class CommentedScalarEvent(ScalarEvent):
    """Scalar event with optional comments around it."""

    def __init__(self, node: CommentedScalarNode,
                 implicit: tuple[bool, bool]) -> None:
        super().__init__(None, node.tag, implicit, node.value, style=node.style)

        self.pre_comment = node.pre_comment
        self.comment = node.comment
        self.post_comment = node.post_comment
