"""Format metadata carried alongside native values.

Native values may be primitives or objects without spare storage, so
style and comment intent is attached by wrapping the value instead of
mutating it. The converter unwraps `Formatted` values while emitting
and applies the metadata to the produced node.
"""

from typing import Any

from pydantic import Field

from yamlcast.models import SchemaModel
from yamlcast.values import CollectionStyle, ScalarStyle


class FormatMetadata(SchemaModel):
    """Requested style and comments for one emitted value."""

    collection_style: CollectionStyle = Field(
        default=CollectionStyle.ANY,
        title='Collection style',
        description='Style of a sequence or mapping; `any` keeps the schema default.',
    )

    scalar_style: ScalarStyle = Field(
        default=ScalarStyle.ANY,
        title='Scalar style',
        description='Style of a scalar; `any` keeps the schema default.',
    )

    comment: str | None = Field(
        default=None,
        title='Inline comment',
        description='Comment written on the same line, after the value.',
    )

    pre_comment: str | None = Field(
        default=None,
        title='Pre comment',
        description='Comment lines written before the value.',
    )

    post_comment: str | None = Field(
        default=None,
        title='Post comment',
        description='Comment lines written after the value.',
    )

    @property
    def has_comments(self) -> bool:
        return any((self.comment, self.pre_comment, self.post_comment))


class Formatted(SchemaModel):
    """A native value annotated with format metadata."""

    value: Any = Field(
        title='Value',
        description='The wrapped native value.',
    )

    format: FormatMetadata = Field(
        default_factory=FormatMetadata,
        title='Format',
        description='Style and comments to apply when emitting.',
    )


def annotate(value: Any, *,  # noqa: ANN401, PLR0913
             scalar_style: ScalarStyle | str = ScalarStyle.ANY,
             collection_style: CollectionStyle | str = CollectionStyle.ANY,
             comment: str | None = None,
             pre_comment: str | None = None,
             post_comment: str | None = None) -> Formatted:
    """Attach style and comment intent to a value.

    Annotating an already annotated value updates its metadata: fields
    given here replace the previous ones, unset fields are kept.

    Args:
        value: Native value to annotate.
        scalar_style: Style used when the value is emitted as a scalar.
        collection_style: Style used when the value is a collection.
        comment: Inline comment placed after a scalar on the same line.
        pre_comment: Comment lines placed before the value.
        post_comment: Comment lines placed after the value.

    Returns:
        The wrapped value.
    """
    updates = FormatMetadata(
        scalar_style=scalar_style,
        collection_style=collection_style,
        comment=comment,
        pre_comment=pre_comment,
        post_comment=post_comment,
    ).model_dump(exclude_defaults=True)

    if isinstance(value, Formatted):
        return Formatted(
            value=value.value,
            format=value.format.model_copy(update=updates),
        )

    return Formatted(value=value, format=FormatMetadata(**updates))


def unwrap(value: Any) -> tuple[Any, FormatMetadata | None]:  # noqa: ANN401
    """Split a possibly annotated value into the value and its metadata."""
    if isinstance(value, Formatted):
        return value.value, value.format

    return value, None
