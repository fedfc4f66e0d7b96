"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report malformed documents, scalars that do not match their explicit
tag, unreadable host object members, and non-fatal emission issues in a
structured and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml.error import MarkedYAMLError, YAMLError

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from yaml.error import Mark
    from yaml.nodes import Node

FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values. Line and column numbers are zero based, as reported
    by the YAML engine.
    """

    #: Name of the source where the error occurred.
    filename: str | None

    #: Start line number in the source.
    line_num: int | None
    #: Start column number in the source.
    column_num: int | None

    #: End line number in the source.
    end_line_num: int | None
    #: End column number in the source.
    end_column_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Scalar text that failed classification.
    value: str | None
    #: Tag associated with the failing value.
    tag: str | None


class ErrorFormatter:
    """Utility class for formatting conversion errors.

    This formatter is responsible for producing human-readable
    error messages with optional source location and YAML snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line
            and column numbers when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            line_num += 1
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                column_num += 1
                message += f', column {column_num}'
        message += linesep

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing the underlying exception.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        error = context.get('error')
        if isinstance(error, MarkedYAMLError) and error.problem_mark is not None:
            snippet = error.problem_mark.get_snippet(indent=0) or ''
            return cls._make_indent(snippet, indent)

        return ''

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class TruncationWarning(UserWarning):
    """Warning emitted when emission exceeds the configured depth.

    Values past the depth limit, or values re-entered through a
    reference cycle, are written as their string form instead.
    """


class FormatWarning(UserWarning):
    """Warning emitted when format metadata cannot be honoured.

    Comments attached to collections, mapping keys, or block scalars
    have no valid place in the output and are dropped.
    """


class YamlCastError(Exception, ErrorFormatter):
    """Base exception for all yamlcast errors.

    All custom exceptions raised by the library inherit from this
    class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    def _position(self, key: str) -> int | None:
        if not self.context or (value := self.context.get(key)) is None:
            return None

        return value + 1

    @property
    def start_line(self) -> int | None:
        """One based start line, if known."""
        return self._position('line_num')

    @property
    def start_column(self) -> int | None:
        """One based start column, if known."""
        return self._position('column_num')

    @property
    def end_line(self) -> int | None:
        """One based end line, if known."""
        return self._position('end_line_num')

    @property
    def end_column(self) -> int | None:
        """One based end column, if known."""
        return self._position('end_column_num')

    @classmethod
    def from_yaml_node(cls, message: str, node: 'Node',
                       error: Exception | None = None) -> 'Self':
        """Create an error instance from a YAML node.

        This helper extracts the start and end positions of a PyYAML
        node and attaches them to the resulting error context.

        Args:
            message: Human-readable error message.
            node: YAML node associated with the error.
            error: Optional underlying exception.

        Returns:
            An initialized error instance with location context.
        """
        error_context = ErrorContext(
            **_mark_context(node.start_mark),
            **_mark_context(node.end_mark, prefix='end_'),
            error=error,
        )
        if isinstance(error, ClassificationError) and error.context:
            error_context['value'] = error.context.get('value')
            error_context['tag'] = error.context.get('tag')

        return cls(message, context=error_context)


def _mark_context(mark: 'Mark | None', prefix: str = '') -> dict[str, Any]:
    """Extract zero based positions from a PyYAML mark."""
    if mark is None:
        return {}

    context: dict[str, Any] = {
        f'{prefix}line_num': mark.line,
        f'{prefix}column_num': mark.column,
    }
    if not prefix:
        context['filename'] = mark.name

    return context


class SchemaNotFoundError(YamlCastError, LookupError):
    """Error raised when a schema name is not registered."""


class ClassificationError(YamlCastError, ValueError):
    """Error raised when a tagged scalar does not match its tag grammar.

    An explicit tag is a strict contract: the text must be valid for
    that type. Untagged scalars never raise this error.
    """

    def __init__(self, message: str, *,
                 value: str | None = None,
                 tag: str | None = None,
                 context: ErrorContext | None = None) -> None:
        """Initialize a classification error.

        Args:
            message: Human-readable error description.
            value: Scalar text that failed classification.
            tag: Explicit tag of the scalar.
            context: Optional location context.
        """
        context = ErrorContext(**(context or {}))
        if value is not None:
            context['value'] = value
        if tag is not None:
            context['tag'] = tag

        super().__init__(message, context=context)

    @property
    def value(self) -> str | None:
        return (self.context or {}).get('value')

    @property
    def tag(self) -> str | None:
        return (self.context or {}).get('tag')

    def __str__(self) -> str:
        """String representation."""
        context = {
            key: value
            for key, value in (self.context or {}).items()
            if key not in ('value', 'tag')
        }

        return self.format(self.message, ErrorContext(**context))


class ParseDocumentError(YamlCastError):
    """Error raised when a document cannot be parsed.

    This exception is raised once per malformed document, either for
    a structural error reported by the YAML engine or for a scalar that
    fails its explicit tag.
    """

    @classmethod
    def from_yaml_error(cls, error: YAMLError) -> 'Self':
        """Create a parse error from a YAML engine failure.

        Args:
            error: Exception raised by the YAML engine.

        Returns:
            ParseDocumentError representing the failure, with the
            problem position when the engine reported one.
        """
        if not isinstance(error, MarkedYAMLError):
            return cls(f'Invalid YAML{linesep}{" " * FORMAT_INDENT}{error}')

        mark = error.problem_mark or error.context_mark
        error_context = ErrorContext(**_mark_context(mark), error=error)
        if mark is not None:
            error_context.update(
                end_line_num=mark.line,
                end_column_num=mark.column,
            )

        message = 'Invalid YAML'
        if error.problem:
            message += f'{linesep}{" " * FORMAT_INDENT}{error.problem}'

        return cls(message, context=error_context)


class MemberAccessError(YamlCastError):
    """Error raised when a host object member cannot be read.

    The converter recovers from this error by substituting the error
    message for the member value.
    """

    def __init__(self, message: str, *, member: str) -> None:
        """Initialize a member access error.

        Args:
            message: Human-readable error description.
            member: Name of the member that failed.
        """
        self.member = member

        super().__init__(message)
