"""
Flagrant Errors
===============

Exception hierarchy shared by the parser, resolver, renderer and PNG writer.
Every error is raised where it is detected and aborts the pipeline.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from flagrant.core.dsl.lexer import Position


class FlagError(Exception):
    """Base class for all flagrant failures."""

    pass


class FlagParseError(FlagError):
    """Exception raised when a flag definition cannot be parsed."""

    def __init__(
        self,
        message: str,
        token: Optional[str] = None,
        position: Optional["Position"] = None,
    ) -> None:
        self.message = message
        self.token = token
        self.position = position
        super().__init__(self._format())

    def _format(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (line {self.position.line}, column {self.position.column})"


class EmptyInput(FlagParseError):
    """The definition contains no expression at all."""


class UnbalancedParentheses(FlagParseError):
    """A '(' is never closed, or a ')' closes nothing."""


class UnexpectedToken(FlagParseError):
    """A token appears where the grammar does not allow it."""


class MalformedExpression(FlagParseError):
    """A form has the wrong number or kind of operands."""


class MalformedSplit(MalformedExpression):
    """An h/v form matches neither the binary nor the weighted layout."""


class UnknownColor(FlagParseError):
    """A solid names a color letter outside the palette."""


class InvalidPercent(FlagParseError):
    """A split percentage is not an integer in [0, 100]."""


class InvalidWeight(FlagParseError):
    """A band weight is not a non-negative integer."""


class NestingTooDeep(FlagParseError):
    """Expressions are nested deeper than the parser allows."""


class ResolutionError(FlagError):
    """Exception raised when tags and references cannot be resolved."""

    def __init__(self, message: str, name: str) -> None:
        self.name = name
        super().__init__(message)


class UndefinedReference(ResolutionError):
    """A reference names a tag that has not been declared before it."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Reference to undefined tag '{name}'", name)


class DuplicateTag(ResolutionError):
    """The same tag name is declared twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tag '{name}' is already defined", name)


class RenderError(FlagError):
    """Exception raised when a tree cannot be painted onto a canvas."""

    pass


class UnresolvedNodeError(RenderError):
    """A tag or reference reached the renderer."""

    pass


class ImageWriteError(FlagError):
    """Exception raised when the PNG cannot be encoded or written."""

    pass
