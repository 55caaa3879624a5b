"""
Flag Definition Lexer
=====================

Splits flag definition text into parenthesis and atom tokens. Whitespace,
including newlines, only separates tokens; indentation carries no meaning.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List


class TokenKind(str, Enum):
    """Lexical token kinds."""
    LPAREN = "("
    RPAREN = ")"
    ATOM = "atom"


@dataclass(frozen=True)
class Position:
    """Location of a token in the source text (line and column are 1-based)."""
    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    position: Position

    def is_integer(self) -> bool:
        """True for atoms made only of decimal digits."""
        return self.kind is TokenKind.ATOM and self.value.isascii() and self.value.isdigit()


def tokenize(content: str) -> Iterator[Token]:
    """
    Yield tokens from flag definition text.

    Args:
        content: Raw flag definition

    Yields:
        Tokens in source order
    """
    line = 1
    column = 1
    index = 0
    length = len(content)

    while index < length:
        char = content[index]

        if char in "()":
            kind = TokenKind.LPAREN if char == "(" else TokenKind.RPAREN
            yield Token(kind, char, Position(index, line, column))
            index += 1
            column += 1
        elif char.isspace():
            if char == "\n":
                line += 1
                column = 1
            else:
                column += 1
            index += 1
        else:
            start = index
            start_column = column
            while index < length and not content[index].isspace() and content[index] not in "()":
                index += 1
                column += 1
            yield Token(TokenKind.ATOM, content[start:index], Position(start, line, start_column))


def tokenize_all(content: str) -> List[Token]:
    """Tokenize the whole input into a list."""
    return list(tokenize(content))
