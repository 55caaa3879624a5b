"""
Flag Definition Parser
======================

Recursive-descent parser turning flag definition S-expressions into a tree
of flag nodes. Every form starts with a one-letter keyword, so the parser
never needs to backtrack:

    (s COLOR)                      solid color
    (h A B PERCENT) / (v ...)      two-way split, A gets PERCENT
    (h W1 A W2 B ...) / (v ...)    weighted bands
    (t NAME A)                     tag A as NAME
    (r NAME)                       reuse the sub-tree tagged NAME
"""

import re
from typing import Callable, Dict, List, Optional, Type

from flagrant.config.logging import get_logger
from flagrant.core.dsl.lexer import Token, TokenKind, tokenize_all
from flagrant.core.errors import (
    EmptyInput,
    FlagParseError,
    InvalidPercent,
    InvalidWeight,
    MalformedExpression,
    MalformedSplit,
    NestingTooDeep,
    UnbalancedParentheses,
    UnexpectedToken,
    UnknownColor,
)
from flagrant.models.schemas import (
    Axis,
    Band,
    Bands,
    Color,
    FlagNode,
    Reference,
    Solid,
    Split,
    Tagged,
)

logger = get_logger(__name__)

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")

# Deepest allowed nesting of parenthesised expressions
MAX_DEPTH = 100


class FlagParser:
    """Parser for the flag definition language."""

    def __init__(self) -> None:
        self.logger = logger.bind(component="parser")
        self._tokens: List[Token] = []
        self._index = 0
        self._forms: Dict[str, Callable[[Token], FlagNode]] = {
            "s": self._solid,
            "h": self._split,
            "v": self._split,
            "t": self._tag,
            "r": self._reference,
        }

    def parse(self, content: str) -> FlagNode:
        """
        Parse a flag definition into an unresolved flag tree.

        Args:
            content: Raw flag definition text

        Returns:
            Root node of the parsed tree

        Raises:
            FlagParseError: If the definition is not well formed
        """
        if not content or not content.strip():
            raise EmptyInput("Empty flag definition")

        self._tokens = tokenize_all(content)
        self._index = 0
        self._check_balance()

        root = self._expression()

        trailing = self._peek()
        if trailing is not None:
            raise UnexpectedToken(
                f"Unexpected '{trailing.value}' after the end of the flag definition",
                trailing.value,
                trailing.position,
            )

        self.logger.debug(
            "Parsed flag definition",
            tokens=len(self._tokens),
            nodes=sum(1 for _ in root.walk()),
        )
        return root

    def _check_balance(self) -> None:
        """Fail on unclosed '(', stray ')' or runaway nesting before parsing."""
        open_stack: List[Token] = []
        for token in self._tokens:
            if token.kind is TokenKind.LPAREN:
                open_stack.append(token)
                if len(open_stack) > MAX_DEPTH:
                    raise NestingTooDeep(
                        f"Expressions nested deeper than {MAX_DEPTH} levels",
                        token.value,
                        token.position,
                    )
            elif token.kind is TokenKind.RPAREN:
                if not open_stack:
                    raise UnbalancedParentheses(
                        "Unmatched ')'", token.value, token.position
                    )
                open_stack.pop()

        if open_stack:
            unclosed = open_stack[-1]
            raise UnbalancedParentheses("Unclosed '('", unclosed.value, unclosed.position)

    # Token helpers

    def _peek(self) -> Optional[Token]:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            last = self._tokens[-1]
            raise UnbalancedParentheses("Unexpected end of input", None, last.position)
        self._index += 1
        return token

    def _close(self, keyword: str, error: Type[FlagParseError], usage: str) -> None:
        token = self._next()
        if token.kind is not TokenKind.RPAREN:
            raise error(
                f"Too many operands in '{keyword}' form, expected {usage}",
                token.value,
                token.position,
            )

    def _name(self, keyword: str, usage: str) -> str:
        token = self._next()
        if token.kind is not TokenKind.ATOM:
            raise MalformedExpression(
                f"Missing tag name in '{keyword}' form, expected {usage}",
                token.value,
                token.position,
            )
        if not IDENTIFIER.match(token.value):
            raise UnexpectedToken(
                f"Invalid tag name '{token.value}': names start with a letter or '_' "
                f"and contain only letters, digits, '_' and '-'",
                token.value,
                token.position,
            )
        return token.value

    # Grammar

    def _expression(self) -> FlagNode:
        opening = self._next()
        if opening.kind is not TokenKind.LPAREN:
            raise UnexpectedToken(
                f"Expected '(' but found '{opening.value}'", opening.value, opening.position
            )

        keyword = self._next()
        if keyword.kind is TokenKind.RPAREN:
            raise MalformedExpression("Empty expression '()'", "()", opening.position)
        if keyword.kind is TokenKind.LPAREN:
            raise UnexpectedToken(
                "Expected a keyword but found '('", keyword.value, keyword.position
            )

        form = self._forms.get(keyword.value)
        if form is None:
            raise UnexpectedToken(
                f"Unknown keyword '{keyword.value}', expected one of: s, h, v, t, r",
                keyword.value,
                keyword.position,
            )
        return form(keyword)

    def _solid(self, keyword: Token) -> FlagNode:
        usage = "(s COLOR)"
        token = self._next()
        if token.kind is not TokenKind.ATOM:
            raise MalformedExpression(
                f"Missing color in 's' form, expected {usage}", token.value, token.position
            )

        color = Color.from_letter(token.value)
        if color is None:
            letters = ", ".join(c.value for c in Color)
            raise UnknownColor(
                f"Unknown color '{token.value}', expected one of: {letters}",
                token.value,
                token.position,
            )

        self._close("s", MalformedExpression, usage)
        return Solid(color=color)

    def _split(self, keyword: Token) -> FlagNode:
        axis = Axis(keyword.value)
        token = self._peek()
        if token is None or token.kind is TokenKind.RPAREN:
            raise MalformedSplit(
                f"Missing operands in '{keyword.value}' form",
                keyword.value,
                keyword.position,
            )
        if token.kind is TokenKind.LPAREN:
            return self._binary_split(keyword, axis)
        return self._weighted_split(keyword, axis)

    def _binary_split(self, keyword: Token, axis: Axis) -> FlagNode:
        usage = f"({keyword.value} FIRST SECOND PERCENT)"
        first = self._expression()

        token = self._peek()
        if token is None or token.kind is not TokenKind.LPAREN:
            raise MalformedSplit(
                f"Missing second operand in '{keyword.value}' form, expected {usage}",
                token.value if token else None,
                token.position if token else keyword.position,
            )
        second = self._expression()

        token = self._next()
        if token.kind is not TokenKind.ATOM:
            raise MalformedSplit(
                f"Missing percentage in '{keyword.value}' form, expected {usage}",
                token.value,
                token.position,
            )
        percent = self._percent(token)

        self._close(keyword.value, MalformedSplit, usage)
        return Split(axis=axis, percent=percent, first=first, second=second)

    def _weighted_split(self, keyword: Token, axis: Axis) -> FlagNode:
        usage = f"({keyword.value} WEIGHT EXPR [WEIGHT EXPR ...])"
        bands: List[Band] = []

        while True:
            token = self._next()
            if token.kind is TokenKind.RPAREN:
                break
            if token.kind is not TokenKind.ATOM:
                raise MalformedSplit(
                    f"Expected a weight in '{keyword.value}' form, expected {usage}",
                    token.value,
                    token.position,
                )
            weight = self._weight(token)

            following = self._peek()
            if following is None or following.kind is not TokenKind.LPAREN:
                raise MalformedSplit(
                    f"Weight {weight} has no band in '{keyword.value}' form, expected {usage}",
                    token.value,
                    token.position,
                )
            bands.append(Band(weight=weight, node=self._expression()))

        if sum(band.weight for band in bands) == 0:
            raise MalformedSplit(
                f"Weights in '{keyword.value}' form add up to zero",
                keyword.value,
                keyword.position,
            )
        return Bands(axis=axis, bands=tuple(bands))

    def _tag(self, keyword: Token) -> FlagNode:
        usage = "(t NAME EXPR)"
        name = self._name("t", usage)

        token = self._peek()
        if token is None or token.kind is not TokenKind.LPAREN:
            raise MalformedExpression(
                f"Missing tagged expression in 't' form, expected {usage}",
                token.value if token else None,
                token.position if token else keyword.position,
            )
        child = self._expression()

        self._close("t", MalformedExpression, usage)
        return Tagged(name=name, child=child)

    def _reference(self, keyword: Token) -> FlagNode:
        usage = "(r NAME)"
        name = self._name("r", usage)
        self._close("r", MalformedExpression, usage)
        return Reference(name=name)

    # Literals

    @staticmethod
    def _percent(token: Token) -> int:
        digits = token.value.lstrip("0") or "0"
        # More than three significant digits is always out of range
        if not token.is_integer() or len(digits) > 3 or int(digits) > 100:
            raise InvalidPercent(
                f"Invalid percentage '{token.value}', expected an integer from 0 to 100",
                token.value,
                token.position,
            )
        return int(digits)

    @staticmethod
    def _weight(token: Token) -> int:
        if not token.is_integer():
            raise InvalidWeight(
                f"Invalid weight '{token.value}', expected a non-negative integer",
                token.value,
                token.position,
            )
        try:
            return int(token.value)
        except ValueError as e:
            raise InvalidWeight(
                f"Invalid weight '{token.value[:20]}...', too many digits",
                token.value,
                token.position,
            ) from e


def parse_flag(content: str) -> FlagNode:
    """
    Parse flag definition text.

    Args:
        content: Raw flag definition

    Returns:
        Unresolved flag tree

    Raises:
        FlagParseError: If parsing fails
    """
    return FlagParser().parse(content)


def get_supported_colors() -> Dict[str, str]:
    """Map each color letter to its color name."""
    return {color.value: color.name.lower() for color in Color}
