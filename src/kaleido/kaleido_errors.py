"""
Error types raised by the Kaleido lexer and parser.

Every failure is a `SyntaxError` subclass carrying structured data: the
`ErrorKind`, a human-readable message naming the expected construct, and the
token (if any) and position where it was detected. Callers decide how to
surface it.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kaleido.kaleido_lexer import Token


class ErrorKind(Enum):
    INVALID_NUMBER = "invalid numeric literal"
    UNEXPECTED_TOKEN = "unknown token when expecting an expression"
    EXPECTED_CLOSE_PAREN = "expected ')'"
    EXPECTED_ARG_SEPARATOR = "Expected ')' or ',' in argument list"
    EXPECTED_FUNCTION_NAME = "Expected function name in prototype"
    EXPECTED_PROTOTYPE_OPEN_PAREN = "Expected '(' in prototype"
    EXPECTED_PROTOTYPE_CLOSE_PAREN = "Expected ')' in prototype"
    NESTING_TOO_DEEP = "expression nested too deeply"


class KaleidoSyntaxError(SyntaxError):
    """Base class for lexical and grammatical failures.

    Attributes:
        kind (ErrorKind): What went wrong.
        message (str): Description naming the expected construct.
        token (Token | None): The offending token, when one was read.
        line (int): 1-based line of the failure.
        col (int): 1-based column of the failure.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        token: Token | None = None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        self.kind = kind
        self.message = message or kind.value
        self.token = token
        self.line = token.line if token is not None and not line else line
        self.col = token.col if token is not None and not col else col
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Returns the message prefixed with its source position."""
        return f"line {self.line}, col {self.col}: {self.message}"


class LexError(KaleidoSyntaxError):
    """Raised by the lexer when characters cannot form a token."""


class ParseError(KaleidoSyntaxError):
    """Raised by the parser when the token stream violates the grammar."""


__all__ = ["ErrorKind", "KaleidoSyntaxError", "LexError", "ParseError"]
