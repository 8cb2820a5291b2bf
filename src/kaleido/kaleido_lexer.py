"""
Lexical analyzer for the Kaleido expression language.

This module converts raw source text into a stream of tokens, one token per
call, reading characters strictly left to right with a single character of
lookahead.

Classes:
    CharacterStream: Forward-only character reader with line/column tracking.
    Token: A single token with its tag, payload, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips ASCII whitespace and `#` line comments
    - Maximal-munch identifiers (`def` and `extern` are keywords)
    - Numbers as runs of digits and `.`, converted to float
    - Every other character is returned as a single-character token

Raises:
    LexError: If a run of digits and dots is not a valid number (e.g. `1.2.3`).

Example:
    >>> lexer = Lexer(CharacterStream("def f(x) x+1"))
    >>> lexer.next_token()
    Token(DEF, def)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

import io
from collections.abc import Iterator
from typing import Any, TextIO

from kaleido.kaleido_constants import (
    CHAR,
    COMMENT_START,
    EOF,
    IDENT,
    LINE_ENDINGS,
    NUMBER,
    WHITESPACE,
    keyword_tokens,
)
from kaleido.kaleido_errors import ErrorKind, LexError


class CharacterStream:
    """
    A forward-only character reader with line and column tracking.

    The stream wraps either a source string or any text stream (such as
    `sys.stdin`). Characters are pulled from the underlying reader one at a
    time and only when the lexer asks for them, so an interactive session
    never blocks on input it does not need yet.

    Attributes:
        reader (TextIO): The underlying text source.
        line (int): Line number of the lookahead character (1-indexed).
        column (int): Column number of the lookahead character (1-indexed).
    """

    def __init__(self, source: str | TextIO, line: int = 1, column: int = 1):
        """
        Initializes the character stream.

        Args:
            source (str | TextIO): Source text, or a readable text stream.
            line (int, optional): Starting line number. Defaults to 1.
            column (int, optional): Starting column number. Defaults to 1.
        """
        self.reader: TextIO = io.StringIO(source) if isinstance(source, str) else source
        self.line = line
        self.column = column
        self._lookahead: str | None = None

    def peek(self) -> str:
        """
        Returns the lookahead character without consuming it.

        Returns:
            str: The next character, or an empty string at end of input.
        """
        if self._lookahead is None:
            self._lookahead = self.reader.read(1)
        return self._lookahead

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The consumed character.

        Raises:
            Exception: If reading past the end of the source.
        """
        char = self.peek()
        if char == "":
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at line=<{self.line}>, column=<{self.column}>"
            )
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self._lookahead = None
        return char

    def current(self) -> str | None:
        """Returns the lookahead character, or None at end of input."""
        char = self.peek()
        return char if char else None

    def end_of_file(self) -> bool:
        """Checks whether every character of the source has been consumed."""
        return self.peek() == ""


class Token:
    """Represents a single lexical token.

    Attributes:
        type (str): The token tag (`EOF`, `DEF`, `EXTERN`, `IDENT`, `NUMBER`, `CHAR`).
        value (str | float): Identifier text, keyword text, numeric value, or the
            literal character.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: str | float, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))

    def is_char(self, char: str) -> bool:
        """Checks whether this is the single-character token `char`."""
        return self.type == CHAR and self.value == char


def is_ascii_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def is_ascii_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


def is_ascii_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


class Lexer:
    """Lexical analyzer for Kaleido.

    The Lexer holds no token history: each call to `next_token` reads as many
    characters as the next token needs and leaves the character that ended it
    in the stream's lookahead.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens until end of input (the EOF token is not yielded)."""
        while True:
            tok = self.next_token()
            if tok.type == EOF:
                return
            yield tok

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in front of the next token."""
        while not self.stream.end_of_file():
            if self.peek() in WHITESPACE:
                self.advance()
            elif self.peek() == COMMENT_START:
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        """Advances up to (not past) the line ending that closes a comment."""
        while not self.stream.end_of_file() and self.peek() not in LINE_ENDINGS:
            self.advance()

    def read_identifier(self) -> str:
        ident = ""
        while is_ascii_alnum(self.peek()):
            ident += self.advance()
        return ident

    def read_number(self, line: int, col: int) -> float:
        text = ""
        while is_ascii_digit(self.peek()) or self.peek() == ".":
            text += self.advance()
        try:
            return float(text)
        except ValueError:
            raise LexError(
                ErrorKind.INVALID_NUMBER,
                f"invalid numeric literal '{text}'",
                line=line,
                col=col,
            ) from None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token; `EOF` once the input is exhausted.

        Raises:
            LexError: If a run of digits and dots is not a valid number.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(EOF, "EOF", line, col)

        ch = self.peek()

        # 1. Identifier or keyword
        if is_ascii_letter(ch):
            ident = self.read_identifier()
            return Token(keyword_tokens.get(ident, IDENT), ident, line, col)

        # 2. Number
        if is_ascii_digit(ch) or ch == ".":
            return Token(NUMBER, self.read_number(line, col), line, col)

        # 3. Operators, punctuation and anything else
        return Token(CHAR, self.advance(), line, col)


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely, returning every token including the final EOF."""
    lexer = Lexer(CharacterStream(source))
    tokens = list(lexer)
    tokens.append(lexer.next_token())
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
