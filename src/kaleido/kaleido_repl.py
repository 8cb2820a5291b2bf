"""
Top-level driver and interactive REPL for Kaleido.

The driver repeatedly looks at the parser's current token and dispatches to
the matching entry point:

    EOF      -> stop
    ';'      -> skip
    'def'    -> Parser.parse_definition
    'extern' -> Parser.parse_extern
    other    -> Parser.parse_top_level_expr

Successes are reported as a one-line notice, failures as a one-line
diagnostic; after a failure one token is discarded and the loop carries on.
The parsed nodes are not kept.
"""

import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from kaleido.kaleido_ast import TopLevel
from kaleido.kaleido_constants import DEF, EOF, EXTERN
from kaleido.kaleido_errors import KaleidoSyntaxError
from kaleido.kaleido_lexer import CharacterStream, Lexer
from kaleido.kaleido_parser import Parser

PROMPT = "ready> "


@dataclass
class ReplStats:
    parsed: int = 0
    failed: int = 0


def report_error(error: SyntaxError, err: TextIO) -> None:
    message = error.describe() if isinstance(error, KaleidoSyntaxError) else str(error)
    print(f"[error] >>> {message}", file=err)


def skip_token(parser: Parser, err: TextIO) -> None:
    """Discards the current token, reporting any lexical errors met on the way."""
    while True:
        try:
            parser.advance()
            return
        except SyntaxError as e:
            report_error(e, err)


class Driver:
    """Runs the top-level loop over a parser, writing notices to the given streams.

    Attributes:
        parser (Parser): The parser positioned on the next top-level construct.
        out (TextIO): Destination of prompts.
        err (TextIO): Destination of parse notices and diagnostics.
        prompt (str): Written before every top-level attempt; empty for none.
        verbose (bool): Also print the repr of every parsed node.
    """

    def __init__(
        self,
        parser: Parser,
        out: TextIO | None = None,
        err: TextIO | None = None,
        prompt: str = PROMPT,
        verbose: bool = False,
    ) -> None:
        self.parser = parser
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.prompt = prompt
        self.verbose = verbose
        self.stats = ReplStats()

    def _handle(self, parse: Callable[[], TopLevel], notice: str) -> TopLevel | None:
        try:
            node = parse()
        except SyntaxError as e:
            self.stats.failed += 1
            report_error(e, self.err)
            skip_token(self.parser, self.err)
            return None
        self.stats.parsed += 1
        print(notice, file=self.err)
        if self.verbose:
            try:
                text = repr(node)
            except RecursionError:
                text = f"{type(node).__name__}(...) nested too deeply to display"
            print(f"[ast] >>> {text}", file=self.err)
        return node

    def handle_definition(self) -> TopLevel | None:
        return self._handle(self.parser.parse_definition, "Parsed a function definition.")

    def handle_extern(self) -> TopLevel | None:
        return self._handle(self.parser.parse_extern, "Parsed an extern")

    def handle_top_level_expression(self) -> TopLevel | None:
        return self._handle(self.parser.parse_top_level_expr, "Parsed a top-level expr")

    def main_loop(self, prompted: bool = False) -> ReplStats:
        """top ::= definition | external | expression | ';'

        Args:
            prompted (bool): The prompt for the first construct was already
                written (before the first token was read).
        """
        while True:
            if self.prompt and not prompted:
                print(self.prompt, end="", file=self.out, flush=True)
            prompted = False
            tok = self.parser.current()
            if tok.type == EOF:
                return self.stats
            if tok.is_char(";"):
                skip_token(self.parser, self.err)
            elif tok.type == DEF:
                self.handle_definition()
            elif tok.type == EXTERN:
                self.handle_extern()
            else:
                self.handle_top_level_expression()


def start_driver(
    source: str | TextIO,
    out: TextIO | None = None,
    err: TextIO | None = None,
    prompt: str = PROMPT,
    verbose: bool = False,
) -> ReplStats:
    """Builds the lexer/parser pipeline over `source` and runs the top-level loop.

    A lexical error on the very first token is reported and skipped like any
    other.
    """
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    lexer = Lexer(CharacterStream(source))
    if prompt:
        print(prompt, end="", file=out, flush=True)
    while True:
        try:
            parser = Parser(lexer)
            break
        except SyntaxError as e:
            report_error(e, err)
    driver = Driver(parser, out=out, err=err, prompt=prompt, verbose=verbose)
    return driver.main_loop(prompted=bool(prompt))


def start_repl(verbose: bool = False) -> None:
    print("Kaleido REPL. Press Ctrl-D to leave.")
    try:
        stats = start_driver(sys.stdin, verbose=verbose)
    except KeyboardInterrupt:
        print("\nExiting Kaleido REPL.")
        return
    print(f"\nExiting Kaleido REPL. ({stats.parsed} parsed, {stats.failed} failed)")
