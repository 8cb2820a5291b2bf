"""
Kaleido CLI Entrypoint.

This module provides the command-line interface to the Kaleido front end.

Features:
    - Read source from `.kal` files or inline strings.
    - Run the top-level driver, reporting each parsed construct.
    - Print the token stream (`--tokens`).
    - Parse the whole program and print its AST as JSON (`--dump`).
    - Launch an interactive REPL.

Example usage:
    kaleido program.kal
    kaleido -s "def f(x) x*2" --dump
    kaleido -s "1 + 2 # comment" --tokens
    kaleido --repl --verbose

Functions:
    run_kaleido(source: str, is_string: bool = False, tokens: bool = False, dump: bool = False,
                indent: int = 2, verbose: bool = False) -> int:
        Runs the non-interactive pipeline and returns the process exit status.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import json
import sys

from kaleido.kaleido_ast import to_dicts
from kaleido.kaleido_errors import KaleidoSyntaxError
from kaleido.kaleido_lexer import CharacterStream, Lexer
from kaleido.kaleido_parser import Parser
from kaleido.kaleido_repl import report_error, start_driver


def run_kaleido(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    dump: bool = False,
    indent: int = 2,
    verbose: bool = False,
) -> int:
    """
    Run the Kaleido front end over a file or a source string.

    Args:
        source (str): Kaleido source code or path to a `.kal` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): Print the token stream instead of parsing.
        dump (bool): Parse the whole program (stopping at the first error) and print the AST as JSON.
        indent (int): JSON indentation for `dump`.
        verbose (bool): Print each parsed node while driving.

    Returns:
        int: 0 on success, 1 if `tokens` or `dump` hit a syntax error, or the
            AST is nested too deeply to serialize.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.kal'.
    """
    if not is_string and not source.endswith(".kal"):
        raise ValueError("Only .kal files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if tokens:
        try:
            for tok in Lexer(CharacterStream(source)):
                print(repr(tok))
        except KaleidoSyntaxError as e:
            report_error(e, sys.stderr)
            return 1
        return 0

    if dump:
        try:
            ast = Parser(Lexer(CharacterStream(source))).parse()
        except KaleidoSyntaxError as e:
            report_error(e, sys.stderr)
            return 1
        try:
            text = json.dumps(to_dicts(ast), indent=indent)
        except RecursionError:
            print("[error] >>> AST nested too deeply to serialize", file=sys.stderr)
            return 1
        print(text)
        return 0

    start_driver(source, prompt="", verbose=verbose)
    return 0


def main() -> None:
    """
    Entry point for the Kaleido CLI.

    Launches the REPL if no arguments are passed or `--repl` is specified;
    otherwise runs `run_kaleido` and exits with its status.
    """
    if len(sys.argv) == 1:
        from kaleido.kaleido_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="kaleido")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream and exit"
    )
    parser.add_argument(
        "--dump", action="store_true", help="Print the parsed program as JSON"
    )
    parser.add_argument(
        "--indent", type=int, default=2, help="JSON indentation for --dump (default: 2)"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch the interactive REPL"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Print every parsed node"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from kaleido.kaleido_repl import start_repl

        start_repl(verbose=args.verbose)
    else:
        sys.exit(
            run_kaleido(
                source=args.source,
                is_string=args.string,
                tokens=args.tokens,
                dump=args.dump,
                indent=args.indent,
                verbose=args.verbose,
            )
        )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
