from collections.abc import Callable

import pytest

from kaleido.kaleido_lexer import CharacterStream, Lexer
from kaleido.kaleido_parser import Parser


@pytest.fixture  # type: ignore[misc]
def parser_for() -> Callable[[str], Parser]:
    def make(source: str) -> Parser:
        return Parser(Lexer(CharacterStream(source)))

    return make
