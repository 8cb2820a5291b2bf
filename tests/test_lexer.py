import io
import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kaleido.kaleido_errors import ErrorKind, LexError
from kaleido.kaleido_lexer import CharacterStream, Lexer, Token, tokenize


def kinds(source: str) -> list[tuple[str, object]]:
    return [(tok.type, tok.value) for tok in tokenize(source)]


def test_keywords() -> None:
    assert kinds("def extern") == [
        ("DEF", "def"),
        ("EXTERN", "extern"),
        ("EOF", "EOF"),
    ]


def test_keyword_prefix_is_identifier() -> None:
    assert kinds("define def1 externs") == [
        ("IDENT", "define"),
        ("IDENT", "def1"),
        ("IDENT", "externs"),
        ("EOF", "EOF"),
    ]


def test_identifier_maximal_munch() -> None:
    assert kinds("abc123+x") == [
        ("IDENT", "abc123"),
        ("CHAR", "+"),
        ("IDENT", "x"),
        ("EOF", "EOF"),
    ]


def test_underscore_is_not_identifier_character() -> None:
    assert kinds("a_b") == [
        ("IDENT", "a"),
        ("CHAR", "_"),
        ("IDENT", "b"),
        ("EOF", "EOF"),
    ]


def test_number_token() -> None:
    lexer = Lexer(CharacterStream("3.14"))
    tok = lexer.next_token()
    assert tok.type == "NUMBER"
    assert tok.value == 3.14


def test_number_forms() -> None:
    assert kinds("42 .5 7.") == [
        ("NUMBER", 42.0),
        ("NUMBER", 0.5),
        ("NUMBER", 7.0),
        ("EOF", "EOF"),
    ]


def test_number_ends_at_letter() -> None:
    assert kinds("2x") == [("NUMBER", 2.0), ("IDENT", "x"), ("EOF", "EOF")]


def test_single_char_tokens() -> None:
    code = "( ) , ; < + - * / ! ="
    types = [tok.type for tok in tokenize(code)]
    values = [tok.value for tok in tokenize(code)]
    assert types == ["CHAR"] * 11 + ["EOF"]
    assert values[:-1] == code.split()


def test_non_ascii_character_is_char_token() -> None:
    assert kinds("é") == [("CHAR", "é"), ("EOF", "EOF")]


def test_unicode_digit_is_not_a_number() -> None:
    # Arabic-Indic digit three
    assert tokenize("٣")[0].type == "CHAR"


def test_malformed_number_raises() -> None:
    lexer = Lexer(CharacterStream("1.2.3"))
    with pytest.raises(LexError) as excinfo:
        lexer.next_token()
    assert excinfo.value.kind is ErrorKind.INVALID_NUMBER
    assert str(excinfo.value) == "invalid numeric literal '1.2.3'"
    assert (excinfo.value.line, excinfo.value.col) == (1, 1)


def test_lone_dot_raises() -> None:
    with pytest.raises(LexError, match="invalid numeric literal"):
        tokenize(".")


def test_lexing_resumes_after_malformed_number() -> None:
    lexer = Lexer(CharacterStream("1..2 x"))
    with pytest.raises(LexError):
        lexer.next_token()
    tok = lexer.next_token()
    assert tok.type == "IDENT"
    assert tok.value == "x"


def test_skip_whitespace_and_comments() -> None:
    tokens = tokenize("   \n\t  # a comment\n123")
    assert tokens[0].type == "NUMBER"
    assert tokens[0].value == 123.0


def test_comment_terminated_by_carriage_return() -> None:
    assert kinds("# note\r7") == [("NUMBER", 7.0), ("EOF", "EOF")]


def test_comment_at_end_of_input() -> None:
    assert kinds("x # trailing") == [("IDENT", "x"), ("EOF", "EOF")]


def test_many_comment_lines() -> None:
    source = "#c\n" * 5000 + "y"
    assert kinds(source) == [("IDENT", "y"), ("EOF", "EOF")]


def test_token_eof_is_repeatable() -> None:
    lexer = Lexer(CharacterStream(""))
    assert lexer.next_token().type == "EOF"
    assert lexer.next_token().type == "EOF"


def test_line_and_column_tracking() -> None:
    tokens = tokenize("x\n  y")
    assert (tokens[0].line, tokens[0].col) == (1, 1)
    assert (tokens[1].line, tokens[1].col) == (2, 3)


def test_iterating_lexer_stops_before_eof() -> None:
    tokens = list(Lexer(CharacterStream("a b")))
    assert [tok.value for tok in tokens] == ["a", "b"]


def test_lexer_reads_text_stream() -> None:
    lexer = Lexer(CharacterStream(io.StringIO("foo(1)")))
    assert [tok.type for tok in lexer] == ["IDENT", "CHAR", "NUMBER", "CHAR"]


def test_character_stream_methods() -> None:
    stream = CharacterStream("ab")
    assert stream.peek() == "a"
    assert stream.next() == "a"
    assert stream.current() == "b"
    assert not stream.end_of_file()
    stream.next()
    assert stream.end_of_file()
    assert stream.current() is None
    assert stream.peek() == ""


def test_character_stream_next_past_eof_raises() -> None:
    stream = CharacterStream("")
    with pytest.raises(
        Exception, match="CharacterStreamError: Attempted to read past end of source"
    ):
        stream.next()


def test_token_repr_and_eq() -> None:
    t1 = Token("NUMBER", 42.0, 1, 2)
    t2 = Token("NUMBER", 42.0, 1, 2)
    t3 = Token("IDENT", "x")

    assert repr(t1) == "Token(NUMBER, 42.0)"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


def test_token_is_char() -> None:
    assert Token("CHAR", "(").is_char("(")
    assert not Token("CHAR", ")").is_char("(")
    assert not Token("IDENT", "(").is_char("(")


identifiers = st.from_regex(r"[A-Za-z][A-Za-z0-9]{0,15}", fullmatch=True).filter(
    lambda s: s not in ("def", "extern")
)


@given(identifiers)  # type: ignore[misc]
def test_identifier_carries_exact_text(name: str) -> None:
    assert kinds(name) == [("IDENT", name), ("EOF", "EOF")]


@given(st.from_regex(r"(?:[0-9]{1,10}(\.[0-9]{0,10})?|\.[0-9]{1,10})", fullmatch=True))  # type: ignore[misc]
def test_number_value_matches_decimal_parse(text: str) -> None:
    tokens = tokenize(text)
    assert tokens[0].type == "NUMBER"
    assert tokens[0].value == float(text)


token_texts = st.one_of(
    identifiers,
    st.sampled_from(["def", "extern"]),
    st.from_regex(r"[0-9]{1,4}(\.[0-9]{1,3})?", fullmatch=True),
    st.sampled_from(list("()+-*/<,;")),
)
separators = st.sampled_from([" ", "\t", "\n", "\r\n", "  # note\n", " #x\r", "\n\n# c\n  "])


@given(st.lists(token_texts, min_size=1, max_size=12), st.data())  # type: ignore[misc]
def test_whitespace_and_comments_are_transparent(
    texts: list[str], data: st.DataObject
) -> None:
    spaced = " ".join(texts)
    decorated = "".join(text + data.draw(separators) for text in texts)
    assert kinds(spaced) == kinds(decorated)


@given(st.text(alphabet=string.printable.replace(".", ""), max_size=80))  # type: ignore[misc]
def test_relexing_reproduces_token_sequence(text: str) -> None:
    assert tokenize(text) == tokenize(text)


@given(st.text(max_size=100))  # type: ignore[misc]
def test_lexer_does_not_crash_on_random_input(text: str) -> None:
    lexer = Lexer(CharacterStream(text))
    while True:
        try:
            tok = lexer.next_token()
        except LexError as e:
            assert e.kind is ErrorKind.INVALID_NUMBER
            continue
        if tok.type == "EOF":
            break
