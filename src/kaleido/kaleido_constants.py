"""
Shared token tags and tables for the Kaleido front end.

Token tags:
    EOF, DEF, EXTERN, IDENT, NUMBER, CHAR

Tables:
    keyword_tokens: Maps reserved words to their token tag.
    BINOP_PRECEDENCE: Binding strength of each binary operator character.
    WHITESPACE: ASCII whitespace characters skipped between tokens.
"""

EOF = "EOF"
DEF = "DEF"
EXTERN = "EXTERN"
IDENT = "IDENT"
NUMBER = "NUMBER"
CHAR = "CHAR"

keyword_tokens: dict[str, str] = {
    "def": DEF,
    "extern": EXTERN,
}

# Higher binds tighter; all operators are left-associative.
BINOP_PRECEDENCE: dict[str, int] = {
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
    "/": 40,
}

WHITESPACE = " \t\n\r\x0b\x0c"
COMMENT_START = "#"
LINE_ENDINGS = "\n\r"
