"""
Kaleido Language Parser

Recursive-descent parser with operator-precedence climbing for binary
expressions. The parser pulls tokens from a `Lexer` on demand and looks at
exactly one token at a time; it never buffers more and never backtracks.

Grammar
-------
    toplevel     ::= definition | external | expression | ';'
    definition   ::= 'def' prototype expression
    external     ::= 'extern' prototype
    prototype    ::= identifier '(' identifier* ')'
    expression   ::= primary binoprhs
    binoprhs     ::= (binop primary)*
    primary      ::= identifierexpr | numberexpr | parenexpr
    identifierexpr
                 ::= identifier
                 ::= identifier '(' (expression (',' expression)*)? ')'
    numberexpr   ::= number
    parenexpr    ::= '(' expression ')'

Binary operators and their precedence: `<` 10, `+` 20, `-` 20, `*` 40,
`/` 40. All are left-associative.

Entry Points
------------
- `parse_definition()`: Parse `def name(params) body`.
- `parse_extern()`: Parse `extern name(params)`.
- `parse_top_level_expr()`: Parse a bare expression into an anonymous Function.
- `parse_expression()`: Parse a single expression.
- `parse()`: Parse a full program, stopping at the first error.

Raises
------
ParseError
    Raised when the token stream does not match the grammar. The error aborts
    the whole construct being parsed; no partial node is produced.
LexError
    Propagated from the lexer when a numeric literal is malformed.
"""

from __future__ import annotations

from kaleido.kaleido_ast import (
    BinaryExpr,
    CallExpr,
    Expr,
    Function,
    NumberExpr,
    Prototype,
    TopLevel,
    VariableExpr,
)
from kaleido.kaleido_constants import (
    BINOP_PRECEDENCE,
    CHAR,
    DEF,
    EOF,
    EXTERN,
    IDENT,
    NUMBER,
)
from kaleido.kaleido_errors import ErrorKind, ParseError
from kaleido.kaleido_lexer import Lexer, Token


class Parser:
    """
    Kaleido Parser Class

    Turns the token stream of a `Lexer` into `Function` and `Prototype` nodes.

    The only state is the current token. Every `parse_*` method starts on the
    first token of its construct and, on success, leaves the current token on
    the first token after it. On failure it raises `ParseError` and leaves the
    current token wherever the failure was detected; resynchronizing is up to
    the caller.

    Attributes
    ----------
    lexer : Lexer
        Source of tokens.
    current_token : Token
        The single token of lookahead.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer: Lexer = lexer
        self.current_token: Token = self.lexer.next_token()

    def current(self) -> Token:
        return self.current_token

    def advance(self) -> Token:
        self.current_token = self.lexer.next_token()
        return self.current_token

    def error(self, kind: ErrorKind) -> ParseError:
        return ParseError(kind, token=self.current_token)

    def expect_char(self, char: str, kind: ErrorKind) -> None:
        """Consumes the character token `char`, or raises `kind`."""
        if not self.current_token.is_char(char):
            raise self.error(kind)
        self.advance()

    def get_token_precedence(self) -> int:
        """Returns the precedence of the current token, or -1 if it is not a binop."""
        tok = self.current_token
        if tok.type != CHAR or not str(tok.value).isascii():
            return -1
        prec = BINOP_PRECEDENCE.get(str(tok.value), 0)
        if prec <= 0:
            return -1
        return prec

    def parse_number_expr(self) -> NumberExpr:
        """numberexpr ::= number"""
        result = NumberExpr(float(self.current_token.value))
        self.advance()
        return result

    def parse_paren_expr(self) -> Expr:
        """parenexpr ::= '(' expression ')'"""
        self.advance()
        expr = self.parse_expression()
        self.expect_char(")", ErrorKind.EXPECTED_CLOSE_PAREN)
        return expr

    def parse_identifier_expr(self) -> Expr:
        """Parse a variable reference, or a call if the name is followed by `(`."""
        name = str(self.current_token.value)
        self.advance()

        if not self.current_token.is_char("("):
            return VariableExpr(name)

        self.advance()
        args: list[Expr] = []
        if not self.current_token.is_char(")"):
            while True:
                args.append(self.parse_expression())
                if self.current_token.is_char(")"):
                    break
                if not self.current_token.is_char(","):
                    raise self.error(ErrorKind.EXPECTED_ARG_SEPARATOR)
                self.advance()

        self.advance()
        return CallExpr(name, tuple(args))

    def parse_primary(self) -> Expr:
        """primary ::= identifierexpr | numberexpr | parenexpr"""
        tok = self.current_token
        if tok.type == IDENT:
            return self.parse_identifier_expr()
        if tok.type == NUMBER:
            return self.parse_number_expr()
        if tok.is_char("("):
            return self.parse_paren_expr()
        raise self.error(ErrorKind.UNEXPECTED_TOKEN)

    def parse_expression(self) -> Expr:
        """expression ::= primary binoprhs"""
        lhs = self.parse_primary()
        return self.parse_bin_op_rhs(0, lhs)

    def parse_bin_op_rhs(self, expr_prec: int, lhs: Expr) -> Expr:
        """Fold trailing `binop primary` pairs into `lhs` by precedence climbing.

        Only operators binding at least as tightly as `expr_prec` are consumed.
        When the operator after a right operand binds tighter than the one
        before it, that operand is first extended into its own subtree.
        """
        while True:
            tok_prec = self.get_token_precedence()
            if tok_prec < expr_prec:
                return lhs

            op = str(self.current_token.value)
            self.advance()

            rhs = self.parse_primary()

            next_prec = self.get_token_precedence()
            if tok_prec < next_prec:
                rhs = self.parse_bin_op_rhs(tok_prec + 1, rhs)

            lhs = BinaryExpr(op, lhs, rhs)

    def parse_prototype(self) -> Prototype:
        """prototype ::= identifier '(' identifier* ')'"""
        if self.current_token.type != IDENT:
            raise self.error(ErrorKind.EXPECTED_FUNCTION_NAME)
        name = str(self.current_token.value)
        self.advance()

        if not self.current_token.is_char("("):
            raise self.error(ErrorKind.EXPECTED_PROTOTYPE_OPEN_PAREN)

        params: list[str] = []
        while self.advance().type == IDENT:
            params.append(str(self.current_token.value))

        self.expect_char(")", ErrorKind.EXPECTED_PROTOTYPE_CLOSE_PAREN)
        return Prototype(name, tuple(params))

    def parse_definition(self) -> Function:
        """definition ::= 'def' prototype expression"""
        self.advance()
        proto = self.parse_prototype()
        body = self.parse_body()
        return Function(proto, body)

    def parse_extern(self) -> Prototype:
        """external ::= 'extern' prototype"""
        self.advance()
        return self.parse_prototype()

    def parse_top_level_expr(self) -> Function:
        """Wrap a bare expression in an anonymous, parameterless Function."""
        body = self.parse_body()
        return Function(Prototype("", ()), body)

    def parse_body(self) -> Expr:
        """Parse the expression of a top-level construct.

        Nesting deeper than the interpreter's recursion limit is reported as a
        `ParseError` on the token where parsing stopped.
        """
        try:
            return self.parse_expression()
        except RecursionError:
            raise self.error(ErrorKind.NESTING_TOO_DEEP) from None

    def parse(self) -> list[TopLevel]:
        """Parse every top-level construct up to end of input (fail-fast)."""
        nodes: list[TopLevel] = []
        while self.current_token.type != EOF:
            tok = self.current_token
            if tok.is_char(";"):
                self.advance()
            elif tok.type == DEF:
                nodes.append(self.parse_definition())
            elif tok.type == EXTERN:
                nodes.append(self.parse_extern())
            else:
                nodes.append(self.parse_top_level_expr())
        return nodes


__all__ = ["Parser"]
