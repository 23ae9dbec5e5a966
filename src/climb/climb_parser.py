"""
climb Expression Parser

Parses climb source text into an abstract syntax tree using precedence
climbing.

The parser pulls tokens from a `Tokenizer` one at a time and keeps exactly one
token of lookahead. It never backtracks.

Grammar
-------
    expr    := primary (OPERATOR expr)*          precedence climbing
    primary := IDENT "(" expr ")"                function call
             | IDENT                             variable
             | NUMBER                            literal
             | "(" expr ")"                      group
             | "+" primary | "-" primary         unary, binds tighter than any binary operator
             | "let" IDENT "=" expr "in" expr    local binding

Binary operators, their precedence and associativity come from
`climb_constants.OPERATORS`.

Entry Points
------------
- `Parser(source).parse()`: Parse a complete expression.
- `parse(source)`: Module-level shortcut.

Raises
------
LexicalError
    Raised when the tokenizer rejects the input.
ParseError
    Raised when the token stream does not form a single complete expression.
"""

from __future__ import annotations

import logging

from climb.climb_ast import Binop, Expr, FnCall, LetIn, Literal, Negate, Paren, Var
from climb.climb_constants import (
    EQUALS,
    IDENT,
    IN,
    LEFT,
    LET,
    LPAREN,
    NUMBER,
    OPERATOR,
    RPAREN,
    UNARY_OPERATORS,
    UNARY_PRECEDENCE,
)
from climb.climb_errors import ParseError
from climb.climb_lexer import Token, Tokenizer
from climb.climb_span import Span

logger = logging.getLogger("climb.parser")


class Parser:
    """
    climb Parser Class

    Attributes
    ----------
    source : str
        The complete source text; used to anchor end-of-input errors.
    tokenizer : Tokenizer
        Token producer for `source`.
    current : Token | None
        The lookahead token, or None at end of input.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokenizer = Tokenizer(source)
        self.current: Token | None = None
        self.bump()

    def bump(self) -> None:
        """Moves the lookahead to the next token.

        Raises:
            LexicalError: If the tokenizer stopped because of malformed input.
        """
        self.current = self.tokenizer.next_token()
        if self.current is None:
            error = self.tokenizer.pop_error()
            if error is not None:
                raise error

    def eof_span(self) -> Span:
        return Span.eof(self.source)

    def fatal(self, message: str, span: Span) -> ParseError:
        logger.debug("syntax error: %s at %r", message, span)
        return ParseError(message, span)

    def expect(self, type_: str) -> Token:
        """Consumes the lookahead if it has kind `type_`, otherwise raises."""
        tok = self.current
        if tok is None:
            raise self.fatal(f"expected {type_}, got eof", self.eof_span())
        if tok.type != type_:
            raise self.fatal(f"expected {type_}, got {tok.type}", tok.span)
        self.bump()
        return tok

    def parse(self) -> Expr:
        """Parse a complete expression; nothing may follow it."""
        expr = self.parse_expr(0)
        if self.current is not None:
            raise self.fatal(
                f"unexpected token {self.current.type}, expected eof",
                self.current.span,
            )
        logger.debug("parsed %s", expr)
        return expr

    def parse_expr(self, min_prec: int) -> Expr:
        """Parse an expression whose binary operators bind at least `min_prec`."""
        lhs = self.parse_primary()
        while (
            self.current is not None
            and self.current.type == OPERATOR
            and self.current.value.precedence >= min_prec
        ):
            op = self.current.value
            self.bump()
            next_min = max(min_prec, op.precedence)
            if op.assoc == LEFT:
                next_min += 1
            rhs = self.parse_expr(next_min)
            lhs = Binop(op, lhs, rhs)
        return lhs

    def parse_primary(self) -> Expr:
        tok = self.current
        if tok is None:
            raise self.fatal("illegal eof", self.eof_span())
        self.bump()

        if tok.type == IDENT:
            if self.current is not None and self.current.type == LPAREN:
                self.bump()
                arg = self.parse_expr(0)
                self.expect(RPAREN)
                return FnCall(tok.value, arg)
            return Var(tok.value)

        if tok.type == NUMBER:
            return Literal(tok.value)

        if tok.type == LPAREN:
            inner = self.parse_expr(0)
            self.expect(RPAREN)
            return Paren(inner)

        if tok.type == OPERATOR:
            if tok.value.symbol not in UNARY_OPERATORS:
                raise self.fatal(
                    f"unexpected binary operator: {tok.value.symbol}", tok.span
                )
            operand = self.parse_expr(UNARY_PRECEDENCE)
            if tok.value.symbol == "-":
                return Negate(operand)
            return operand

        if tok.type == LET:
            return self.parse_let()

        raise self.fatal(f"unexpected token: {tok.type}", tok.span)

    def parse_let(self) -> LetIn:
        """Parse the rest of `let name = bound in body` after the keyword."""
        name = self.expect(IDENT)
        self.expect(EQUALS)
        bound = self.parse_expr(0)
        self.expect(IN)
        body = self.parse_expr(0)
        return LetIn(name.value, bound, body)


def parse(source: str) -> Expr:
    """Parses `source` into an AST.

    Raises:
        LexicalError: On malformed tokens.
        ParseError: On malformed expressions.
    """
    return Parser(source).parse()


__all__ = ["Parser", "parse"]
