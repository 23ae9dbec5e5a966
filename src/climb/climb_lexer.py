"""
Lexical analyzer for the climb expression language.

This module turns raw source text into a lazy stream of tokens:

Classes:
    CharacterStream: Cursor over the source string.
    Token: A single token with its kind, payload and source span.
    Tokenizer: Pull-based iterator producing tokens from a source string.

Features:
    - Skips whitespace
    - Recognizes:
        * Number literals (`12`, `3.25`; a decimal point needs at least one digit after it)
        * Identifiers and the keywords `let` and `in`
        * Maximal runs of operator characters, checked against the operator table
        * `(` and `)`
    - Errors are sticky: after a LexicalError no further tokens are produced
      and the error can be collected once with `Tokenizer.pop_error()`.

Example:
    >>> tokens = tokenize("let x = 2 in x * 3")
    >>> [tok.type for tok in tokens]
    ['LET', 'IDENT', 'EQUALS', 'NUMBER', 'IN', 'IDENT', 'OPERATOR', 'NUMBER']

Exports:
    - CharacterStream
    - Token
    - Tokenizer
    - tokenize
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from climb.climb_constants import (
    EQUALS,
    IDENT,
    KEYWORDS,
    NUMBER,
    OPERATOR,
    OPERATOR_CHARS,
    OPERATORS,
    PUNCTUATION,
)
from climb.climb_errors import LexicalError
from climb.climb_span import Span, escape_char, render_span

logger = logging.getLogger("climb.lexer")


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class CharacterStream:
    """
    Cursor over a source string.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
    """

    def __init__(self, source: str, position: int = 0):
        self.source = source
        self.position = position

    def next(self) -> str:
        """Consumes and returns the current character.

        Raises:
            IndexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"read past end of source at position=<{self.position}>"
            )
        char = self.source[self.position]
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)

    def advance_while(self, predicate: Any) -> str:
        """Consumes characters while `predicate` holds and returns them."""
        begin = self.position
        while not self.end_of_file() and predicate(self.source[self.position]):
            self.position += 1
        return self.source[begin : self.position]


class Token:
    """A single lexical token.

    Attributes:
        type (str): The token kind (e.g. 'NUMBER', 'IDENT', 'OPERATOR').
        value (Any): float for NUMBER, the name for IDENT, the Operator entry
            for OPERATOR, None for everything else.
        span (Span): Where the token sits in the source.
    """

    def __init__(self, type_: str, value: Any, span: Span):
        self.type = type_
        self.value = value
        self.span = span

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type})"
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.span == other.span
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.span))

    def describe(self, source: str) -> str:
        """One-line dump of the token followed by its underlined source line."""
        payload = "" if self.value is None else str(self.value)
        return f"Token {self.type:<11} {payload}".rstrip() + "\n" + render_span(
            source, self.span
        )


class Tokenizer:
    """Pull-based tokenizer over a source string.

    Iterating yields tokens until the end of input or the first lexical error.
    After an error the iterator is exhausted and `pop_error()` hands back the
    LexicalError exactly once.

    Attributes:
        source (str): The full source text.
        stream (CharacterStream): Cursor over `source`.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.stream = CharacterStream(source)
        self._error: LexicalError | None = None
        self._finished = False

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def pop_error(self) -> LexicalError | None:
        """Returns the pending LexicalError, if any, and clears it."""
        error, self._error = self._error, None
        return error

    def next_token(self) -> Token | None:
        """Produces the next token, or None at end of input or after an error."""
        if self._finished:
            return None
        try:
            token = self._consume_token()
        except LexicalError as e:
            logger.debug("lexical error: %s at %r", e.message, e.span)
            self._error = e
            token = None
        if token is None:
            self._finished = True
        else:
            logger.debug("token %r at %r", token, token.span)
        return token

    def _consume_token(self) -> Token | None:
        self.stream.advance_while(str.isspace)
        if self.stream.end_of_file():
            return None

        ch = self.stream.peek()
        if _is_ascii_digit(ch):
            return self._consume_number()
        if ch.isalpha():
            return self._consume_word()
        if ch in OPERATOR_CHARS:
            return self._consume_operator()

        begin = self.stream.position
        self.stream.next()
        if ch in PUNCTUATION:
            return Token(PUNCTUATION[ch], None, Span(begin, 1))
        raise LexicalError(
            f"illegal start of token: {escape_char(ch)}", Span(begin, 1)
        )

    def _consume_number(self) -> Token:
        begin = self.stream.position
        self.stream.advance_while(_is_ascii_digit)
        if self.stream.peek() == ".":
            self.stream.next()
            after = self.stream.peek()
            if after == "":
                raise LexicalError(
                    "illegal end of input after decimal point",
                    Span.between(begin, self.stream.position),
                )
            if not _is_ascii_digit(after):
                raise LexicalError(
                    f"illegal character after decimal point: {escape_char(after)}",
                    Span.between(begin, self.stream.position),
                )
            self.stream.advance_while(_is_ascii_digit)
        text = self.source[begin : self.stream.position]
        return Token(NUMBER, float(text), Span.between(begin, self.stream.position))

    def _consume_word(self) -> Token:
        begin = self.stream.position
        self.stream.next()
        # an underscore ends the word; it is never part of an identifier
        word = self.source[begin] + self.stream.advance_while(
            lambda c: (c.isalpha() or c.isdecimal()) and c != "_"
        )
        span = Span.between(begin, self.stream.position)
        if word in KEYWORDS:
            return Token(KEYWORDS[word], None, span)
        return Token(IDENT, word, span)

    def _consume_operator(self) -> Token:
        begin = self.stream.position
        run = self.stream.advance_while(lambda c: c in OPERATOR_CHARS)
        span = Span.between(begin, self.stream.position)
        if run == "=":
            return Token(EQUALS, None, span)
        if run not in OPERATORS:
            raise LexicalError(f"unknown binary operator: {run}", span)
        return Token(OPERATOR, OPERATORS[run], span)


def tokenize(source: str) -> list[Token]:
    """Eagerly tokenizes `source`.

    Raises:
        LexicalError: If the source contains a malformed token.
    """
    tokenizer = Tokenizer(source)
    tokens = list(tokenizer)
    error = tokenizer.pop_error()
    if error is not None:
        raise error
    return tokens


__all__ = ["CharacterStream", "Token", "Tokenizer", "tokenize"]
