"""
Exception hierarchy for the climb expression language.

Keep this module small and dependency-free: it is imported by the lexer, the
parser, the evaluator and the tests.

Classes:
    ClimbError: Base class for every error raised on bad input.
    SpanError: An error anchored to a range of the original source.
    LexicalError: Raised by the tokenizer (illegal character, bad number, unknown operator).
    ParseError: Raised by the parser (wrong token, premature end of input, trailing tokens).
    EvalError: Raised during evaluation; carries no source location.
    UnboundVariableError: A variable was read outside of any binding.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from climb.climb_span import Span


class ClimbError(Exception):
    """Base exception for all climb errors."""


class SpanError(ClimbError):
    """An error that points at the offending substring of the source.

    Attributes:
        message (str): Human readable description, without the `error:` prefix.
        span (Span): Range in the original source the error refers to.
        kind (str): Either "lexical" or "syntax".
    """

    kind = "span"

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, {self.span!r})"


class LexicalError(SpanError):
    """Raised when the tokenizer cannot form a token."""

    kind = "lexical"


class ParseError(SpanError):
    """Raised when the token stream does not match the grammar."""

    kind = "syntax"


class EvalError(ClimbError):
    """Raised when a well-formed expression cannot be evaluated."""


class UnboundVariableError(EvalError):
    """Raised when a variable is read that has no binding in the environment.

    Attributes:
        name (str): The identifier that was looked up.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"unbound variable: {name}")
        self.name = name
