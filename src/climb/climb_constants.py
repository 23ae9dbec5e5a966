"""
Fixed tables shared by the climb tokenizer and parser.

The operator registry maps each operator symbol to its precedence,
associativity and evaluation function. It is built once at import time and
never mutated.

Exports:
    - Operator
    - OPERATORS
    - OPERATOR_CHARS
    - KEYWORDS
    - UNARY_PRECEDENCE
    - LEFT, RIGHT
    - token kind names (NUMBER, IDENT, ...)
"""

import math
import operator
from collections.abc import Callable
from typing import Literal, NamedTuple

LEFT = "LEFT"
RIGHT = "RIGHT"

# Token kinds
NUMBER = "NUMBER"
IDENT = "IDENT"
OPERATOR = "OPERATOR"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LET = "LET"
IN = "IN"
EQUALS = "EQUALS"

TOKEN_TYPES = (NUMBER, IDENT, OPERATOR, LPAREN, RPAREN, LET, IN, EQUALS)

KEYWORDS: dict[str, str] = {"let": LET, "in": IN}

PUNCTUATION: dict[str, str] = {"(": LPAREN, ")": RPAREN}

OPERATOR_CHARS = frozenset("!#$%*+-/<=>?@\\^|~")

# Operands of prefix + and - are parsed at this level, above every binary
# operator, so -2 ** 2 groups as [-2 ** 2].
UNARY_PRECEDENCE = 4


class Operator(NamedTuple):
    symbol: str
    precedence: int
    assoc: Literal["LEFT", "RIGHT"]
    apply: Callable[[float, float], float]

    def __repr__(self) -> str:
        return f"Operator({self.symbol!r})"

    def __str__(self) -> str:
        return self.symbol


def _divide(lhs: float, rhs: float) -> float:
    if rhs == 0.0:
        if lhs == 0.0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs


def _remainder(lhs: float, rhs: float) -> float:
    if rhs == 0.0 or math.isinf(lhs):
        return math.nan
    return math.fmod(lhs, rhs)


def _power(lhs: float, rhs: float) -> float:
    try:
        return math.pow(lhs, rhs)
    except OverflowError:
        if lhs < 0 and _is_odd(rhs):
            return -math.inf
        return math.inf
    except ValueError:
        # 0 ** negative or negative ** fraction
        if lhs == 0.0:
            return math.copysign(math.inf, lhs) if _is_odd(rhs) else math.inf
        return math.nan


def _is_odd(value: float) -> bool:
    return value.is_integer() and value % 2 == 1


def _compare(op: Callable[[float, float], bool]) -> Callable[[float, float], float]:
    return lambda lhs, rhs: 1.0 if op(lhs, rhs) else 0.0


OPERATORS: dict[str, Operator] = {
    op.symbol: op
    for op in (
        Operator("<", 0, LEFT, _compare(operator.lt)),
        Operator("<=", 0, LEFT, _compare(operator.le)),
        Operator(">", 0, LEFT, _compare(operator.gt)),
        Operator(">=", 0, LEFT, _compare(operator.ge)),
        Operator("==", 0, LEFT, _compare(operator.eq)),
        Operator("!=", 0, LEFT, _compare(operator.ne)),
        Operator("+", 1, LEFT, operator.add),
        Operator("-", 1, LEFT, operator.sub),
        Operator("*", 2, LEFT, operator.mul),
        Operator("/", 2, LEFT, _divide),
        Operator("%", 2, LEFT, _remainder),
        Operator("**", 3, RIGHT, _power),
    )
}

UNARY_OPERATORS = frozenset({"+", "-"})


__all__ = [
    "EQUALS",
    "IDENT",
    "IN",
    "KEYWORDS",
    "LEFT",
    "LET",
    "LPAREN",
    "NUMBER",
    "OPERATOR",
    "OPERATORS",
    "OPERATOR_CHARS",
    "PUNCTUATION",
    "RIGHT",
    "RPAREN",
    "TOKEN_TYPES",
    "UNARY_OPERATORS",
    "UNARY_PRECEDENCE",
    "Operator",
]
