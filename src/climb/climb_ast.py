"""
Defines the abstract syntax tree (AST) node classes for the climb expression language.

Classes:
    Expr: Base class of every node.
    Literal: A number literal.
    Var: A variable reference.
    Binop: A binary operator applied to two operands.
    FnCall: `name(arg)` call syntax.
    Paren: An explicit parenthesized group, kept so rendering reproduces it.
    Negate: Unary minus.
    LetIn: `let name = bound in body`.
    ASTDict: TypedDict shape produced by `Expr.to_dict()`.

Each node:
    - owns its children exclusively and is never mutated after construction
    - compares structurally with `==`
    - renders a structural echo with `str()`, e.g. `[1.0 + [2.0 * 3.0]]`
    - renders re-parseable source with `to_source()`, e.g. `1.0 + 2.0 * 3.0`
    - serialises to plain dicts with `to_dict()` (used for JSON output)
    - evaluates with `evaluate(env)`

Example:
    node = Binop(OPERATORS["+"], Literal(1.0), Var("x"))
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import TYPE_CHECKING, Any, TypedDict

from climb.climb_constants import Operator

if TYPE_CHECKING:  # pragma: no cover
    from climb.climb_eval import Environment


class ASTDict(TypedDict, total=False):
    """
    Serialised form of an Expr node.

    Fields:
        kind (str): Node kind ("literal", "var", "binop", ...).
        value (Any): The literal value, variable/function/binding name, or operator symbol.
        children (list[ASTDict]): Child nodes in evaluation order.
    """

    kind: str
    value: Any
    children: list["ASTDict"]


class Expr:
    """Base class for expression nodes.

    Subclasses set `kind` and implement `children`, `__str__`, `to_source` and
    `_key` (the fields compared by `==`).
    """

    kind = "expr"

    @property
    def children(self) -> list[Expr]:
        return []

    @property
    def value(self) -> Any:
        return None

    def _key(self) -> tuple[Any, ...]:
        raise NotImplementedError  # pragma: no cover

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((self.kind, self._key()))

    def __repr__(self) -> str:
        parts = [self.kind]
        if self.value is not None:
            parts.append(f"value={self.value!r}")
        if self.children:
            parts.append(f"children={self.children!r}")
        return f"Expr({', '.join(parts)})"

    def to_source(self) -> str:
        raise NotImplementedError  # pragma: no cover

    def to_dict(self) -> ASTDict:
        val = self.value
        if isinstance(val, Operator):
            val = val.symbol
        return {
            "kind": self.kind,
            "value": val,
            "children": [c.to_dict() for c in self.children],
        }

    def evaluate(self, env: Environment | None = None) -> float:
        """Evaluates this tree against `env` (a fresh empty dict if omitted)."""
        from climb.climb_eval import evaluate

        return evaluate(self, env)


def _format_number(value: float) -> str:
    # positional notation only; the lexer has no exponent syntax
    if math.isinf(value):
        # one digit past the largest finite float, so it overflows again
        return ("-" if value < 0 else "") + "1" + "0" * 309 + ".0"
    text = repr(value)
    if "e" not in text:
        return text
    text = format(Decimal(text), "f")
    return text if "." in text else text + ".0"


class Literal(Expr):
    kind = "literal"

    def __init__(self, value: float) -> None:
        self._value = value

    @property
    def value(self) -> float:
        return self._value

    def _key(self) -> tuple[Any, ...]:
        return (self._value,)

    def __str__(self) -> str:
        return repr(self._value)

    def to_source(self) -> str:
        return _format_number(self._value)


class Var(Expr):
    kind = "var"

    def __init__(self, name: str) -> None:
        self.name = name

    @property
    def value(self) -> str:
        return self.name

    def _key(self) -> tuple[Any, ...]:
        return (self.name,)

    def __str__(self) -> str:
        return self.name

    def to_source(self) -> str:
        return self.name


class Binop(Expr):
    """`lhs op rhs`; rendered with square brackets to show the grouping."""

    kind = "binop"

    def __init__(self, op: Operator, lhs: Expr, rhs: Expr) -> None:
        self.op = op
        self.lhs = lhs
        self.rhs = rhs

    @property
    def value(self) -> Operator:
        return self.op

    @property
    def children(self) -> list[Expr]:
        return [self.lhs, self.rhs]

    def _key(self) -> tuple[Any, ...]:
        return (self.op.symbol, self.lhs, self.rhs)

    def __str__(self) -> str:
        return f"[{self.lhs} {self.op.symbol} {self.rhs}]"

    def to_source(self) -> str:
        return f"{self.lhs.to_source()} {self.op.symbol} {self.rhs.to_source()}"


class FnCall(Expr):
    """`name(arg)`. The name is carried but never resolved."""

    kind = "call"

    def __init__(self, name: str, arg: Expr) -> None:
        self.name = name
        self.arg = arg

    @property
    def value(self) -> str:
        return self.name

    @property
    def children(self) -> list[Expr]:
        return [self.arg]

    def _key(self) -> tuple[Any, ...]:
        return (self.name, self.arg)

    def __str__(self) -> str:
        return f"{self.name}({self.arg})"

    def to_source(self) -> str:
        return f"{self.name}({self.arg.to_source()})"


class Paren(Expr):
    kind = "paren"

    def __init__(self, inner: Expr) -> None:
        self.inner = inner

    @property
    def children(self) -> list[Expr]:
        return [self.inner]

    def _key(self) -> tuple[Any, ...]:
        return (self.inner,)

    def __str__(self) -> str:
        return f"({self.inner})"

    def to_source(self) -> str:
        return f"({self.inner.to_source()})"


class Negate(Expr):
    kind = "negate"

    def __init__(self, inner: Expr) -> None:
        self.inner = inner

    @property
    def children(self) -> list[Expr]:
        return [self.inner]

    def _key(self) -> tuple[Any, ...]:
        return (self.inner,)

    def __str__(self) -> str:
        return f"-{self.inner}"

    def to_source(self) -> str:
        inner = self.inner.to_source()
        # "--" would lex as a single unknown operator
        if inner.startswith("-"):
            return f"- {inner}"
        return f"-{inner}"


class LetIn(Expr):
    """`let name = bound in body`; the binding is visible only inside `body`."""

    kind = "let"

    def __init__(self, name: str, bound: Expr, body: Expr) -> None:
        self.name = name
        self.bound = bound
        self.body = body

    @property
    def value(self) -> str:
        return self.name

    @property
    def children(self) -> list[Expr]:
        return [self.bound, self.body]

    def _key(self) -> tuple[Any, ...]:
        return (self.name, self.bound, self.body)

    def __str__(self) -> str:
        return f"let {self.name} = {self.bound} in {self.body}"

    def to_source(self) -> str:
        return f"let {self.name} = {self.bound.to_source()} in {self.body.to_source()}"


__all__ = [
    "ASTDict",
    "Binop",
    "Expr",
    "FnCall",
    "LetIn",
    "Literal",
    "Negate",
    "Paren",
    "Var",
]
