"""
Evaluates climb ASTs against a variable environment.

The `Evaluator` dispatches each node to an `eval_<kind>` method, the same way
the parser's output is walked everywhere else in the package.

Semantics:
    - literal: its value
    - var: looked up in the environment; missing names raise UnboundVariableError
    - binop: left operand, then right operand, then the operator function
    - call: the value of its argument (function names are not resolved)
    - paren: the value of its inner expression
    - negate: the negated inner value
    - let: the bound value is computed in the current environment, installed
      for the body, and the previous binding is restored afterwards, also
      when the body raises

Example:
    >>> evaluate(parse("let x = 3 in x + 1"))
    4.0
"""

import logging

from climb.climb_ast import Binop, Expr, FnCall, LetIn, Literal, Negate, Paren, Var
from climb.climb_errors import UnboundVariableError

logger = logging.getLogger("climb.eval")

Environment = dict[str, float]
"""Maps variable names to their current values."""

_UNBOUND = object()


class Evaluator:
    """Walks an AST and computes its value.

    Attributes:
        env (Environment): The variables in scope; only `let` evaluation
            changes it, and always puts it back the way it found it.
    """

    def __init__(self, env: Environment | None = None) -> None:
        self.env: Environment = {} if env is None else env

    def visit(self, node: Expr) -> float:
        """Evaluates `node`.

        Raises:
            NotImplementedError: If there is no `eval_<kind>` method for the node.
            UnboundVariableError: If a variable has no binding.
        """
        method = getattr(self, f"eval_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No evaluator for node kind '{node.kind}'")
        return method(node)

    def eval_literal(self, node: Literal) -> float:
        return node.value

    def eval_var(self, node: Var) -> float:
        try:
            return self.env[node.name]
        except KeyError:
            raise UnboundVariableError(node.name) from None

    def eval_binop(self, node: Binop) -> float:
        lhs = self.visit(node.lhs)
        rhs = self.visit(node.rhs)
        return node.op.apply(lhs, rhs)

    def eval_call(self, node: FnCall) -> float:
        return self.visit(node.arg)

    def eval_paren(self, node: Paren) -> float:
        return self.visit(node.inner)

    def eval_negate(self, node: Negate) -> float:
        return -self.visit(node.inner)

    def eval_let(self, node: LetIn) -> float:
        bound = self.visit(node.bound)
        previous = self.env.get(node.name, _UNBOUND)
        logger.debug("bind %s = %r", node.name, bound)
        self.env[node.name] = bound
        try:
            return self.visit(node.body)
        finally:
            if previous is _UNBOUND:
                del self.env[node.name]
            else:
                self.env[node.name] = previous  # type: ignore[assignment]
            logger.debug("unbind %s", node.name)


def evaluate(expr: Expr, env: Environment | None = None) -> float:
    """Evaluates `expr` against `env`, or against an empty environment."""
    return Evaluator(env).visit(expr)


__all__ = ["Environment", "Evaluator", "evaluate"]
