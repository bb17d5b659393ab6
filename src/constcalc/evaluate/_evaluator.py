"""Evaluator: tree-walking interpreter for constant expressions.

The ``Evaluator`` reduces an expression tree to a single exact constant
value, resolving identifiers against a ``Scope``. It never narrows and
never returns ``UNKNOWN``: any failure raises a ``CalcError``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from constcalc.constant import (
    BoolValue,
    ConstantValue,
    binary_op,
    parse_literal,
    unary_op,
)
from constcalc.errors import (
    ArgumentCountError,
    ExprSyntaxError,
    TypeMismatchError,
    UnknownIdentifierError,
)
from constcalc.model.expressions import (
    BinaryExpr,
    BinaryOp,
    CallExpr,
    Expression,
    IdentifierExpr,
    LiteralExpr,
    ParenExpr,
    UnaryExpr,
)
from constcalc.syntax import parse_expr

from ._builtins import BUILTIN_FUNCTIONS

if TYPE_CHECKING:
    from ._scope import Scope


class Evaluator:
    """Tree-walking evaluator bound to one Scope.

    Parameters
    ----------
    scope : Scope
        Resolves plain (``name``) and qualified (``ns.Name``) identifiers.
    """

    def __init__(self, scope: Scope) -> None:
        self.scope = scope

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def evaluate(self, expr: Expression) -> ConstantValue:
        try:
            return self._eval(expr)
        except RecursionError:
            raise ExprSyntaxError("expression nested too deeply", expr.pos) from None

    # -----------------------------------------------------------------------
    # Expression dispatch
    # -----------------------------------------------------------------------

    def _eval(self, expr: Expression) -> ConstantValue:
        handler = self._EXPR_DISPATCH.get(expr.kind)
        if handler is None:
            raise ValueError(f"Unsupported expression kind: {expr.kind}")
        return handler(self, expr)

    def _eval_literal(self, expr: LiteralExpr) -> ConstantValue:
        try:
            return parse_literal(expr.literal, expr.value)
        except ValueError as e:
            raise ExprSyntaxError(str(e), expr.pos) from None

    def _eval_identifier(self, expr: IdentifierExpr) -> ConstantValue:
        if expr.namespace is None:
            return self.scope.lookup(expr.name)
        return self.scope.lookup_qualified(expr.namespace, expr.name)

    def _eval_unary(self, expr: UnaryExpr) -> ConstantValue:
        return unary_op(expr.op, self._eval(expr.operand))

    def _eval_binary(self, expr: BinaryExpr) -> ConstantValue:
        # Left-associative chains (1 + 2 + ... + n) are left-deep trees;
        # walk the left spine with an explicit stack, then fold upward.
        spine: list[BinaryExpr] = []
        node: Expression = expr
        while isinstance(node, BinaryExpr):
            spine.append(node)
            node = node.left
        value = self._eval(node)
        while spine:
            value = self._apply_binary(spine.pop(), value)
        return value

    def _apply_binary(self, expr: BinaryExpr, left: ConstantValue) -> ConstantValue:
        if expr.op in (BinaryOp.LAND, BinaryOp.LOR):
            return self._apply_logical(expr, left)
        return binary_op(expr.op, left, self._eval(expr.right))

    def _apply_logical(self, expr: BinaryExpr, left: ConstantValue) -> ConstantValue:
        # Short-circuit: the right operand is not evaluated when the left
        # one decides the result.
        if not isinstance(left, BoolValue):
            raise TypeMismatchError(expr.op.value, [left.kind.value])
        if expr.op == BinaryOp.LAND and not left.value:
            return left
        if expr.op == BinaryOp.LOR and left.value:
            return left
        return binary_op(expr.op, left, self._eval(expr.right))

    def _eval_paren(self, expr: ParenExpr) -> ConstantValue:
        return self._eval(expr.inner)

    def _eval_call(self, expr: CallExpr) -> ConstantValue:
        name = expr.function_name
        if name not in BUILTIN_FUNCTIONS:
            raise UnknownIdentifierError(name)
        func, min_args, max_args = BUILTIN_FUNCTIONS[name]

        got = len(expr.args)
        if got < min_args or (max_args is not None and got > max_args):
            if max_args is None:
                expected = f"at least {min_args}"
            else:
                expected = str(min_args)
            raise ArgumentCountError(name, expected, got)

        args = [self._eval(a) for a in expr.args]
        return func(*args)

    # Expression dispatch table
    _EXPR_DISPATCH: dict[str, Callable[[Evaluator, Expression], ConstantValue]] = {
        "literal": _eval_literal,
        "identifier": _eval_identifier,
        "unary": _eval_unary,
        "binary": _eval_binary,
        "paren": _eval_paren,
        "call": _eval_call,
    }


def evaluate(expr: str | Expression, scope: Scope | None = None) -> ConstantValue:
    """Evaluate expression text (or a parsed tree) to an exact constant.

    Without a scope the expression is evaluated in an empty Scope, so
    only literals and builtin functions are available.
    """
    if scope is None:
        from ._scope import Scope
        scope = Scope()
    tree = parse_expr(expr) if isinstance(expr, str) else expr
    return Evaluator(scope).evaluate(tree)
