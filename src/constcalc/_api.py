"""Module-level narrowing functions.

Each evaluates its expression in a fresh, empty Scope (literals and
builtin functions only) and narrows the result.
"""

from __future__ import annotations

from constcalc.evaluate import Scope
from constcalc.model.expressions import Expression
from constcalc.model.types import MachineType


def narrow(expr: str | Expression, target: MachineType) -> object:
    """Evaluate ``expr`` and narrow it to ``target``."""
    return Scope().narrow(expr, target)


def int64(expr: str | Expression) -> int:
    """Evaluate ``expr`` as a signed 64-bit integer.

    ``"1<<100 + 2 - 1<<100"`` is 2: intermediate values are unbounded.
    """
    return Scope().int64(expr)


def uint64(expr: str | Expression) -> int:
    return Scope().uint64(expr)


def float64(expr: str | Expression) -> float:
    return Scope().float64(expr)


def float32(expr: str | Expression) -> float:
    return Scope().float32(expr)


def complex128(expr: str | Expression) -> complex:
    return Scope().complex128(expr)


def complex64(expr: str | Expression) -> complex:
    return Scope().complex64(expr)


def boolean(expr: str | Expression) -> bool:
    return Scope().boolean(expr)


def string(expr: str | Expression) -> str:
    return Scope().string(expr)


def bytestring(expr: str | Expression) -> bytes:
    return Scope().bytestring(expr)
