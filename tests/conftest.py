"""Shared test helpers for the constcalc test suite."""

from fractions import Fraction

from constcalc.constant import ComplexValue, FloatValue, IntValue
from constcalc.evaluate import Scope, evaluate
from constcalc.syntax import parse_expr


def ev(source: str, scope: Scope | None = None):
    """Evaluate expression text to a constant value."""
    return evaluate(source, scope)


def parse(source: str):
    """Parse expression text to an expression tree."""
    return parse_expr(source)


def make_time_library() -> Scope:
    """Library scope with exported S, M, H, D (seconds) and a private unit."""
    lib = Scope()
    lib.assign("S", "1")
    lib.assign("M", "60*S")
    lib.assign("H", "60*M")
    lib.assign("D", "24*H")
    lib.assign("ms", "S/1000.0")
    return lib


def i(value: int) -> IntValue:
    """Shorthand for IntValue(value)."""
    return IntValue(value)


def f(num, den=1) -> FloatValue:
    """Shorthand for FloatValue(Fraction(num, den))."""
    return FloatValue(Fraction(num, den))


def c(real, imag) -> ComplexValue:
    """Shorthand for ComplexValue with Fraction components."""
    return ComplexValue(Fraction(real), Fraction(imag))
