"""Predeclared builtin functions: len, real, imag, complex, min, max.

Each entry of ``BUILTIN_FUNCTIONS`` maps a name to
``(function, min_args, max_args)``; ``max_args`` is None for variadic
functions. Arity is checked by the evaluator before the call.
"""

from __future__ import annotations

from collections.abc import Callable

from constcalc.constant import (
    ComplexValue,
    ConstantValue,
    FloatValue,
    IntValue,
    StringValue,
    ValueKind,
    is_numeric,
    numeric_upper_kind,
    promote,
    to_complex,
    to_float,
)
from constcalc.errors import TypeMismatchError


def _mismatch(name: str, *args: ConstantValue) -> TypeMismatchError:
    return TypeMismatchError(name, [a.kind.value for a in args])


def _len(s: ConstantValue) -> IntValue:
    """len(s): byte length of a string."""
    if not isinstance(s, StringValue):
        raise _mismatch("len", s)
    return IntValue(len(s.value))


def _real(x: ConstantValue) -> FloatValue:
    c = to_complex(x)
    if not isinstance(c, ComplexValue):
        raise _mismatch("real", x)
    return FloatValue(c.real)


def _imag(x: ConstantValue) -> FloatValue:
    c = to_complex(x)
    if not isinstance(c, ComplexValue):
        raise _mismatch("imag", x)
    return FloatValue(c.imag)


def _complex(re: ConstantValue, im: ConstantValue) -> ComplexValue:
    """complex(re, im): both parts must be real numbers."""
    r, i = to_float(re), to_float(im)
    if not (isinstance(r, FloatValue) and isinstance(i, FloatValue)):
        raise _mismatch("complex", re, im)
    return ComplexValue(r.value, i.value)


def _ordered(name: str, args: tuple[ConstantValue, ...]) -> list[ConstantValue]:
    """Bring min/max operands to one ordered kind (real numbers or strings)."""
    if all(isinstance(a, StringValue) for a in args):
        return list(args)
    if all(is_numeric(a) for a in args):
        kind = numeric_upper_kind(*args)
        if kind != ValueKind.COMPLEX:
            return [promote(a, kind) for a in args]
    raise _mismatch(name, *args)


def _min(*args: ConstantValue) -> ConstantValue:
    return min(_ordered("min", args), key=lambda v: v.value)


def _max(*args: ConstantValue) -> ConstantValue:
    return max(_ordered("max", args), key=lambda v: v.value)


BUILTIN_FUNCTIONS: dict[str, tuple[Callable[..., ConstantValue], int, int | None]] = {
    "len": (_len, 1, 1),
    "real": (_real, 1, 1),
    "imag": (_imag, 1, 1),
    "complex": (_complex, 2, 2),
    "min": (_min, 1, None),
    "max": (_max, 1, None),
}
