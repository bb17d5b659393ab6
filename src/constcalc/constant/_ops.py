"""Operator semantics over exact constant values.

Binary operands are first promoted to their least upper kind
(Int -> Float -> Complex). Bool and String never mix with other kinds.
Nothing here overflows or rounds: Int is an unbounded ``int``, Float an
exact ``Fraction`` and Complex a pair of Fractions.
"""

from __future__ import annotations

import sys
from fractions import Fraction

from constcalc.errors import (
    DivisionByZeroError,
    InvalidShiftError,
    TypeMismatchError,
)
from constcalc.model.expressions import BinaryOp, UnaryOp

from ._values import (
    BoolValue,
    ComplexValue,
    ConstantValue,
    FloatValue,
    IntValue,
    StringValue,
    UnknownValue,
    is_numeric,
    numeric_upper_kind,
    promote,
    to_int,
)


ARITHMETIC_OPS = frozenset({
    BinaryOp.ADD, BinaryOp.SUB, BinaryOp.MUL, BinaryOp.DIV, BinaryOp.MOD,
})

BITWISE_OPS = frozenset({
    BinaryOp.AND, BinaryOp.OR, BinaryOp.XOR, BinaryOp.AND_NOT,
})

SHIFT_OPS = frozenset({BinaryOp.SHL, BinaryOp.SHR})

COMPARISON_OPS = frozenset({
    BinaryOp.EQ, BinaryOp.NE, BinaryOp.LT, BinaryOp.LE, BinaryOp.GT, BinaryOp.GE,
})

LOGICAL_OPS = frozenset({BinaryOp.LAND, BinaryOp.LOR})

_EQUALITY_OPS = frozenset({BinaryOp.EQ, BinaryOp.NE})


def _mismatch(op: BinaryOp | UnaryOp | str, *values: ConstantValue) -> TypeMismatchError:
    name = op.value if isinstance(op, (BinaryOp, UnaryOp)) else op
    return TypeMismatchError(name, [v.kind.value for v in values])


def match_kinds(
    op: BinaryOp, x: ConstantValue, y: ConstantValue,
) -> tuple[ConstantValue, ConstantValue]:
    """Promote ``x`` and ``y`` to a common kind or raise TypeMismatchError."""
    if isinstance(x, UnknownValue) or isinstance(y, UnknownValue):
        raise _mismatch(op, x, y)
    if is_numeric(x) and is_numeric(y):
        kind = numeric_upper_kind(x, y)
        return promote(x, kind), promote(y, kind)
    if x.kind == y.kind:
        return x, y
    raise _mismatch(op, x, y)


# ---------------------------------------------------------------------------
# Unary operators
# ---------------------------------------------------------------------------

def unary_op(op: UnaryOp, x: ConstantValue) -> ConstantValue:
    if op == UnaryOp.NOT:
        if isinstance(x, BoolValue):
            return BoolValue(not x.value)
        raise _mismatch(op, x)

    if op == UnaryOp.XOR:
        if isinstance(x, IntValue):
            return IntValue(~x.value)
        raise _mismatch(op, x)

    if isinstance(x, IntValue):
        return x if op == UnaryOp.POS else IntValue(-x.value)
    if isinstance(x, FloatValue):
        return x if op == UnaryOp.POS else FloatValue(-x.value)
    if isinstance(x, ComplexValue):
        return x if op == UnaryOp.POS else ComplexValue(-x.real, -x.imag)
    raise _mismatch(op, x)


# ---------------------------------------------------------------------------
# Binary operators
# ---------------------------------------------------------------------------

def _trunc_div(a: int, b: int) -> int:
    """Integer quotient truncated toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _complex_div(x: ComplexValue, y: ComplexValue) -> ComplexValue:
    # (a+bi)/(c+di) = ((ac+bd) + (bc-ad)i) / (c^2+d^2)
    a, b, c, d = x.real, x.imag, y.real, y.imag
    s = c * c + d * d
    return ComplexValue((a * c + b * d) / s, (b * c - a * d) / s)


def _is_zero(x: ConstantValue) -> bool:
    if isinstance(x, (IntValue, FloatValue)):
        return x.value == 0
    if isinstance(x, ComplexValue):
        return x.real == 0 and x.imag == 0
    return False


def _arith_int(op: BinaryOp, a: int, b: int) -> IntValue:
    if op == BinaryOp.ADD:
        return IntValue(a + b)
    if op == BinaryOp.SUB:
        return IntValue(a - b)
    if op == BinaryOp.MUL:
        return IntValue(a * b)
    if op == BinaryOp.DIV:
        return IntValue(_trunc_div(a, b))
    # MOD: sign follows the dividend, consistent with truncating division
    return IntValue(a - b * _trunc_div(a, b))


def _arith_float(op: BinaryOp, a: Fraction, b: Fraction) -> FloatValue:
    if op == BinaryOp.ADD:
        return FloatValue(a + b)
    if op == BinaryOp.SUB:
        return FloatValue(a - b)
    if op == BinaryOp.MUL:
        return FloatValue(a * b)
    return FloatValue(a / b)


def _arith_complex(op: BinaryOp, x: ComplexValue, y: ComplexValue) -> ComplexValue:
    if op == BinaryOp.ADD:
        return ComplexValue(x.real + y.real, x.imag + y.imag)
    if op == BinaryOp.SUB:
        return ComplexValue(x.real - y.real, x.imag - y.imag)
    if op == BinaryOp.MUL:
        return ComplexValue(
            x.real * y.real - x.imag * y.imag,
            x.real * y.imag + x.imag * y.real,
        )
    return _complex_div(x, y)


def _arithmetic(op: BinaryOp, x: ConstantValue, y: ConstantValue) -> ConstantValue:
    if isinstance(x, StringValue) and isinstance(y, StringValue) and op == BinaryOp.ADD:
        return StringValue(x.value + y.value)

    x, y = match_kinds(op, x, y)
    if not is_numeric(x):
        raise _mismatch(op, x, y)
    if op == BinaryOp.MOD and not isinstance(x, IntValue):
        raise _mismatch(op, x, y)
    if op in (BinaryOp.DIV, BinaryOp.MOD) and _is_zero(y):
        raise DivisionByZeroError()

    if isinstance(x, IntValue):
        return _arith_int(op, x.value, y.value)
    if isinstance(x, FloatValue):
        return _arith_float(op, x.value, y.value)
    return _arith_complex(op, x, y)


def _bitwise(op: BinaryOp, x: ConstantValue, y: ConstantValue) -> IntValue:
    if not (isinstance(x, IntValue) and isinstance(y, IntValue)):
        raise _mismatch(op, x, y)
    a, b = x.value, y.value
    if op == BinaryOp.AND:
        return IntValue(a & b)
    if op == BinaryOp.OR:
        return IntValue(a | b)
    if op == BinaryOp.XOR:
        return IntValue(a ^ b)
    return IntValue(a & ~b)


def shift(op: BinaryOp, x: ConstantValue, count: ConstantValue) -> IntValue:
    """Unbounded ``<<`` / ``>>`` (arithmetic, rounding toward -inf).

    The operand must be integral; the count must be a non-negative
    integral value. Integral floats are accepted for both. A left shift
    whose result could not be held in memory raises InvalidShiftError.
    """
    value = to_int(x) if isinstance(x, (IntValue, FloatValue)) else None
    if not isinstance(value, IntValue):
        raise _mismatch(op, x, count)

    n = to_int(count) if is_numeric(count) else None
    if not isinstance(n, IntValue) or n.value < 0:
        raise InvalidShiftError(count)

    if op == BinaryOp.SHL:
        if value.value == 0:
            return value
        # The result must still fit in a Python int.
        if n.value > sys.maxsize:
            raise InvalidShiftError(count)
        try:
            return IntValue(value.value << n.value)
        except (OverflowError, MemoryError):
            raise InvalidShiftError(count) from None
    return IntValue(value.value >> n.value)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def compare(op: BinaryOp, x: ConstantValue, y: ConstantValue) -> BoolValue:
    """Exact comparison; ordering is defined for numbers and strings only."""
    x, y = match_kinds(op, x, y)
    if isinstance(x, (BoolValue, ComplexValue)) and op not in _EQUALITY_OPS:
        raise _mismatch(op, x, y)

    if isinstance(x, ComplexValue):
        a, b = (x.real, x.imag), (y.real, y.imag)
    else:
        a, b = x.value, y.value

    if op == BinaryOp.EQ:
        return BoolValue(a == b)
    if op == BinaryOp.NE:
        return BoolValue(a != b)
    if op == BinaryOp.LT:
        return BoolValue(a < b)
    if op == BinaryOp.LE:
        return BoolValue(a <= b)
    if op == BinaryOp.GT:
        return BoolValue(a > b)
    return BoolValue(a >= b)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def binary_op(op: BinaryOp, x: ConstantValue, y: ConstantValue) -> ConstantValue:
    """Apply a (non short-circuiting) binary operator to two values.

    ``&&`` and ``||`` are accepted here on Bool operands; the evaluator
    handles their short-circuit evaluation order.
    """
    if op in ARITHMETIC_OPS:
        return _arithmetic(op, x, y)
    if op in BITWISE_OPS:
        return _bitwise(op, x, y)
    if op in SHIFT_OPS:
        return shift(op, x, y)
    if op in COMPARISON_OPS:
        return compare(op, x, y)
    if op in LOGICAL_OPS:
        if not (isinstance(x, BoolValue) and isinstance(y, BoolValue)):
            raise _mismatch(op, x, y)
        if op == BinaryOp.LAND:
            return BoolValue(x.value and y.value)
        return BoolValue(x.value or y.value)
    raise ValueError(f"Unsupported binary op: {op}")
