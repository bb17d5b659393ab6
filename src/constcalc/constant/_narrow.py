"""Narrowing: exact constant value -> Python machine value.

The only lossy step is float rounding, which picks the nearest value of
the target format. Everything else must be exact or it fails with
``NotRepresentableError``.
"""

from __future__ import annotations

import math
from fractions import Fraction

from constcalc.errors import NotRepresentableError
from constcalc.model.types import (
    COMPLEX_TYPES,
    FLOAT_TYPES,
    INTEGER_BOUNDS,
    MachineType,
)

from ._values import (
    BoolValue,
    ComplexValue,
    ConstantValue,
    FloatValue,
    IntValue,
    StringValue,
    to_complex,
    to_float,
    to_int,
)


# binary32: 24-bit significand, smallest subnormal 2**-149
_FLOAT32_BITS = 24
_FLOAT32_MIN_EXP = -149
_FLOAT32_MAX = math.ldexp((1 << _FLOAT32_BITS) - 1, 128 - _FLOAT32_BITS)


def _round_float32(value: Fraction) -> float:
    """Nearest binary32 value of an exact rational, ties to even.

    Rounds the rational directly; going through binary64 first would
    round twice.
    """
    if value == 0:
        return 0.0
    x = abs(value)
    # 2**e <= x < 2**(e + 1)
    e = x.numerator.bit_length() - x.denominator.bit_length()
    if Fraction(2) ** e > x:
        e -= 1
    if e > 127:
        raise NotRepresentableError("float", MachineType.FLOAT32.value)
    exp = max(e - (_FLOAT32_BITS - 1), _FLOAT32_MIN_EXP)
    mantissa = round(x / Fraction(2) ** exp)
    f = math.ldexp(mantissa, exp)
    if f > _FLOAT32_MAX:
        raise NotRepresentableError("float", MachineType.FLOAT32.value)
    return -f if value < 0 else f


def _round_float(value: Fraction, target: MachineType) -> float:
    """Nearest binary64 (or binary32) value of an exact rational."""
    if target == MachineType.FLOAT32:
        return _round_float32(value)
    try:
        return float(value)
    except OverflowError:
        raise NotRepresentableError("float", target.value) from None


def narrow(value: ConstantValue, target: MachineType, expr: str | None = None) -> object:
    """Convert ``value`` into the Python value for ``target``.

    - integer targets -> ``int`` within the target's range
    - FLOAT32/FLOAT64 -> ``float`` (FLOAT32 rounded to single precision)
    - COMPLEX64/COMPLEX128 -> ``complex``
    - BOOL -> ``bool``; BYTES -> ``bytes``
    - STRING -> ``str`` decoded as UTF-8; invalid bytes are kept as
      ``surrogateescape`` code points and re-encode to the same bytes

    ``expr`` is only used to annotate error messages.
    """
    target = MachineType(target)

    def fail() -> NotRepresentableError:
        return NotRepresentableError(value.kind.value, target.value, expr)

    if target in INTEGER_BOUNDS:
        ival = to_int(value)
        if not isinstance(ival, IntValue):
            raise fail()
        lo, hi = INTEGER_BOUNDS[target]
        if not lo <= ival.value <= hi:
            raise fail()
        return ival.value

    if target in FLOAT_TYPES:
        fval = to_float(value)
        if not isinstance(fval, FloatValue):
            raise fail()
        try:
            return _round_float(fval.value, target)
        except NotRepresentableError:
            raise fail() from None

    if target in COMPLEX_TYPES:
        cval = to_complex(value)
        if not isinstance(cval, ComplexValue):
            raise fail()
        part = MachineType.FLOAT32 if target == MachineType.COMPLEX64 else MachineType.FLOAT64
        try:
            return complex(_round_float(cval.real, part), _round_float(cval.imag, part))
        except NotRepresentableError:
            raise fail() from None

    if target == MachineType.BOOL:
        if not isinstance(value, BoolValue):
            raise fail()
        return value.value

    if target == MachineType.STRING:
        if not isinstance(value, StringValue):
            raise fail()
        # Bytes that are not valid UTF-8 survive as lone surrogates.
        return value.value.decode("utf-8", errors="surrogateescape")

    if target == MachineType.BYTES:
        if not isinstance(value, StringValue):
            raise fail()
        return value.value

    raise ValueError(f"Unsupported narrowing target: {target}")
