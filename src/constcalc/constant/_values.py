"""Exact constant values.

A constant is one of a closed set of immutable value types::

    BoolValue     true / false
    StringValue   exact byte sequence
    IntValue      unbounded integer
    FloatValue    exact rational (``fractions.Fraction``, lowest terms)
    ComplexValue  pair of exact rationals

plus ``UNKNOWN``, the result of a conversion that cannot be done exactly.
Values are frozen dataclasses: equal when kind and payload are equal, so
``IntValue(2) != FloatValue(2)``.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import ClassVar, Union

from constcalc.errors import NotRepresentableError


class ValueKind(str, Enum):
    UNKNOWN = "unknown"
    BOOL = "bool"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnknownValue:
    """Marker for a failed conversion. Carries no payload."""

    kind: ClassVar[ValueKind] = ValueKind.UNKNOWN

    def __str__(self) -> str:
        return "unknown"


UNKNOWN = UnknownValue()


@dataclass(frozen=True)
class BoolValue:
    value: bool

    kind: ClassVar[ValueKind] = ValueKind.BOOL

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class StringValue:
    value: bytes

    kind: ClassVar[ValueKind] = ValueKind.STRING

    def __str__(self) -> str:
        return _quote(self.value)


@dataclass(frozen=True)
class IntValue:
    value: int

    kind: ClassVar[ValueKind] = ValueKind.INT

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatValue:
    value: Fraction

    kind: ClassVar[ValueKind] = ValueKind.FLOAT

    def __post_init__(self) -> None:
        if not isinstance(self.value, Fraction):
            object.__setattr__(self, "value", Fraction(self.value))

    def __str__(self) -> str:
        return _format_fraction(self.value)


@dataclass(frozen=True)
class ComplexValue:
    real: Fraction
    imag: Fraction

    kind: ClassVar[ValueKind] = ValueKind.COMPLEX

    def __post_init__(self) -> None:
        if not isinstance(self.real, Fraction):
            object.__setattr__(self, "real", Fraction(self.real))
        if not isinstance(self.imag, Fraction):
            object.__setattr__(self, "imag", Fraction(self.imag))

    def __str__(self) -> str:
        return f"({_format_fraction(self.real)} + {_format_fraction(self.imag)}i)"


ConstantValue = Union[
    BoolValue,
    StringValue,
    IntValue,
    FloatValue,
    ComplexValue,
    UnknownValue,
]

CONSTANT_TYPES = (BoolValue, StringValue, IntValue, FloatValue, ComplexValue)

NUMERIC_KINDS = frozenset({ValueKind.INT, ValueKind.FLOAT, ValueKind.COMPLEX})

# Rank of numeric kinds for promotion (Int -> Float -> Complex).
_NUMERIC_RANK = {ValueKind.INT: 0, ValueKind.FLOAT: 1, ValueKind.COMPLEX: 2}


def is_numeric(x: ConstantValue) -> bool:
    return x.kind in NUMERIC_KINDS


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------
# Each returns UNKNOWN instead of raising when the conversion is inexact.

def to_int(x: ConstantValue) -> IntValue | UnknownValue:
    """Convert to Int when the value is exactly integral."""
    if isinstance(x, IntValue):
        return x
    if isinstance(x, FloatValue):
        if x.value.denominator == 1:
            return IntValue(x.value.numerator)
    elif isinstance(x, ComplexValue):
        if x.imag == 0 and x.real.denominator == 1:
            return IntValue(x.real.numerator)
    return UNKNOWN


def to_float(x: ConstantValue) -> FloatValue | UnknownValue:
    """Convert to Float; a Complex needs a zero imaginary part."""
    if isinstance(x, FloatValue):
        return x
    if isinstance(x, IntValue):
        return FloatValue(Fraction(x.value))
    if isinstance(x, ComplexValue) and x.imag == 0:
        return FloatValue(x.real)
    return UNKNOWN


def to_complex(x: ConstantValue) -> ComplexValue | UnknownValue:
    if isinstance(x, ComplexValue):
        return x
    if isinstance(x, IntValue):
        return ComplexValue(Fraction(x.value), Fraction(0))
    if isinstance(x, FloatValue):
        return ComplexValue(x.value, Fraction(0))
    return UNKNOWN


def promote(x: ConstantValue, kind: ValueKind) -> ConstantValue:
    """Convert a numeric value up to ``kind`` (Int -> Float -> Complex)."""
    if kind == ValueKind.INT:
        return to_int(x)
    if kind == ValueKind.FLOAT:
        return to_float(x)
    if kind == ValueKind.COMPLEX:
        return to_complex(x)
    return x if x.kind == kind else UNKNOWN


def numeric_upper_kind(*values: ConstantValue) -> ValueKind:
    """Least upper kind of numeric values."""
    return max((v.kind for v in values), key=_NUMERIC_RANK.__getitem__)


# ---------------------------------------------------------------------------
# Native Python values
# ---------------------------------------------------------------------------

def from_native(obj: object) -> ConstantValue:
    """Convert a Python value into an exact constant.

    Accepted: bool, integers, floats, complex numbers, ``Fraction``,
    ``Decimal``, ``str`` (stored as UTF-8), ``bytes``/``bytearray`` and
    constant values themselves. Binary floats are taken at their exact
    binary value. Anything else raises ``TypeError``.
    """
    if isinstance(obj, CONSTANT_TYPES):
        return obj
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, numbers.Integral):
        return IntValue(int(obj))
    if isinstance(obj, numbers.Rational):
        return FloatValue(Fraction(obj.numerator, obj.denominator))
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise NotRepresentableError("float", "constant", str(obj))
        return FloatValue(Fraction(obj))
    if isinstance(obj, numbers.Real):
        f = float(obj)
        if not math.isfinite(f):
            raise NotRepresentableError("float", "constant", repr(f))
        return FloatValue(Fraction(f))
    if isinstance(obj, numbers.Complex):
        c = complex(obj)
        if not (math.isfinite(c.real) and math.isfinite(c.imag)):
            raise NotRepresentableError("complex", "constant", repr(c))
        return ComplexValue(Fraction(c.real), Fraction(c.imag))
    if isinstance(obj, str):
        return StringValue(obj.encode("utf-8"))
    if isinstance(obj, (bytes, bytearray)):
        return StringValue(bytes(obj))
    raise TypeError(f"unsupported type {type(obj).__name__}")


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def _format_fraction(f: Fraction) -> str:
    """Exact decimal text when the expansion terminates, else a float approximation."""
    if f.denominator == 1:
        return str(f.numerator)
    d = f.denominator
    twos = fives = 0
    while d % 2 == 0:
        d //= 2
        twos += 1
    while d % 5 == 0:
        d //= 5
        fives += 1
    if d == 1:
        digits = max(twos, fives)
        scaled = abs(f.numerator) * (10**digits // f.denominator)
        whole, frac = divmod(scaled, 10**digits)
        sign = "-" if f < 0 else ""
        return f"{sign}{whole}.{str(frac).rjust(digits, '0').rstrip('0')}"
    try:
        return repr(float(f))
    except OverflowError:
        return f"{f.numerator}/{f.denominator}"


_ESCAPES = {
    0x07: "\\a", 0x08: "\\b", 0x0C: "\\f", 0x0A: "\\n",
    0x0D: "\\r", 0x09: "\\t", 0x0B: "\\v", 0x5C: "\\\\", 0x22: '\\"',
}


def _quote(data: bytes) -> str:
    text = data.decode("utf-8", errors="surrogateescape")
    out: list[str] = []
    for ch in text:
        code = ord(ch)
        if 0xDC80 <= code <= 0xDCFF:
            out.append(f"\\x{code - 0xDC00:02x}")
        elif code in _ESCAPES:
            out.append(_ESCAPES[code])
        elif code < 0x20 or code == 0x7F:
            out.append(f"\\x{code:02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'
