"""Exact constant value domain.

Value types, operator semantics, literal parsing and narrowing::

    from constcalc.constant import IntValue, binary_op, narrow
    from constcalc.model.expressions import BinaryOp
    from constcalc.model.types import MachineType

    v = binary_op(BinaryOp.SHL, IntValue(1), IntValue(100))
    narrow(v, MachineType.INT64)   # NotRepresentableError
"""

from __future__ import annotations

from ._literals import parse_literal, unquote, unquote_char
from ._narrow import narrow
from ._ops import binary_op, compare, match_kinds, shift, unary_op
from ._values import (
    UNKNOWN,
    BoolValue,
    ComplexValue,
    ConstantValue,
    FloatValue,
    IntValue,
    StringValue,
    UnknownValue,
    ValueKind,
    from_native,
    is_numeric,
    numeric_upper_kind,
    promote,
    to_complex,
    to_float,
    to_int,
)

__all__ = [
    "UNKNOWN",
    "BoolValue",
    "ComplexValue",
    "ConstantValue",
    "FloatValue",
    "IntValue",
    "StringValue",
    "UnknownValue",
    "ValueKind",
    "binary_op",
    "compare",
    "from_native",
    "is_numeric",
    "match_kinds",
    "narrow",
    "numeric_upper_kind",
    "parse_literal",
    "promote",
    "shift",
    "to_complex",
    "to_float",
    "to_int",
    "unary_op",
    "unquote",
    "unquote_char",
]
