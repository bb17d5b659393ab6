"""constcalc: exact constant expressions narrowed to machine values.

Users import everything from this single flat namespace::

    import constcalc

    constcalc.int64("24*60*60")            # 86400
    constcalc.float64("2.5*1")             # 2.5
    constcalc.int64("2.5*1")               # NotRepresentableError

    lib = constcalc.Scope()
    lib.assign("S", "1")
    lib.assign("H", "3600*S")
    s = constcalc.Scope()
    s.import_scope("time", lib)
    s.int64("2*time.H")                    # 7200
"""

from .errors import (
    ArgumentCountError,
    CalcError,
    DivisionByZeroError,
    ExprSyntaxError,
    InvalidShiftError,
    NamespaceError,
    NotRepresentableError,
    ScopeFrozenError,
    TypeMismatchError,
    UnknownIdentifierError,
)

from .model.types import MachineType

from .constant import (
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
)

from .syntax import parse_expr, tokenize

from .evaluate import Scope, evaluate

from ._api import (
    boolean,
    bytestring,
    complex64,
    complex128,
    float32,
    float64,
    int64,
    narrow,
    string,
    uint64,
)

__all__ = [
    # Errors
    "ArgumentCountError",
    "CalcError",
    "DivisionByZeroError",
    "ExprSyntaxError",
    "InvalidShiftError",
    "NamespaceError",
    "NotRepresentableError",
    "ScopeFrozenError",
    "TypeMismatchError",
    "UnknownIdentifierError",
    # Values
    "UNKNOWN",
    "BoolValue",
    "ComplexValue",
    "ConstantValue",
    "FloatValue",
    "IntValue",
    "StringValue",
    "UnknownValue",
    "ValueKind",
    "from_native",
    "MachineType",
    # Front end
    "parse_expr",
    "tokenize",
    # Evaluation
    "Scope",
    "evaluate",
    # Narrowing
    "boolean",
    "bytestring",
    "complex64",
    "complex128",
    "float32",
    "float64",
    "int64",
    "narrow",
    "string",
    "uint64",
]
