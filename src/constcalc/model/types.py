"""Machine types that constant values can be narrowed to.

Two groups:
- fixed-width integers, signed and unsigned (``int`` and ``uint`` are
  the platform width, 64 bits);
- binary floats/complex numbers, booleans and strings.
"""

from __future__ import annotations

from enum import Enum


class MachineType(str, Enum):
    """Narrowing targets."""

    # Signed integer
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    INT = "int"

    # Unsigned integer
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINT = "uint"

    # Floating point
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    # Complex
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"

    # Other
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"


# ---------------------------------------------------------------------------
# Integer bounds (inclusive)
# ---------------------------------------------------------------------------

def _signed(bits: int) -> tuple[int, int]:
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def _unsigned(bits: int) -> tuple[int, int]:
    return 0, (1 << bits) - 1


INTEGER_BOUNDS: dict[MachineType, tuple[int, int]] = {
    MachineType.INT8: _signed(8),
    MachineType.INT16: _signed(16),
    MachineType.INT32: _signed(32),
    MachineType.INT64: _signed(64),
    MachineType.INT: _signed(64),
    MachineType.UINT8: _unsigned(8),
    MachineType.UINT16: _unsigned(16),
    MachineType.UINT32: _unsigned(32),
    MachineType.UINT64: _unsigned(64),
    MachineType.UINT: _unsigned(64),
}

FLOAT_TYPES = frozenset({MachineType.FLOAT32, MachineType.FLOAT64})

COMPLEX_TYPES = frozenset({MachineType.COMPLEX64, MachineType.COMPLEX128})
