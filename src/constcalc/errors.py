"""Error types raised while lexing, parsing, evaluating and narrowing."""

from __future__ import annotations

from collections.abc import Sequence


class CalcError(Exception):
    """Base exception for all constcalc errors."""


class ExprSyntaxError(CalcError):
    """Malformed expression text, with position context.

    ``pos`` is the 0-based character offset of the offending token in
    ``source`` (when the source is known).
    """

    def __init__(self, message: str, pos: int, source: str | None = None):
        self.message = message
        self.pos = pos
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        loc = f"{self.message} (at position {self.pos})"
        if not self.source or "\n" in self.source:
            return loc
        caret = " " * min(self.pos, len(self.source)) + "^"
        return f"{loc}\n  {self.source}\n  {caret}"


class UnknownIdentifierError(CalcError):
    """A name (or ``namespace.name``) is not bound."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"undefined: {name}")


class NamespaceError(CalcError):
    """Misuse of a namespace: bad import name, or selector on a plain value."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"{reason}: {name}")


class TypeMismatchError(CalcError):
    """Operator applied to operands of incompatible kinds."""

    def __init__(self, op: str, kinds: Sequence[str]):
        self.op = op
        self.kinds = tuple(kinds)
        super().__init__(
            f"invalid operation: operator {op} not defined on "
            f"{', '.join(self.kinds)}"
        )


class DivisionByZeroError(CalcError):
    """Exact-zero divisor in ``/`` or ``%``."""

    def __init__(self) -> None:
        super().__init__("division by zero")


class InvalidShiftError(CalcError):
    """Negative or non-integer shift count."""

    def __init__(self, count: object):
        self.count = count
        super().__init__(f"invalid shift count {count}")


class NotRepresentableError(CalcError):
    """A value cannot be narrowed exactly to the requested machine type."""

    def __init__(self, kind: str, target: str, expr: str | None = None):
        self.kind = kind
        self.target = target
        self.expr = expr
        msg = f"{kind} value not representable as {target}"
        if expr is not None:
            msg = f"{msg}: {expr!r}"
        super().__init__(msg)


class ArgumentCountError(CalcError):
    """Builtin function called with the wrong number of arguments."""

    def __init__(self, function: str, expected: str, got: int):
        self.function = function
        super().__init__(
            f"wrong number of arguments to {function}: expected {expected}, got {got}"
        )


class ScopeFrozenError(CalcError):
    """Mutation attempted on a frozen Scope."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"cannot bind {name!r}: scope is frozen")


__all__ = [
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
]
