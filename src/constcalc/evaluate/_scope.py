"""Scope: named constants and imported namespaces.

A Scope maps names to constant values or to other Scopes (imports).
Bindings are insert-once: binding a name that already exists keeps the
existing binding. Names starting with an uppercase letter are
*exported* and are the only entries visible through an import::

    lib = Scope()
    lib.assign("S", "1")
    lib.assign("M", "60*S")

    s = Scope()
    s.import_scope("time", lib)
    s.int64("90*time.M")   # 5400

Concurrency: evaluation only reads a Scope. Binding is not synchronized;
call ``freeze()`` once a Scope is fully built to make it read-only
before sharing it between threads.
"""

from __future__ import annotations

import logging

from constcalc.constant import ConstantValue, from_native, narrow
from constcalc.errors import (
    NamespaceError,
    ScopeFrozenError,
    UnknownIdentifierError,
)
from constcalc.model.expressions import Expression
from constcalc.model.types import MachineType

from ._evaluator import evaluate

logger = logging.getLogger(__name__)


def is_exported(name: str) -> bool:
    """True when ``name`` starts with an uppercase letter."""
    return bool(name) and name[0].isupper()


class Scope:
    """A set of named constants, usable for evaluation and narrowing."""

    def __init__(self) -> None:
        self._entries: dict[str, ConstantValue | Scope] = {}
        self._frozen = False

    # -----------------------------------------------------------------------
    # Introspection
    # -----------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        """Bound names (constants and imports) in binding order."""
        return list(self._entries)

    def __repr__(self) -> str:
        state = " frozen" if self._frozen else ""
        return f"<Scope{state} names={self.names()!r}>"

    # -----------------------------------------------------------------------
    # Binding
    # -----------------------------------------------------------------------

    def freeze(self) -> Scope:
        """Make this Scope read-only. Returns the Scope for chaining."""
        self._frozen = True
        logger.debug("Scope frozen with %d names", len(self._entries))
        return self

    def _check_writable(self, name: str) -> None:
        if self._frozen:
            raise ScopeFrozenError(name)

    def _bind(self, name: str, entry: ConstantValue | Scope) -> None:
        if name in self._entries:
            logger.debug("%r is already bound; keeping the existing binding", name)
            return
        self._entries[name] = entry

    def assign(self, name: str, expr: str | Expression) -> None:
        """Evaluate ``expr`` in this Scope and bind the result to ``name``.

        Earlier bindings may be referenced. If ``name`` is already bound
        nothing changes (and no error is raised). Evaluation errors
        propagate.
        """
        self._check_writable(name)
        value = evaluate(expr, self)
        self._bind(name, value)

    def assign_value(self, name: str, value: object) -> None:
        """Bind a Python value directly (see ``from_native`` for accepted types).

        Raises ``TypeError`` for unsupported types.
        """
        self._check_writable(name)
        self._bind(name, from_native(value))

    def import_scope(self, name: str, lib: Scope) -> None:
        """Make the exported entries of ``lib`` available as ``name.Entry``.

        ``lib`` is referenced, not copied. Its own imports are never
        visible through ``name``. Raises ``NamespaceError`` when ``name``
        is exported (starts with an uppercase letter).
        """
        self._check_writable(name)
        if not isinstance(lib, Scope):
            raise TypeError(f"import_scope() expects a Scope, got {type(lib).__name__}")
        if is_exported(name):
            raise NamespaceError(name, "namespace names cannot be exported")
        logger.debug("Importing scope %r (%d names)", name, len(lib))
        self._bind(name, lib)

    # -----------------------------------------------------------------------
    # Lookup
    # -----------------------------------------------------------------------

    def lookup(self, name: str) -> ConstantValue:
        """Value bound to the unqualified ``name``."""
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownIdentifierError(name)
        if isinstance(entry, Scope):
            raise NamespaceError(name, "use of namespace without selector")
        return entry

    def lookup_qualified(self, namespace: str, name: str) -> ConstantValue:
        """Exported value ``name`` of the Scope imported as ``namespace``."""
        qualified = f"{namespace}.{name}"
        lib = self._entries.get(namespace)
        if lib is None:
            raise UnknownIdentifierError(qualified)
        if not isinstance(lib, Scope):
            raise NamespaceError(namespace, f"{qualified}: not a namespace")
        if not is_exported(name):
            raise UnknownIdentifierError(qualified)
        entry = lib._entries.get(name)
        if entry is None or isinstance(entry, Scope):
            raise UnknownIdentifierError(qualified)
        return entry

    # -----------------------------------------------------------------------
    # Evaluation and narrowing
    # -----------------------------------------------------------------------

    def evaluate(self, expr: str | Expression) -> ConstantValue:
        """Evaluate ``expr`` to an exact constant, without narrowing."""
        return evaluate(expr, self)

    def narrow(self, expr: str | Expression, target: MachineType) -> object:
        """Evaluate ``expr`` and narrow the result to ``target``."""
        text = expr if isinstance(expr, str) else None
        return narrow(self.evaluate(expr), target, text)

    def int64(self, expr: str | Expression) -> int:
        return self.narrow(expr, MachineType.INT64)

    def uint64(self, expr: str | Expression) -> int:
        return self.narrow(expr, MachineType.UINT64)

    def float64(self, expr: str | Expression) -> float:
        return self.narrow(expr, MachineType.FLOAT64)

    def float32(self, expr: str | Expression) -> float:
        """Nearest single-precision value, returned as a Python float."""
        return self.narrow(expr, MachineType.FLOAT32)

    def complex128(self, expr: str | Expression) -> complex:
        return self.narrow(expr, MachineType.COMPLEX128)

    def complex64(self, expr: str | Expression) -> complex:
        return self.narrow(expr, MachineType.COMPLEX64)

    def boolean(self, expr: str | Expression) -> bool:
        return self.narrow(expr, MachineType.BOOL)

    def string(self, expr: str | Expression) -> str:
        return self.narrow(expr, MachineType.STRING)

    def bytestring(self, expr: str | Expression) -> bytes:
        return self.narrow(expr, MachineType.BYTES)
