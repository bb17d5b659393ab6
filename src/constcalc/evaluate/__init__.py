"""constcalc evaluation: scopes and the tree-walking evaluator.

Entry point::

    from constcalc.evaluate import Scope

    s = Scope()
    s.assign("KiB", "1 << 10")
    s.int64("4*KiB")   # 4096
"""

from __future__ import annotations

from ._builtins import BUILTIN_FUNCTIONS
from ._evaluator import Evaluator, evaluate
from ._scope import Scope, is_exported

__all__ = ["BUILTIN_FUNCTIONS", "Evaluator", "Scope", "evaluate", "is_exported"]
