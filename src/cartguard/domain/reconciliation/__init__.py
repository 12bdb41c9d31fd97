"""Cart constraint resolution.

Layered flow for one cycle:
1) read a fresh cart snapshot
2) evaluate incompatibility and max-quantity rules
3) notify the user about every violation
4) plan an ordered list of line mutations
5) apply them through the cart service
6) re-read the cart and resync the product forms
7) broadcast ``cart:refresh``
"""

from __future__ import annotations

from .applier import apply_actions
from .contracts import (
    ApplyResult,
    IncompatibilityViolation,
    MutationFailure,
    QuantityViolation,
    ReconciliationAction,
    RemoveLine,
    SetQuantity,
    ViolationReport,
)
from .cycle import CartSession
from .engine import CycleOutcome, CycleState, ReconciliationEngine
from .evaluator import evaluate
from .planner import plan
from .synchronizer import sync

__all__ = [
    "ApplyResult",
    "CartSession",
    "CycleOutcome",
    "CycleState",
    "IncompatibilityViolation",
    "MutationFailure",
    "QuantityViolation",
    "ReconciliationAction",
    "ReconciliationEngine",
    "RemoveLine",
    "SetQuantity",
    "ViolationReport",
    "apply_actions",
    "evaluate",
    "plan",
    "sync",
]
