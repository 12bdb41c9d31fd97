"""Error taxonomy for cart reconciliation.

Every error defined here is recovered inside a reconciliation cycle and
logged; none of them reaches the code that published the trigger.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cartguard.domain.reconciliation.contracts import MutationFailure


class CartGuardError(RuntimeError):
    """Base class for cart reconciliation errors."""


class TransportError(CartGuardError):
    """Raised when the cart service cannot be read or written."""


class MalformedRuleError(ValueError):
    """Raised when rule metadata on a line item cannot be parsed."""


class PartialApplyError(CartGuardError):
    """Raised when one or more planned cart mutations failed to apply."""

    def __init__(self, failures: tuple[MutationFailure, ...]) -> None:
        self.failures = failures
        lines = ", ".join(str(failure.action.line) for failure in failures)
        super().__init__(f"{len(failures)} cart mutation(s) failed (lines: {lines})")
