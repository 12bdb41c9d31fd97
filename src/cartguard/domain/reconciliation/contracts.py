"""Contracts shared by the evaluate/plan/apply/sync stages.

The report is the contract between rule evaluation and planning; actions are
the contract between planning and the mutation applier. Keeping both explicit
prevents the stages from re-reading rule metadata on their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cartguard.domain.errors import PartialApplyError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cartguard.domain.errors import TransportError
    from cartguard.domain.model import LineItem, PairKey


@dataclass(frozen=True, slots=True, kw_only=True)
class IncompatibilityViolation:
    """Two lines whose products must not share a cart.

    ``line`` declared the rule, ``blocking`` is the line of the blocked product
    and ``removed`` is whichever of the two the resolution policy gives up.
    """

    pair: PairKey
    line: LineItem
    blocking: LineItem
    removed: LineItem


@dataclass(frozen=True, slots=True, kw_only=True)
class QuantityViolation:
    line: LineItem
    limit: int


@dataclass(frozen=True, slots=True)
class ViolationReport:
    incompatibilities: tuple[IncompatibilityViolation, ...] = ()
    removals: frozenset[int] = frozenset()
    clamps: Mapping[int, QuantityViolation] = field(default_factory=dict[int, QuantityViolation])

    @property
    def is_empty(self) -> bool:
        return not self.removals and not self.clamps

    @property
    def pairs(self) -> frozenset[PairKey]:
        return frozenset(violation.pair for violation in self.incompatibilities)

    @property
    def clamp_quantities(self) -> dict[int, int]:
        return {index: violation.limit for index, violation in self.clamps.items()}


@dataclass(frozen=True, slots=True)
class RemoveLine:
    index: int

    @property
    def line(self) -> int:
        return self.index

    @property
    def quantity(self) -> int:
        return 0


@dataclass(frozen=True, slots=True, kw_only=True)
class SetQuantity:
    """Clamp of the original line ``index``.

    ``line`` is the position to send to the cart service once every removal of
    the same plan has been applied. The applier shifts ``index`` again by the
    removals that actually succeeded, so a failed removal never moves a clamp
    onto another line.
    """

    index: int
    quantity: int
    line: int


type ReconciliationAction = RemoveLine | SetQuantity


@dataclass(frozen=True, slots=True)
class MutationFailure:
    action: ReconciliationAction
    error: TransportError


@dataclass(slots=True)
class ApplyResult:
    """Summary of the mutations sent to the cart service."""

    removed: int = 0
    clamped: int = 0
    failures: list[MutationFailure] = field(default_factory=list[MutationFailure])

    @property
    def applied(self) -> int:
        return self.removed + self.clamped

    def record(self, action: ReconciliationAction, failure: MutationFailure | None) -> None:
        if failure is not None:
            self.failures.append(failure)
        elif isinstance(action, RemoveLine):
            self.removed += 1
        else:
            self.clamped += 1

    def raise_for_failures(self) -> None:
        if self.failures:
            raise PartialApplyError(tuple(self.failures))
