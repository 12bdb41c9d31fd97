"""Orchestrator for one reconciliation cycle.

The engine composes the stages but does not prescribe concrete adapters; the
cart service, notifier, page and bus are all injected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from cartguard.domain.errors import PartialApplyError, TransportError
from cartguard.domain.events import CART_REFRESH, CartRefresh

from .applier import apply_actions
from .contracts import ApplyResult, ViolationReport
from .evaluator import evaluate
from .messages import notifications
from .planner import plan
from .synchronizer import sync

if TYPE_CHECKING:
    from collections.abc import Callable

    from cartguard.domain.events import EventBus, ItemAdded
    from cartguard.domain.model import CartSnapshot, FormDirective
    from cartguard.domain.ports import CartService, Notifier, ProductPage

    from .contracts import ReconciliationAction

log = getLogger(__name__)


class CycleState(StrEnum):
    IDLE = "idle"
    EVALUATING = "evaluating"
    PLANNING = "planning"
    APPLYING = "applying"
    RESYNCING = "resyncing"


type Transition = Callable[[CycleState], None]


@dataclass(slots=True, kw_only=True)
class CycleOutcome:
    """Summary of one reconciliation cycle."""

    trigger: ItemAdded | None = None
    snapshot: CartSnapshot | None = None
    report: ViolationReport = field(default_factory=ViolationReport)
    actions: tuple[ReconciliationAction, ...] = ()
    result: ApplyResult = field(default_factory=ApplyResult)
    directives: tuple[FormDirective, ...] = ()
    refreshed: bool = False

    @property
    def changed(self) -> bool:
        return self.result.applied > 0


def _ignore(_state: CycleState) -> None:
    return None


@dataclass(slots=True)
class ReconciliationEngine:
    """Run evaluate, plan, apply and resync against the remote cart."""

    service: CartService
    notifier: Notifier
    page: ProductPage | None = None
    bus: EventBus | None = None

    async def reconcile(
        self,
        trigger: ItemAdded | None = None,
        *,
        transition: Transition | None = None,
    ) -> CycleOutcome:
        move = transition or _ignore
        outcome = CycleOutcome(trigger=trigger)

        move(CycleState.EVALUATING)
        try:
            snapshot = await self.service.read()
        except TransportError as exc:
            log.warning("Skipping reconciliation, cart could not be read: %s", exc)
            return outcome
        outcome.snapshot = snapshot
        if snapshot.is_empty:
            return outcome

        outcome.report = evaluate(snapshot, trigger=trigger)
        for message in notifications(outcome.report):
            self.notifier.notify(message)

        move(CycleState.PLANNING)
        outcome.actions = plan(outcome.report)
        if not outcome.actions:
            return outcome

        move(CycleState.APPLYING)
        outcome.result = await apply_actions(outcome.actions, service=self.service)
        try:
            outcome.result.raise_for_failures()
        except PartialApplyError as exc:
            log.warning("Cart reconciliation incomplete: %s", exc)

        if outcome.result.clamped:
            move(CycleState.RESYNCING)
            outcome.directives = await self._resync()

        if outcome.changed:
            self._broadcast(outcome.result)
            outcome.refreshed = True
        return outcome

    async def _resync(self) -> tuple[FormDirective, ...]:
        if self.page is None:
            return ()
        try:
            fresh = await self.service.read()
        except TransportError as exc:
            log.warning("Skipping form resync, cart could not be re-read: %s", exc)
            return ()
        directives = sync(fresh, self.page.forms())
        if directives:
            self.page.render(directives)
        return directives

    def _broadcast(self, result: ApplyResult) -> None:
        if self.bus is None:
            return
        self.bus.publish(CART_REFRESH, CartRefresh(removed=result.removed, clamped=result.clamped))
