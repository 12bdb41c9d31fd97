"""Per-cart session that serialises reconciliation cycles.

At most one cycle runs at a time. Triggers arriving meanwhile collapse into a
single pending re-run (the latest trigger wins), which starts as soon as the
running cycle is back to idle. Nothing is cancelled.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from cartguard.domain.events import ITEM_ADDED, ItemAdded

from .engine import CycleState

if TYPE_CHECKING:
    from cartguard.domain.events import EventBus

    from .engine import CycleOutcome, ReconciliationEngine

log = getLogger(__name__)


class CartSession:
    def __init__(self, engine: ReconciliationEngine) -> None:
        self._engine = engine
        self._state = CycleState.IDLE
        self._pending: ItemAdded | None = None
        self._cycles = 0

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def cycles(self) -> int:
        return self._cycles

    async def trigger(self, event: ItemAdded | None = None) -> CycleOutcome | None:
        """Run a cycle for ``event``, or queue it behind the running one.

        Returns the outcome of the last cycle this call ran, or ``None`` when the
        trigger was queued for the cycle already in flight.
        """

        request = event or ItemAdded()
        if self._state is not CycleState.IDLE:
            log.debug("Cycle in %s, queueing re-run for %s", self._state, request)
            self._pending = request
            return None

        outcome: CycleOutcome | None = None
        next_request: ItemAdded | None = request
        while next_request is not None:
            self._pending = None
            self._transition(CycleState.EVALUATING)
            try:
                outcome = await self._engine.reconcile(next_request, transition=self._transition)
            except Exception:
                log.exception("Cart reconciliation cycle failed")
            finally:
                self._cycles += 1
                self._transition(CycleState.IDLE)
            next_request = self._pending
        return outcome

    async def handle(self, payload: object) -> None:
        """Event bus entry point for ``cart:item-added``."""

        event = payload if isinstance(payload, ItemAdded) else ItemAdded()
        await self.trigger(event)

    def attach(self, bus: EventBus) -> int:
        return bus.subscribe(ITEM_ADDED, self.handle)

    def _transition(self, state: CycleState) -> None:
        if state is not self._state:
            log.debug("Cart cycle %s -> %s", self._state, state)
        self._state = state
