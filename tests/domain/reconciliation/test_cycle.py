from __future__ import annotations

import asyncio

from cartguard.domain.events import ITEM_ADDED, EventBus, ItemAdded
from cartguard.domain.reconciliation import (
    CartSession,
    CycleOutcome,
    CycleState,
    ReconciliationEngine,
)
from tests.helpers.cart import FakeCartService, RecordingNotifier, make_line


def _session(service: FakeCartService) -> CartSession:
    return CartSession(ReconciliationEngine(service=service, notifier=RecordingNotifier()))


def test_single_trigger_runs_one_cycle() -> None:
    service = FakeCartService([make_line(30, 7, max_quantity=5)])
    session = _session(service)

    outcome = asyncio.run(session.trigger())

    assert outcome is not None
    assert session.cycles == 1
    assert session.state is CycleState.IDLE
    assert service.changes == [(1, 5)]


def test_overlapping_triggers_collapse_into_one_rerun() -> None:
    service = FakeCartService([make_line(10, incompatible=(20,)), make_line(20)])
    service.gate = asyncio.Event()
    session = _session(service)

    async def scenario() -> tuple[CycleOutcome | None, list[CycleOutcome | None]]:
        first = asyncio.create_task(session.trigger(ItemAdded(product_id=10)))
        await asyncio.sleep(0)
        assert session.state is CycleState.EVALUATING
        queued = [
            await session.trigger(ItemAdded(product_id=20)),
            await session.trigger(ItemAdded(product_id=30)),
        ]
        assert session.has_pending
        assert service.gate is not None
        service.gate.set()
        return await first, queued

    outcome, queued = asyncio.run(scenario())

    assert queued == [None, None]
    assert session.cycles == 2
    assert not session.has_pending
    assert outcome is not None
    assert outcome.trigger == ItemAdded(product_id=30)
    assert outcome.actions == ()
    assert service.changes == [(1, 0)]


def test_failing_cycle_returns_to_idle() -> None:
    class _BrokenNotifier:
        def notify(self, message: str) -> None:
            raise RuntimeError(message)

    service = FakeCartService([make_line(30, 7, max_quantity=5)])
    session = CartSession(ReconciliationEngine(service=service, notifier=_BrokenNotifier()))

    outcome = asyncio.run(session.trigger())

    assert outcome is None
    assert session.state is CycleState.IDLE
    assert session.cycles == 1


def test_session_reacts_to_item_added_events() -> None:
    service = FakeCartService([make_line(10, incompatible=(20,)), make_line(20)])
    session = _session(service)
    bus = EventBus()
    session.attach(bus)

    async def scenario() -> None:
        bus.publish(ITEM_ADDED, ItemAdded(product_id=10))
        await bus.drain()

    asyncio.run(scenario())

    assert service.changes == [(1, 0)]
    assert session.cycles == 1
