from __future__ import annotations

import asyncio

import pytest

from cartguard.domain.events import CART_REFRESH, ITEM_ADDED, EventBus, ItemAdded


def test_sync_subscribers_receive_payload_for_their_topic_only() -> None:
    bus = EventBus()
    added: list[object] = []
    refreshed: list[object] = []
    bus.subscribe(ITEM_ADDED, added.append)
    bus.subscribe(CART_REFRESH, refreshed.append)

    bus.publish(ITEM_ADDED, ItemAdded(product_id=10))

    assert added == [ItemAdded(product_id=10)]
    assert refreshed == []


def test_unsubscribe_stops_delivery() -> None:
    bus = EventBus()
    received: list[object] = []
    token = bus.subscribe(CART_REFRESH, received.append)

    assert bus.unsubscribe(token)
    assert not bus.unsubscribe(token)
    bus.publish(CART_REFRESH)

    assert received == []


def test_failing_subscriber_does_not_reach_publisher(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus()
    received: list[object] = []

    def broken(_payload: object) -> None:
        raise RuntimeError("boom")

    bus.subscribe(CART_REFRESH, broken)
    bus.subscribe(CART_REFRESH, received.append)

    bus.publish(CART_REFRESH, "payload")

    assert received == ["payload"]
    assert "failed for cart:refresh" in caplog.text


def test_async_subscribers_are_tracked_until_drained() -> None:
    bus = EventBus()
    received: list[object] = []

    async def subscriber(payload: object) -> None:
        await asyncio.sleep(0)
        received.append(payload)

    bus.subscribe(ITEM_ADDED, subscriber)

    async def scenario() -> int:
        bus.publish(ITEM_ADDED, "first")
        pending = bus.pending
        await bus.drain()
        return pending

    assert asyncio.run(scenario()) == 1
    assert received == ["first"]
    assert bus.pending == 0


def test_async_subscriber_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus()

    async def subscriber(_payload: object) -> None:
        raise RuntimeError("boom")

    bus.subscribe(ITEM_ADDED, subscriber)

    async def scenario() -> None:
        bus.publish(ITEM_ADDED)
        await bus.drain()

    asyncio.run(scenario())

    assert "failed for cart:item-added" in caplog.text


def test_async_subscriber_without_running_loop_runs_to_completion() -> None:
    bus = EventBus()
    received: list[object] = []

    async def subscriber(payload: object) -> None:
        received.append(payload)

    bus.subscribe(ITEM_ADDED, subscriber)
    bus.publish(ITEM_ADDED, "now")

    assert received == ["now"]
