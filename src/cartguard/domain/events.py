"""In-process event bus connecting the guard to its page collaborators."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from logging import getLogger
from typing import Final

log = getLogger(__name__)

ITEM_ADDED: Final[str] = "cart:item-added"
CART_REFRESH: Final[str] = "cart:refresh"

type Subscriber = Callable[[object], Awaitable[None] | None]


@dataclass(frozen=True, slots=True)
class ItemAdded:
    """Trigger emitted after a successful add-to-cart.

    Both ids are optional; when present they name the item whose addition caused
    the check so the guard removes it instead of guessing from line positions.
    """

    product_id: int | None = None
    variant_id: int | None = None


@dataclass(frozen=True, slots=True)
class CartRefresh:
    """Broadcast after the guard changed the cart."""

    removed: int = 0
    clamped: int = 0


@dataclass(frozen=True, slots=True)
class _Subscription:
    token: int
    topic: str
    callback: Subscriber
    is_async: bool


class EventBus:
    """Topic based publish/subscribe with sync and async subscribers.

    Sync subscribers run inline. Async subscribers are scheduled on the running
    loop and tracked until they finish; without a running loop they are run to
    completion before ``publish`` returns. Subscriber failures are logged and
    never reach the publisher.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[int, _Subscription] = {}
        self._pending: set[asyncio.Task[None]] = set()
        self._next_token = 1

    def subscribe(self, topic: str, callback: Subscriber) -> int:
        token = self._next_token
        self._next_token += 1
        self._subscriptions[token] = _Subscription(
            token=token,
            topic=topic,
            callback=callback,
            is_async=inspect.iscoroutinefunction(callback),
        )
        return token

    def unsubscribe(self, token: int) -> bool:
        return self._subscriptions.pop(token, None) is not None

    def publish(self, topic: str, payload: object = None) -> None:
        for subscription in [s for s in self._subscriptions.values() if s.topic == topic]:
            if subscription.is_async:
                self._schedule(subscription, payload)
                continue
            try:
                subscription.callback(payload)
            except Exception:
                log.exception("Subscriber %s failed for %s", subscription.token, topic)

    async def drain(self) -> None:
        """Wait until every scheduled async subscriber has finished."""

        while self._pending:
            await asyncio.gather(*tuple(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _schedule(self, subscription: _Subscription, payload: object) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                asyncio.run(_invoke(subscription, payload))
            except Exception:
                log.exception("Subscriber %s failed for %s", subscription.token, subscription.topic)
            return

        task = loop.create_task(_invoke(subscription, payload))
        self._pending.add(task)
        task.add_done_callback(self._finish(subscription))

    def _finish(self, subscription: _Subscription) -> Callable[[asyncio.Task[None]], None]:
        def callback(task: asyncio.Task[None]) -> None:
            self._pending.discard(task)
            if task.cancelled():
                return
            exc = task.exception()
            if exc is not None:
                log.error(
                    "Subscriber %s failed for %s",
                    subscription.token,
                    subscription.topic,
                    exc_info=exc,
                )

        return callback


async def _invoke(subscription: _Subscription, payload: object) -> None:
    result = subscription.callback(payload)
    if inspect.isawaitable(result):
        await result
