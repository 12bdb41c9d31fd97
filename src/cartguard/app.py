"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from cartguard.adapters.cart import StorefrontCartClient
from cartguard.domain.errors import TransportError
from cartguard.domain.reconciliation import (
    CartSession,
    ReconciliationEngine,
    evaluate,
    plan,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from cartguard.config.cart import CartConfig
    from cartguard.domain.events import EventBus, ItemAdded
    from cartguard.domain.model import CartSnapshot
    from cartguard.domain.ports import CartService, Notifier, ProductPage
    from cartguard.domain.reconciliation import (
        CycleOutcome,
        ReconciliationAction,
        ViolationReport,
    )

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CartInspection:
    snapshot: CartSnapshot
    report: ViolationReport
    actions: tuple[ReconciliationAction, ...]


def build_cart_session(
    *,
    notifier: Notifier,
    service: CartService | None = None,
    config: CartConfig | None = None,
    page: ProductPage | None = None,
    bus: EventBus | None = None,
) -> CartSession:
    """Wire a session for one cart; subscribes it to ``bus`` when given."""

    engine = ReconciliationEngine(
        service=service or StorefrontCartClient(config=config),
        notifier=notifier,
        page=page,
        bus=bus,
    )
    session = CartSession(engine)
    if bus is not None:
        session.attach(bus)
    return session


def check_cart(
    *,
    notifier: Notifier,
    trigger: ItemAdded | None = None,
    service: CartService | None = None,
    config: CartConfig | None = None,
) -> CycleOutcome | None:
    """Run one reconciliation cycle against the configured cart.

    Raises ``TransportError`` when the cart could not be read at all.
    """

    async def run_cycle(active: CartService) -> CycleOutcome | None:
        session = build_cart_session(notifier=notifier, service=active)
        return await session.trigger(trigger)

    outcome = asyncio.run(_with_service(service, config, run_cycle))
    if outcome is not None:
        if outcome.snapshot is None:
            raise TransportError("Cart could not be read")
        log.info(
            "Finished cart check: lines=%s, removed=%s, clamped=%s, failed=%s",
            len(outcome.snapshot.items),
            outcome.result.removed,
            outcome.result.clamped,
            len(outcome.result.failures),
        )
    return outcome


def inspect_cart(
    *,
    trigger: ItemAdded | None = None,
    service: CartService | None = None,
    config: CartConfig | None = None,
) -> CartInspection:
    """Read the cart and compute the plan without changing anything."""

    async def read_cart(active: CartService) -> CartSnapshot:
        return await active.read()

    snapshot = asyncio.run(_with_service(service, config, read_cart))
    report = evaluate(snapshot, trigger=trigger)
    return CartInspection(snapshot=snapshot, report=report, actions=plan(report))


async def _with_service[T](
    service: CartService | None,
    config: CartConfig | None,
    run: Callable[[CartService], Awaitable[T]],
) -> T:
    if service is not None:
        return await run(service)
    async with StorefrontCartClient(config=config) as client:
        return await run(client)
