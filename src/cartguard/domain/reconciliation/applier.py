"""Send planned mutations to the cart service.

Removals are awaited one after another in plan order; their positions come
from the evaluated snapshot and stay valid because the plan removes the highest
position first. Clamps are independent of each other and are dispatched
together, each at its original position minus the removals that actually
succeeded above it. A failed request is logged and recorded, the rest of the
batch still runs.
"""

from __future__ import annotations

import asyncio
from bisect import bisect_left
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from cartguard.domain.errors import TransportError

from .contracts import ApplyResult, MutationFailure, RemoveLine, SetQuantity

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cartguard.domain.ports import CartService

    from .contracts import ReconciliationAction

log = getLogger(__name__)


async def apply_actions(
    actions: Sequence[ReconciliationAction],
    *,
    service: CartService,
) -> ApplyResult:
    result = ApplyResult()
    removals = [action for action in actions if isinstance(action, RemoveLine)]
    clamps = [action for action in actions if isinstance(action, SetQuantity)]

    removed: list[int] = []
    for action in removals:
        failure = await _dispatch(service, action)
        result.record(action, failure)
        if failure is None:
            removed.append(action.index)

    removed.sort()
    clamps = [
        replace(action, line=action.index - bisect_left(removed, action.index))
        for action in clamps
    ]
    if clamps:
        failures = await asyncio.gather(*(_dispatch(service, action) for action in clamps))
        for action, failure in zip(clamps, failures, strict=True):
            result.record(action, failure)

    if actions:
        log.info(
            "Applied %s of %s cart mutation(s): removed=%s, clamped=%s",
            result.applied,
            len(actions),
            result.removed,
            result.clamped,
        )
    return result


async def _dispatch(service: CartService, action: ReconciliationAction) -> MutationFailure | None:
    try:
        await service.change_line(action.line, action.quantity)
    except TransportError as exc:
        log.warning("Cart mutation failed for line %s: %s", action.line, exc)
        return MutationFailure(action=action, error=exc)
    return None
