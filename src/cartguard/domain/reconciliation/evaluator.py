"""Rule evaluation over one cart snapshot.

Responsibilities of this stage:
- detect incompatible product pairs that are present together
- pick the line each pair gives up
- detect lines above their declared max quantity

Evaluation is pure and deterministic given the snapshot and the trigger.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from cartguard.domain.model import pair_key

from .contracts import IncompatibilityViolation, QuantityViolation, ViolationReport

if TYPE_CHECKING:
    from cartguard.domain.events import ItemAdded
    from cartguard.domain.model import CartSnapshot, LineItem, PairKey

log = getLogger(__name__)


def evaluate(snapshot: CartSnapshot, *, trigger: ItemAdded | None = None) -> ViolationReport:
    """Return every rule violation present in ``snapshot``."""

    incompatibilities = detect_incompatibilities(snapshot, trigger=trigger)
    removals = frozenset(violation.removed.index for violation in incompatibilities)
    clamps = {
        violation.line.index: violation
        for violation in detect_over_limit(snapshot)
        if violation.line.index not in removals
    }
    report = ViolationReport(
        incompatibilities=incompatibilities,
        removals=removals,
        clamps=clamps,
    )
    log.debug(
        "Evaluated %s line(s): %s incompatible pair(s), %s removal(s), %s clamp(s)",
        len(snapshot.items),
        len(incompatibilities),
        len(removals),
        len(clamps),
    )
    return report


def detect_incompatibilities(
    snapshot: CartSnapshot,
    *,
    trigger: ItemAdded | None = None,
) -> tuple[IncompatibilityViolation, ...]:
    seen: set[PairKey] = set()
    scheduled: set[int] = set()
    violations: list[IncompatibilityViolation] = []

    for line in snapshot.items:
        for blocked_id in line.incompatible_product_ids:
            if blocked_id == line.product_id:
                continue
            key = pair_key(line.product_id, blocked_id)
            if key in seen:
                continue
            seen.add(key)

            blocking = _first_line_for_product(snapshot, blocked_id)
            if blocking is None:
                continue

            already_removed = _already_scheduled(line, blocking, scheduled)
            removed = already_removed or _line_to_remove(line, blocking, trigger)
            scheduled.add(removed.index)
            violations.append(
                IncompatibilityViolation(pair=key, line=line, blocking=blocking, removed=removed)
            )

    return tuple(violations)


def detect_over_limit(snapshot: CartSnapshot) -> tuple[QuantityViolation, ...]:
    return tuple(
        QuantityViolation(line=line, limit=line.max_quantity)
        for line in snapshot.items
        if line.max_quantity is not None and line.quantity > line.max_quantity
    )


def _first_line_for_product(snapshot: CartSnapshot, product_id: int) -> LineItem | None:
    return next((item for item in snapshot.items if item.product_id == product_id), None)


def _already_scheduled(first: LineItem, second: LineItem, scheduled: set[int]) -> LineItem | None:
    # a pair is already broken up if one side is going away for another pair
    if first.index in scheduled:
        return first
    if second.index in scheduled:
        return second
    return None


def _line_to_remove(line: LineItem, blocking: LineItem, trigger: ItemAdded | None) -> LineItem:
    if trigger is not None:
        triggered = [item for item in (line, blocking) if _is_trigger(item, trigger)]
        if len(triggered) == 1:
            return triggered[0]
    return line if line.index > blocking.index else blocking


def _is_trigger(line: LineItem, trigger: ItemAdded) -> bool:
    if trigger.variant_id is not None:
        return line.variant_id == trigger.variant_id
    if trigger.product_id is not None:
        return line.product_id == trigger.product_id
    return False
