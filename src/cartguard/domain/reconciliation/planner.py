"""Turn a violation report into an ordered list of cart mutations."""

from __future__ import annotations

from bisect import bisect_left
from typing import TYPE_CHECKING

from .contracts import ReconciliationAction, RemoveLine, SetQuantity

if TYPE_CHECKING:
    from .contracts import ViolationReport


def plan(report: ViolationReport) -> tuple[ReconciliationAction, ...]:
    """Order removals from the last line up, then the clamps.

    Removing the highest position first keeps every lower position valid, so all
    removals can use indices from the evaluated snapshot. Clamps run after the
    removals and are shifted by the number of removed lines above them.
    """

    removed = sorted(report.removals)
    actions: list[ReconciliationAction] = [RemoveLine(index) for index in reversed(removed)]
    for index in sorted(report.clamps):
        if index in report.removals:
            continue
        actions.append(
            SetQuantity(
                index=index,
                quantity=report.clamps[index].limit,
                line=index - bisect_left(removed, index),
            )
        )
    return tuple(actions)
