# ruff: noqa: T201

"""Terminal implementations of the page ports."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from cartguard.app import CartInspection


class ConsoleNotifier:
    """Print notifications; the CLI has nobody to wait for."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def notify(self, message: str) -> None:
        print(message, file=self._stream or sys.stderr)


def format_inspection(inspection: CartInspection) -> str:
    lines = [f"{len(inspection.snapshot.items)} line(s) in cart"]
    for item in inspection.snapshot.items:
        limit = "none" if item.max_quantity is None else str(item.max_quantity)
        blocked = ",".join(str(product_id) for product_id in item.incompatible_product_ids)
        lines.append(
            f"  {item.index}. {item.display_title} (product {item.product_id}, "
            f"qty {item.quantity}, max {limit}, incompatible [{blocked}])"
        )
    if not inspection.actions:
        lines.append("No changes needed")
        return "\n".join(lines)
    lines.append("Planned changes:")
    for action in inspection.actions:
        if action.quantity == 0:
            lines.append(f"  remove line {action.line}")
        else:
            lines.append(f"  set line {action.line} to quantity {action.quantity}")
    return "\n".join(lines)
