"""Builders and fakes for cart reconciliation tests."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING

from cartguard.domain.errors import TransportError
from cartguard.domain.model import CartSnapshot, LineItem

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from cartguard.domain.model import FormDirective, ProductForm


def make_line(
    product_id: int,
    quantity: int = 1,
    *,
    incompatible: tuple[int, ...] = (),
    max_quantity: int | None = None,
    variant_id: int | None = None,
    title: str | None = None,
) -> LineItem:
    return LineItem(
        product_id=product_id,
        variant_id=variant_id if variant_id is not None else product_id * 10,
        quantity=quantity,
        title=title if title is not None else f"Product {product_id}",
        incompatible_product_ids=incompatible,
        max_quantity=max_quantity,
    )


def make_snapshot(*lines: LineItem) -> CartSnapshot:
    return CartSnapshot.from_items(lines)


class FakeCartService:
    """In-memory cart that applies line changes like the storefront does."""

    def __init__(
        self,
        lines: Iterable[LineItem] = (),
        *,
        failing_lines: Iterable[int] = (),
        failing_reads: int = 0,
    ) -> None:
        self.lines = list(lines)
        self.failing_lines = set(failing_lines)
        self.failing_reads = failing_reads
        self.changes: list[tuple[int, int]] = []
        self.reads = 0
        self.gate: asyncio.Event | None = None

    async def read(self) -> CartSnapshot:
        self.reads += 1
        if self.gate is not None:
            await self.gate.wait()
        await asyncio.sleep(0)
        if self.failing_reads:
            self.failing_reads -= 1
            raise TransportError("cart read failed")
        return CartSnapshot.from_items(self.lines)

    async def change_line(self, line: int, quantity: int) -> None:
        self.changes.append((line, quantity))
        await asyncio.sleep(0)
        if line in self.failing_lines:
            raise TransportError(f"change of line {line} failed")
        if quantity == 0:
            del self.lines[line - 1]
        else:
            self.lines[line - 1] = replace(self.lines[line - 1], quantity=quantity)

    @property
    def product_ids(self) -> list[int]:
        return [line.product_id for line in self.lines]


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


class FakeProductPage:
    def __init__(self, forms: Sequence[ProductForm] = ()) -> None:
        self._forms = tuple(forms)
        self.rendered: list[tuple[FormDirective, ...]] = []

    def forms(self) -> Sequence[ProductForm]:
        return self._forms

    def render(self, directives: Sequence[FormDirective]) -> None:
        self.rendered.append(tuple(directives))
