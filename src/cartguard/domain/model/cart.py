"""Cart snapshot model.

A snapshot is read from the cart service at the start of every reconciliation
cycle and never cached. Line positions are 1-based and only valid until the next
mutation of the remote cart.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from .rules import ConstraintRule, Incompatibility, MaxQuantity

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


@dataclass(frozen=True, slots=True, kw_only=True)
class LineItem:
    """One cart row with its merchant rules already parsed."""

    product_id: int
    variant_id: int
    quantity: int
    index: int = 0
    title: str = ""
    properties: Mapping[str, str] = field(default_factory=dict[str, str])
    incompatible_product_ids: tuple[int, ...] = ()
    max_quantity: int | None = None
    final_line_price: int = 0
    requires_shipping: bool = True

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Line quantity must be positive, got {self.quantity}")

    @property
    def line(self) -> int:
        return self.index

    @property
    def display_title(self) -> str:
        return html.unescape(self.title)

    @property
    def headroom(self) -> int | None:
        if self.max_quantity is None:
            return None
        return max(self.max_quantity - self.quantity, 0)

    def rules(self) -> tuple[ConstraintRule, ...]:
        rules: list[ConstraintRule] = [
            Incompatibility(product_id=self.product_id, blocked_product_id=blocked)
            for blocked in self.incompatible_product_ids
        ]
        if self.max_quantity is not None:
            rules.append(MaxQuantity(product_id=self.product_id, limit=self.max_quantity))
        return tuple(rules)


@dataclass(frozen=True, slots=True)
class CartSnapshot:
    items: tuple[LineItem, ...] = ()
    cart_level_discount_applications: tuple[Mapping[str, object], ...] = ()

    def __post_init__(self) -> None:
        for position, item in enumerate(self.items, start=1):
            if item.index != position:
                raise ValueError(f"Line at position {position} carries index {item.index}")

    @classmethod
    def from_items(
        cls,
        items: Iterable[LineItem],
        *,
        cart_level_discount_applications: tuple[Mapping[str, object], ...] = (),
    ) -> CartSnapshot:
        """Build a snapshot, assigning 1-based positions in iteration order."""

        return cls(
            items=tuple(
                replace(item, index=position) for position, item in enumerate(items, start=1)
            ),
            cart_level_discount_applications=cart_level_discount_applications,
        )

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def product_ids(self) -> frozenset[int]:
        return frozenset(item.product_id for item in self.items)

    def line(self, index: int) -> LineItem:
        if not 1 <= index <= len(self.items):
            raise IndexError(f"Cart has no line {index}")
        return self.items[index - 1]

    def lines_for_product(self, product_id: int) -> tuple[LineItem, ...]:
        return tuple(item for item in self.items if item.product_id == product_id)

    def lines_for_variant(self, variant_id: int) -> tuple[LineItem, ...]:
        return tuple(item for item in self.items if item.variant_id == variant_id)
