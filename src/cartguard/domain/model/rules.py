"""Typed merchant rules and the parsers for their line-item property encoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from cartguard.domain.errors import MalformedRuleError

INCOMPATIBLE_PRODUCTS_PROPERTY: Final[str] = "_produits_incompatibles"
MAX_QUANTITY_PROPERTY: Final[str] = "_max_quantity"
NO_LIMIT_SENTINEL: Final[str] = "none"

type PairKey = tuple[int, int]


def pair_key(first: int, second: int) -> PairKey:
    """Canonical key for an unordered product pair."""

    return (first, second) if first <= second else (second, first)


@dataclass(frozen=True, slots=True)
class Incompatibility:
    product_id: int
    blocked_product_id: int

    @property
    def key(self) -> PairKey:
        return pair_key(self.product_id, self.blocked_product_id)


@dataclass(frozen=True, slots=True)
class MaxQuantity:
    product_id: int
    limit: int

    def exceeded_by(self, quantity: int) -> bool:
        return quantity > self.limit


type ConstraintRule = Incompatibility | MaxQuantity


def parse_incompatible_product_ids(raw: str | None) -> tuple[int, ...]:
    """Parse a comma separated product id list.

    Blank values and empty segments are ignored. Any other segment that is not an
    integer makes the whole list malformed.
    """

    if raw is None or not raw.strip():
        return ()
    product_ids: list[int] = []
    for segment in raw.split(","):
        token = segment.strip()
        if not token:
            continue
        try:
            product_id = int(token)
        except ValueError as exc:
            raise MalformedRuleError(f"Invalid product id {token!r} in {raw!r}") from exc
        if product_id not in product_ids:
            product_ids.append(product_id)
    return tuple(product_ids)


def parse_max_quantity(raw: str | None) -> int | None:
    """Parse a max-quantity property; ``None`` means the line carries no limit."""

    if raw is None:
        return None
    token = raw.strip()
    if not token or token == NO_LIMIT_SENTINEL:
        return None
    try:
        limit = int(token)
    except ValueError as exc:
        raise MalformedRuleError(f"Invalid max quantity {raw!r}") from exc
    if limit <= 0:
        raise MalformedRuleError(f"Max quantity must be positive, got {raw!r}")
    return limit
