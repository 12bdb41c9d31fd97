"""Translate cart payloads into the domain snapshot.

Rule metadata is parsed here, once. Malformed values are logged and dropped so
the rest of the pipeline only ever sees typed rules.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from cartguard.domain.errors import MalformedRuleError
from cartguard.domain.model import (
    INCOMPATIBLE_PRODUCTS_PROPERTY,
    MAX_QUANTITY_PROPERTY,
    CartSnapshot,
    LineItem,
    parse_incompatible_product_ids,
    parse_max_quantity,
)

from .schema import CartPayload, LineItemPayload

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)


def translate_cart(payload: CartPayload | dict[str, object]) -> CartSnapshot:
    cart = payload if isinstance(payload, CartPayload) else CartPayload.model_validate(payload)
    return CartSnapshot(
        items=tuple(
            translate_line_item(item, index=position)
            for position, item in enumerate(cart.items, start=1)
        ),
        cart_level_discount_applications=tuple(cart.cart_level_discount_applications),
    )


def translate_line_item(payload: LineItemPayload, *, index: int) -> LineItem:
    properties = payload.properties
    return LineItem(
        index=index,
        product_id=payload.product_id,
        variant_id=payload.variant_id,
        quantity=payload.quantity,
        title=payload.title,
        properties=dict(properties),
        incompatible_product_ids=_parse_rule(
            parse_incompatible_product_ids,
            properties.get(INCOMPATIBLE_PRODUCTS_PROPERTY),
            payload=payload,
            default=(),
        ),
        max_quantity=_parse_rule(
            parse_max_quantity,
            properties.get(MAX_QUANTITY_PROPERTY),
            payload=payload,
            default=None,
        ),
        final_line_price=payload.final_line_price,
        requires_shipping=payload.requires_shipping,
    )


def _parse_rule[T](
    parser: Callable[[str | None], T],
    raw: str | None,
    *,
    payload: LineItemPayload,
    default: T,
) -> T:
    try:
        return parser(raw)
    except MalformedRuleError as exc:
        log.warning(
            "Ignoring malformed rule on product %s (variant %s): %s",
            payload.product_id,
            payload.variant_id,
            exc,
        )
        return default
