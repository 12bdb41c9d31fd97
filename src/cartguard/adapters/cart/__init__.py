"""Public interface for the storefront cart adapter."""

from __future__ import annotations

from .client import CartAPIError, StorefrontCartClient
from .schema import CartChangeRequest, CartPayload, LineItemPayload
from .translator import translate_cart, translate_line_item

__all__ = [
    "CartAPIError",
    "CartChangeRequest",
    "CartPayload",
    "LineItemPayload",
    "StorefrontCartClient",
    "translate_cart",
    "translate_line_item",
]
