"""Cart domain model."""

from __future__ import annotations

from .cart import CartSnapshot, LineItem
from .page import ADD_TO_CART_LABEL, LIMIT_REACHED_LABEL, FormDirective, ProductForm
from .rules import (
    INCOMPATIBLE_PRODUCTS_PROPERTY,
    MAX_QUANTITY_PROPERTY,
    NO_LIMIT_SENTINEL,
    ConstraintRule,
    Incompatibility,
    MaxQuantity,
    PairKey,
    pair_key,
    parse_incompatible_product_ids,
    parse_max_quantity,
)

__all__ = [
    "ADD_TO_CART_LABEL",
    "INCOMPATIBLE_PRODUCTS_PROPERTY",
    "LIMIT_REACHED_LABEL",
    "MAX_QUANTITY_PROPERTY",
    "NO_LIMIT_SENTINEL",
    "CartSnapshot",
    "ConstraintRule",
    "FormDirective",
    "Incompatibility",
    "LineItem",
    "MaxQuantity",
    "PairKey",
    "ProductForm",
    "pair_key",
    "parse_incompatible_product_ids",
    "parse_max_quantity",
]
