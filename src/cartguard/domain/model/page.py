"""Declarative description of the product forms the guard keeps in sync."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

ADD_TO_CART_LABEL: Final[str] = "Ajouter au panier"
LIMIT_REACHED_LABEL: Final[str] = "Quantité maximale atteinte"


@dataclass(frozen=True, slots=True)
class ProductForm:
    """Static descriptor of one add-to-cart form on the current page."""

    form_id: str
    variant_id: int
    quantity_value: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class FormDirective:
    """Target state of one product form.

    ``quantity_value`` is ``None`` when the input value must be left untouched.
    """

    form_id: str
    variant_id: int
    quantity_ceiling: int
    quantity_value: int | None
    selector_visible: bool
    add_to_cart_enabled: bool
    button_label: str

    @property
    def limit_reached(self) -> bool:
        return self.quantity_ceiling == 0
