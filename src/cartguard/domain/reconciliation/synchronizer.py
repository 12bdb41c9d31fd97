"""Project the fresh cart onto the product forms of the current page."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from cartguard.domain.model import (
    ADD_TO_CART_LABEL,
    LIMIT_REACHED_LABEL,
    FormDirective,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cartguard.domain.model import CartSnapshot, LineItem, ProductForm


def sync(snapshot: CartSnapshot, forms: Sequence[ProductForm]) -> tuple[FormDirective, ...]:
    """Return the target state of every form whose variant carries a limit.

    Forms are matched to lines by variant id. Directives follow line order, so
    when several lines of one variant declare limits the last one wins.
    """

    if not forms:
        return ()
    forms_by_variant: defaultdict[int, list[ProductForm]] = defaultdict(list)
    for form in forms:
        forms_by_variant[form.variant_id].append(form)

    directives: list[FormDirective] = []
    for line in snapshot.items:
        headroom = line.headroom
        if headroom is None:
            continue
        directives.extend(
            _directive(line, headroom, form) for form in forms_by_variant.get(line.variant_id, ())
        )
    return tuple(directives)


def _directive(line: LineItem, headroom: int, form: ProductForm) -> FormDirective:
    if headroom == 0:
        return FormDirective(
            form_id=form.form_id,
            variant_id=line.variant_id,
            quantity_ceiling=0,
            quantity_value=None,
            selector_visible=False,
            add_to_cart_enabled=False,
            button_label=LIMIT_REACHED_LABEL,
        )
    return FormDirective(
        form_id=form.form_id,
        variant_id=line.variant_id,
        quantity_ceiling=headroom,
        quantity_value=min(form.quantity_value or 1, headroom),
        selector_visible=True,
        add_to_cart_enabled=True,
        button_label=ADD_TO_CART_LABEL,
    )
