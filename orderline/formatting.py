from __future__ import annotations

from .models import CatalogEntry, Coupon, SelectionState
from .validation import is_submittable, missing_count


def _plural(n: int, singular: str, plural: str) -> str:
    return singular if n == 1 else plural


def _number(value: float) -> str:
    # 15.0 -> "15", 12.5 -> "12.5"
    return f"{value:g}"


def missing_selections_label(n: int) -> str:
    return f"{n} {_plural(n, 'required selection', 'required selections')}"


def ingredients_preview(entry: CatalogEntry, state: SelectionState) -> str:
    if not entry.ingredients:
        return "Customize"
    selected = sum(1 for ing in entry.ingredients if state.quantity_of(ing.id) > 0)
    if selected == 0:
        return "Customize"
    return f"{selected} {_plural(selected, 'ingredient', 'ingredients')} selected"


def condiments_preview(state: SelectionState) -> str:
    selected = sum(1 for v in state.condiments.values() if v)
    if selected == 0:
        return "Customize"
    return f"{selected} selected"


def coupon_badge(coupon: Coupon) -> str:
    if coupon.discount_type == "percentage":
        return f"{_number(coupon.discount_value)}% OFF"
    return f"{_number(coupon.discount_value)} OFF"


def submit_label(entry: CatalogEntry, state: SelectionState) -> str:
    """Text for the add-to-cart button."""
    if is_submittable(entry, state):
        return "Add"
    n = missing_count(entry, state)
    if n == 0:
        return "Required ingredients missing"
    return missing_selections_label(n)
