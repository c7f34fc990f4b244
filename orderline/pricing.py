from __future__ import annotations

from typing import Optional

from .coupons import compute_discount
from .models import CatalogEntry, Coupon, IngredientOption, PricingResult, SelectionState
from .utils import round_money


def extra_ingredient_charge(ingredient: IngredientOption, quantity: int) -> float:
    """
    Tiered charge for one ingredient: the first unit is included in the base
    price, each further unit costs `extra_price`.
    """
    if quantity <= 1:
        return 0.0
    return (quantity - 1) * ingredient.extra_price


def compute_unit_price(entry: CatalogEntry, state: SelectionState) -> float:
    unit_price = entry.base_price
    if state.selected_size is not None:
        unit_price += state.selected_size.price_modifier
    if state.selected_side is not None:
        unit_price += state.selected_side.extra_price
    if state.selected_drink is not None:
        unit_price += state.selected_drink.extra_price
    for ing in entry.ingredients:
        unit_price += extra_ingredient_charge(ing, state.quantity_of(ing.id))
    return unit_price


def compute_subtotal(entry: CatalogEntry, state: SelectionState) -> float:
    # Unrounded; rounding happens once, in compute_pricing.
    return compute_unit_price(entry, state) * state.unit_count


def compute_pricing(
    entry: CatalogEntry,
    state: SelectionState,
    coupon: Optional[Coupon] = None,
) -> PricingResult:
    subtotal = compute_subtotal(entry, state)
    discount = compute_discount(coupon, subtotal)
    subtotal = round_money(subtotal)
    discount = min(discount, subtotal)
    return PricingResult(
        subtotal=subtotal,
        discount=discount,
        total=round_money(subtotal - discount),
    )
