"""
Selection state transitions.

Every function here takes a SelectionState and returns a new one; the input
is never modified. Ingredient and unit-count values are clamped into their
bounds instead of being rejected.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple, TypeVar

from .codec import deserialize
from .models import (
    CatalogEntry,
    DecodeResult,
    DrinkOption,
    EditRequest,
    IngredientOption,
    SelectionState,
    SideOption,
    SizeOption,
)
from .utils import _trace, trace_enabled


MIN_UNIT_COUNT = 1
MAX_UNIT_COUNT = 5

T = TypeVar("T", SizeOption, SideOption, DrinkOption)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def ingredient_bounds(ingredient: IngredientOption) -> Tuple[int, int]:
    low = 1 if ingredient.is_required else 0
    return low, ingredient.max_quantity


def default_quantities(entry: CatalogEntry) -> Dict[int, int]:
    return {ing.id: 1 for ing in entry.ingredients if ing.is_default or ing.is_required}


def initial_state(entry: CatalogEntry) -> SelectionState:
    return SelectionState(
        selected_size=entry.sizes[0] if entry.sizes else None,
        ingredient_quantities=default_quantities(entry),
    )


def set_size(state: SelectionState, size: Optional[SizeOption]) -> SelectionState:
    return state.model_copy(update={"selected_size": size})


def set_side(state: SelectionState, side: Optional[SideOption]) -> SelectionState:
    return state.model_copy(update={"selected_side": side})


def set_drink(state: SelectionState, drink: Optional[DrinkOption]) -> SelectionState:
    return state.model_copy(update={"selected_drink": drink})


def set_ingredient_quantity(
    entry: CatalogEntry,
    state: SelectionState,
    ingredient_id: int,
    delta: int,
) -> SelectionState:
    ingredient = entry.ingredient(ingredient_id)
    if ingredient is None:
        raise ValueError(f"Ingredient {ingredient_id} is not part of '{entry.name}'")

    low, high = ingredient_bounds(ingredient)
    new_value = _clamp(state.quantity_of(ingredient_id) + delta, low, high)
    quantities = dict(state.ingredient_quantities)
    quantities[ingredient_id] = new_value
    return state.model_copy(update={"ingredient_quantities": quantities})


def toggle_condiment(state: SelectionState, condiment_id: int) -> SelectionState:
    condiments = dict(state.condiments)
    condiments[condiment_id] = not condiments.get(condiment_id, False)
    return state.model_copy(update={"condiments": condiments})


def set_unit_count(state: SelectionState, n: int) -> SelectionState:
    return state.model_copy(update={"unit_count": _clamp(int(n), MIN_UNIT_COUNT, MAX_UNIT_COUNT)})


def step_unit_count(state: SelectionState, delta: int) -> SelectionState:
    return set_unit_count(state, state.unit_count + delta)


def _find_by_name(options: Sequence[T], name: Optional[str]) -> Optional[T]:
    if not name:
        return None
    for opt in options:
        if opt.name == name:
            return opt
    return None


def _fit_quantities(entry: CatalogEntry, decoded: Dict[int, int]) -> Dict[int, int]:
    # Ids unknown to the catalog are dropped; the rest are pulled into bounds
    # so a stale cart line cannot break the state invariants.
    out: Dict[int, int] = {}
    for ing in entry.ingredients:
        if ing.id not in decoded:
            if ing.is_required:
                out[ing.id] = 1
            continue
        low, high = ingredient_bounds(ing)
        out[ing.id] = _clamp(decoded[ing.id], low, high)
    return out


def rehydrate(
    entry: CatalogEntry,
    edit: Optional[EditRequest],
    *,
    debug: bool = False,
) -> Tuple[SelectionState, DecodeResult]:
    """
    Rebuild the selection for an existing cart line.

    Starts from initial_state(entry); any field missing from `edit` (or not
    matching a catalog option by name) keeps its fresh default. A malformed
    customization blob leaves the default-derived quantities in place and is
    reported through the returned DecodeResult.
    """
    state = initial_state(entry)
    if edit is None:
        return state, DecodeResult(ok=True, reason="empty")

    size = _find_by_name(entry.sizes, edit.size_name)
    if size is not None:
        state = set_size(state, size)
    side = _find_by_name(entry.sides, edit.side_name)
    if side is not None:
        state = set_side(state, side)
    drink = _find_by_name(entry.drinks, edit.drink_name)
    if drink is not None:
        state = set_drink(state, drink)
    if edit.unit_count is not None:
        state = set_unit_count(state, edit.unit_count)

    decoded = deserialize(edit.serialized_customizations, debug=debug)
    if decoded.ok and decoded.customizations is not None:
        c = decoded.customizations
        if c.ingredient_quantities is not None:
            state = state.model_copy(
                update={"ingredient_quantities": _fit_quantities(entry, c.ingredient_quantities)}
            )
        if c.condiments is not None:
            state = state.model_copy(update={"condiments": dict(c.condiments)})

    _trace(
        trace_enabled(debug),
        "selection.rehydrate",
        {
            "entry_id": entry.id,
            "size_matched": size is not None if edit.size_name else None,
            "side_matched": side is not None if edit.side_name else None,
            "drink_matched": drink is not None if edit.drink_name else None,
            "decode_reason": decoded.reason,
            "unit_count": state.unit_count,
        },
    )
    return state, decoded
