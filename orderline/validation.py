from __future__ import annotations

from typing import List

from .models import CatalogEntry, SelectionState


def missing_selections(entry: CatalogEntry, state: SelectionState) -> List[str]:
    """Top-level selections still missing, in display order."""
    missing: List[str] = []
    if state.selected_size is None:
        missing.append("size")
    if entry.is_combo:
        if state.selected_side is None:
            missing.append("side")
        if state.selected_drink is None:
            missing.append("drink")
    return missing


def missing_count(entry: CatalogEntry, state: SelectionState) -> int:
    # Required ingredients are not counted here; the stepper never lets
    # them drop below 1.
    return len(missing_selections(entry, state))


def is_submittable(entry: CatalogEntry, state: SelectionState) -> bool:
    if missing_selections(entry, state):
        return False
    for ing in entry.ingredients:
        if ing.is_required and state.quantity_of(ing.id) == 0:
            return False
    return True
