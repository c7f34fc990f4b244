"""
Option-selector contracts and the editor that owns one selection.

Size, side and drink use the single-select OptionSelector; condiments use a
multi-toggle; ingredients use a per-item stepper. All of them list options
in catalog order and push every change back through a callback, so the
owner (ProductEditor) is the only writer of the SelectionState.
"""

from __future__ import annotations

from typing import Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel

from . import selection
from .builder import submit_order_line
from .interfaces import CartAggregate, CouponStore
from .models import (
    CatalogEntry,
    CondimentOption,
    DrinkOption,
    EditRequest,
    IngredientOption,
    PricingResult,
    SelectionState,
    SideOption,
    SizeOption,
    SubmitResult,
)
from .pricing import compute_pricing, extra_ingredient_charge
from .utils import trace_enabled
from .validation import is_submittable, missing_count

T = TypeVar("T", SizeOption, SideOption, DrinkOption)
R = TypeVar("R")


class OptionRow(BaseModel):
    id: int
    name: str
    extra_price: float
    selected: bool


class StepperRow(BaseModel):
    id: int
    name: str
    quantity: int
    is_required: bool
    max_quantity: int
    extra_charge: float  # tiered price of the current quantity
    can_decrease: bool
    can_increase: bool


def _extra_price(option: BaseModel) -> float:
    if isinstance(option, SizeOption):
        return option.price_modifier
    return getattr(option, "extra_price", 0.0)


class OptionSelector(Generic[T, R]):
    def __init__(self, options: Sequence[T], selected: Optional[T], on_select: Callable[[T], R]) -> None:
        self.options = list(options)
        self.selected = selected
        self.on_select = on_select

    def rows(self) -> List[OptionRow]:
        selected_id = self.selected.id if self.selected is not None else None
        return [
            OptionRow(id=o.id, name=o.name, extra_price=_extra_price(o), selected=o.id == selected_id)
            for o in self.options
        ]

    def select(self, option_id: int) -> R:
        for o in self.options:
            if o.id == option_id:
                self.selected = o
                return self.on_select(o)
        raise ValueError(f"Unknown option id: {option_id}")


class CondimentSelector(Generic[R]):
    def __init__(
        self,
        options: Sequence[CondimentOption],
        selected: Dict[int, bool],
        on_toggle: Callable[[int], R],
    ) -> None:
        self.options = list(options)
        self.selected = dict(selected)
        self.on_toggle = on_toggle

    @property
    def selected_count(self) -> int:
        return sum(1 for o in self.options if self.selected.get(o.id, False))

    def rows(self) -> List[OptionRow]:
        return [
            OptionRow(id=o.id, name=o.name, extra_price=0.0, selected=self.selected.get(o.id, False))
            for o in self.options
        ]

    def toggle(self, condiment_id: int) -> R:
        if not any(o.id == condiment_id for o in self.options):
            raise ValueError(f"Unknown condiment id: {condiment_id}")
        self.selected[condiment_id] = not self.selected.get(condiment_id, False)
        return self.on_toggle(condiment_id)


class IngredientStepper(Generic[R]):
    def __init__(
        self,
        ingredients: Sequence[IngredientOption],
        quantities: Dict[int, int],
        on_change: Callable[[int, int], R],
    ) -> None:
        self.ingredients = list(ingredients)
        self.quantities = dict(quantities)
        self.on_change = on_change

    def _row(self, ing: IngredientOption) -> StepperRow:
        qty = self.quantities.get(ing.id, 0)
        low, high = selection.ingredient_bounds(ing)
        return StepperRow(
            id=ing.id,
            name=ing.name,
            quantity=qty,
            is_required=ing.is_required,
            max_quantity=ing.max_quantity,
            extra_charge=extra_ingredient_charge(ing, qty),
            can_decrease=qty > low,
            can_increase=qty < high,
        )

    def rows(self) -> List[StepperRow]:
        return [self._row(ing) for ing in self.ingredients]

    def increment(self, ingredient_id: int) -> R:
        return self.on_change(ingredient_id, 1)

    def decrement(self, ingredient_id: int) -> R:
        return self.on_change(ingredient_id, -1)


class ProductEditor:
    """
    Single owner of the SelectionState for one catalog entry.

    Selectors handed out by the editor write back through it; each write
    replaces `state` with the next state.
    """

    def __init__(self, entry: CatalogEntry, edit: Optional[EditRequest] = None, *, debug: bool = False) -> None:
        self.entry = entry
        self.debug = trace_enabled(debug)
        self.state, self.decode_result = selection.rehydrate(entry, edit, debug=self.debug)

    def _apply(self, state: SelectionState) -> SelectionState:
        self.state = state
        return state

    # -- selectors --------------------------------------------------------

    def size_selector(self) -> OptionSelector[SizeOption, SelectionState]:
        return OptionSelector(
            self.entry.sizes,
            self.state.selected_size,
            lambda o: self._apply(selection.set_size(self.state, o)),
        )

    def side_selector(self) -> OptionSelector[SideOption, SelectionState]:
        return OptionSelector(
            self.entry.sides,
            self.state.selected_side,
            lambda o: self._apply(selection.set_side(self.state, o)),
        )

    def drink_selector(self) -> OptionSelector[DrinkOption, SelectionState]:
        return OptionSelector(
            self.entry.drinks,
            self.state.selected_drink,
            lambda o: self._apply(selection.set_drink(self.state, o)),
        )

    def condiment_selector(self) -> CondimentSelector[SelectionState]:
        return CondimentSelector(
            self.entry.condiments,
            self.state.condiments,
            lambda cid: self._apply(selection.toggle_condiment(self.state, cid)),
        )

    def ingredient_stepper(self) -> IngredientStepper[SelectionState]:
        stepper: IngredientStepper[SelectionState]

        def on_change(ingredient_id: int, delta: int) -> SelectionState:
            new_state = self._apply(selection.set_ingredient_quantity(self.entry, self.state, ingredient_id, delta))
            stepper.quantities = dict(new_state.ingredient_quantities)
            return new_state

        stepper = IngredientStepper(self.entry.ingredients, self.state.ingredient_quantities, on_change)
        return stepper

    def step_units(self, delta: int) -> SelectionState:
        return self._apply(selection.step_unit_count(self.state, delta))

    # -- derived values, recomputed on every call -------------------------

    def is_submittable(self) -> bool:
        return is_submittable(self.entry, self.state)

    def missing_count(self) -> int:
        return missing_count(self.entry, self.state)

    def pricing(self, coupon_store: Optional[CouponStore] = None) -> PricingResult:
        coupon = coupon_store.current() if coupon_store is not None else None
        return compute_pricing(self.entry, self.state, coupon)

    def detach_coupon(self, coupon_store: CouponStore) -> None:
        coupon_store.clear()

    def submit(self, cart: CartAggregate, coupon_store: Optional[CouponStore] = None) -> SubmitResult:
        return submit_order_line(self.entry, self.state, cart, coupon_store, debug=self.debug)
