from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SizeOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price_modifier: float = 0.0


class SideOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    extra_price: float = 0.0


class DrinkOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    extra_price: float = 0.0


class CondimentOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class IngredientOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    is_required: bool = False
    is_default: bool = False
    max_quantity: int = Field(default=1, ge=1)
    extra_price: float = 0.0  # per unit beyond the first


def default_condiments() -> List[CondimentOption]:
    return [
        CondimentOption(id=1, name="Ketchup"),
        CondimentOption(id=2, name="Mustard"),
        CondimentOption(id=3, name="Mayonnaise"),
        CondimentOption(id=4, name="BBQ Sauce"),
    ]


class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    base_price: float = Field(ge=0)
    is_combo: bool = False
    category: Optional[str] = None
    description: Optional[str] = None
    sizes: List[SizeOption] = Field(default_factory=list)
    sides: List[SideOption] = Field(default_factory=list)
    drinks: List[DrinkOption] = Field(default_factory=list)
    ingredients: List[IngredientOption] = Field(default_factory=list)
    condiments: List[CondimentOption] = Field(default_factory=default_condiments)

    def ingredient(self, ingredient_id: int) -> Optional[IngredientOption]:
        for ing in self.ingredients:
            if ing.id == ingredient_id:
                return ing
        return None


DiscountType = Literal["percentage", "fixed"]


class Coupon(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    discount_type: DiscountType
    discount_value: float = Field(ge=0)
    min_purchase: float = 0.0
    max_discount: Optional[float] = None  # percentage coupons only
    product_id: Optional[int] = None  # product screen the coupon links to; not a pricing condition
    description: Optional[str] = None

    @model_validator(mode="after")
    def _percentage_range(self) -> "Coupon":
        if self.discount_type == "percentage" and self.discount_value > 100:
            raise ValueError("percentage coupons cannot exceed 100")
        return self


class SelectionState(BaseModel):
    """
    The user's in-progress choices for one catalog entry.

    Instances are never modified; every mutation in `orderline.selection`
    returns a new state.
    """

    model_config = ConfigDict(frozen=True)

    selected_size: Optional[SizeOption] = None
    selected_side: Optional[SideOption] = None
    selected_drink: Optional[DrinkOption] = None
    ingredient_quantities: Dict[int, int] = Field(default_factory=dict)  # sparse, absent == 0
    condiments: Dict[int, bool] = Field(default_factory=dict)
    unit_count: int = Field(default=1, ge=1, le=5)

    def quantity_of(self, ingredient_id: int) -> int:
        return self.ingredient_quantities.get(ingredient_id, 0)


class PricingResult(BaseModel):
    subtotal: float
    discount: float = 0.0
    total: float


class Customizations(BaseModel):
    # None means the section was absent from the blob
    ingredient_quantities: Optional[Dict[int, int]] = None
    condiments: Optional[Dict[int, bool]] = None


class SerializationError(BaseModel):
    code: str = "MALFORMED_CUSTOMIZATIONS"
    message: str
    raw: Optional[str] = None


class DecodeResult(BaseModel):
    ok: bool
    reason: Literal["decoded", "empty", "malformed"]
    customizations: Optional[Customizations] = None
    error: Optional[SerializationError] = None


class EditRequest(BaseModel):
    size_name: Optional[str] = None
    side_name: Optional[str] = None
    drink_name: Optional[str] = None
    serialized_customizations: Optional[str] = None
    unit_count: Optional[int] = None


class OrderLinePayload(BaseModel):
    product_id: int
    size_id: int
    side_id: Optional[int] = None
    drink_id: Optional[int] = None
    unit_count: int
    serialized_customizations: str


class OrderLine(BaseModel):
    payload: OrderLinePayload
    pricing: PricingResult
    coupon_id: Optional[int] = None


class EngineError(BaseModel):
    code: str  # e.g. "MISSING_SELECTIONS"
    message: str


class SubmitResult(BaseModel):
    ok: bool
    line_id: Optional[int] = None
    line: Optional[OrderLine] = None
    error: Optional[EngineError] = None
    missing_count: int = 0


class CouponEvaluation(BaseModel):
    discount: float
    reason: Literal["no_coupon", "below_min_purchase", "applied"]
    coupon_id: Optional[int] = None


class CatalogLookup(BaseModel):
    ok: bool
    entry_id: int
    entry: Optional[CatalogEntry] = None
    reason: Literal["found", "not_found"]


class CatalogIndex(BaseModel):
    # Primary table, insertion order == catalog order
    entries: Dict[int, CatalogEntry] = Field(default_factory=dict)

    # normalized name -> ids (two entries can share a name)
    entries_by_norm_name: Dict[str, List[int]] = Field(default_factory=dict)

    # entry id -> normalized name, the choices fed to the fuzzy scorer
    name_choices: Dict[int, str] = Field(default_factory=dict)

    def get_entry(self, entry_id: int) -> CatalogLookup:
        entry = self.entries.get(entry_id)
        if entry is None:
            return CatalogLookup(ok=False, entry_id=entry_id, reason="not_found")
        return CatalogLookup(ok=True, entry_id=entry_id, entry=entry, reason="found")


class Candidate(BaseModel):
    entry_id: int
    display: str
    score: float


class ResolveResult(BaseModel):
    ok: bool
    query: str
    resolved_id: Optional[int] = None
    resolved_display: Optional[str] = None
    candidates: List[Candidate] = Field(default_factory=list)
    reason: Optional[str] = None
