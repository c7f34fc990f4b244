from __future__ import annotations

from typing import Optional

from .codec import serialize
from .formatting import missing_selections_label
from .interfaces import CartAggregate, CouponStore
from .models import (
    CatalogEntry,
    Coupon,
    EngineError,
    OrderLine,
    OrderLinePayload,
    SelectionState,
    SubmitResult,
)
from .pricing import compute_pricing
from .utils import _trace, trace_enabled
from .validation import is_submittable, missing_count


def build_payload(entry: CatalogEntry, state: SelectionState) -> OrderLinePayload:
    """
    Raises ValueError when no size is selected. Gate on is_submittable, or use
    submit_order_line, which reports missing selections as a result.
    """
    if state.selected_size is None:
        raise ValueError(f"'{entry.name}' has no size selected")

    # Side and drink only travel for combos.
    side_id = state.selected_side.id if entry.is_combo and state.selected_side else None
    drink_id = state.selected_drink.id if entry.is_combo and state.selected_drink else None

    return OrderLinePayload(
        product_id=entry.id,
        size_id=state.selected_size.id,
        side_id=side_id,
        drink_id=drink_id,
        unit_count=state.unit_count,
        serialized_customizations=serialize(state),
    )


def build_order_line(
    entry: CatalogEntry,
    state: SelectionState,
    coupon: Optional[Coupon] = None,
) -> OrderLine:
    """Payload plus pricing. Same precondition as build_payload."""
    pricing = compute_pricing(entry, state, coupon)
    return OrderLine(
        payload=build_payload(entry, state),
        pricing=pricing,
        coupon_id=coupon.id if coupon is not None and pricing.discount > 0 else None,
    )


def submit_order_line(
    entry: CatalogEntry,
    state: SelectionState,
    cart: CartAggregate,
    coupon_store: Optional[CouponStore] = None,
    *,
    debug: bool = False,
) -> SubmitResult:
    """
    Validate, price and hand the line to the cart.

    A blocked submission is returned as a result (never raised) and the
    cart is not called.
    """
    trace = trace_enabled(debug)

    if not is_submittable(entry, state):
        missing = missing_count(entry, state)
        _trace(trace, "builder.blocked", {"entry_id": entry.id, "missing_count": missing})
        return SubmitResult(
            ok=False,
            error=EngineError(
                code="MISSING_SELECTIONS",
                message=missing_selections_label(missing) if missing else "Required ingredients are missing",
            ),
            missing_count=missing,
        )

    coupon = coupon_store.current() if coupon_store is not None else None
    line = build_order_line(entry, state, coupon)
    p = line.payload
    line_id = cart.add_line(
        p.product_id,
        p.size_id,
        p.side_id,
        p.drink_id,
        p.unit_count,
        p.serialized_customizations,
    )

    _trace(
        trace,
        "builder.submitted",
        {
            "entry_id": entry.id,
            "line_id": line_id,
            "subtotal": line.pricing.subtotal,
            "discount": line.pricing.discount,
            "coupon_id": line.coupon_id,
        },
    )
    return SubmitResult(ok=True, line_id=line_id, line=line)
