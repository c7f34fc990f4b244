"""
Coupon discount evaluation.

The active coupon is always passed in by the caller (directly or through a
CouponStore); nothing here reads shared state.
"""

from __future__ import annotations

from typing import Optional

from .models import Coupon, CouponEvaluation
from .utils import round_money


def evaluate_coupon(coupon: Optional[Coupon], subtotal: float) -> CouponEvaluation:
    if coupon is None:
        return CouponEvaluation(discount=0.0, reason="no_coupon")

    if subtotal < coupon.min_purchase:
        return CouponEvaluation(discount=0.0, reason="below_min_purchase", coupon_id=coupon.id)

    if coupon.discount_type == "percentage":
        discount = subtotal * coupon.discount_value / 100
        if coupon.max_discount:
            discount = min(discount, coupon.max_discount)
    else:
        discount = coupon.discount_value

    # Fixed coupons larger than the subtotal must not push the total below zero.
    discount = round_money(min(discount, max(subtotal, 0.0)))
    return CouponEvaluation(discount=discount, reason="applied", coupon_id=coupon.id)


def compute_discount(coupon: Optional[Coupon], subtotal: float) -> float:
    return evaluate_coupon(coupon, subtotal).discount


class InMemoryCouponStore:
    """Holds the coupon the user picked until it is detached."""

    def __init__(self, coupon: Optional[Coupon] = None) -> None:
        self._coupon = coupon

    def current(self) -> Optional[Coupon]:
        return self._coupon

    def select(self, coupon: Optional[Coupon]) -> None:
        self._coupon = coupon

    def clear(self) -> None:
        self._coupon = None
