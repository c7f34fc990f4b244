"""
Collaborators the engine talks to but does not implement.

Real implementations sit behind the remote API (catalog endpoint, cart
endpoint); tests and the CLI use in-process stand-ins.
"""

from __future__ import annotations

from typing import Optional, Protocol

from .models import CatalogLookup, Coupon


class CatalogService(Protocol):
    def get_entry(self, entry_id: int) -> CatalogLookup:
        ...


class CouponStore(Protocol):
    def current(self) -> Optional[Coupon]:
        ...

    def clear(self) -> None:
        ...


class CartAggregate(Protocol):
    def add_line(
        self,
        product_id: int,
        size_id: int,
        side_id: Optional[int],
        drink_id: Optional[int],
        unit_count: int,
        serialized_customizations: str,
    ) -> int:
        ...
