"""Order-line composition and pricing engine for the food-ordering client."""

from .bootstrap import load_catalog
from .builder import build_order_line, submit_order_line
from .codec import deserialize, serialize
from .coupons import compute_discount
from .pricing import compute_pricing, compute_subtotal
from .selectors import ProductEditor
from .validation import is_submittable, missing_count

__all__ = [
    "load_catalog",
    "build_order_line",
    "submit_order_line",
    "serialize",
    "deserialize",
    "compute_discount",
    "compute_pricing",
    "compute_subtotal",
    "ProductEditor",
    "is_submittable",
    "missing_count",
]
