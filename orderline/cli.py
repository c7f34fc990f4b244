from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional, Tuple, Union

from .bootstrap import default_catalog_path, load_catalog
from .builder import build_payload
from .formatting import submit_label
from .index import resolve_entry
from .ingest import load_catalog_file
from .interfaces import CatalogService
from .models import CatalogEntry, CatalogIndex, Coupon, EditRequest, ResolveResult
from .pricing import compute_pricing
from .selectors import ProductEditor
from .utils import trace_enabled


def _write_json(obj: Any) -> None:
    sys.stdout.write(json.dumps(obj, ensure_ascii=False, indent=2, default=str) + "\n")


def _lookup(catalog: CatalogService, product_id: int) -> Optional[CatalogEntry]:
    lookup = catalog.get_entry(product_id)
    return lookup.entry if lookup.ok else None


def find_entry(
    index: CatalogIndex,
    product: Union[int, str],
    *,
    debug: bool = False,
) -> Tuple[Optional[CatalogEntry], Optional[ResolveResult]]:
    """
    Find an entry by id, or by name when `product` is not a number.
    The ResolveResult is returned for name lookups so callers can show
    candidates when the name is ambiguous.
    """
    text = str(product).strip()
    if text.isdigit():
        return _lookup(index, int(text)), None

    res = resolve_entry(index, text, debug=debug)
    if not res.ok or res.resolved_id is None:
        return None, res
    return _lookup(index, res.resolved_id), res


def _load_coupon(path: Optional[str]) -> Optional[Coupon]:
    if not path:
        return None
    data = load_catalog_file(path)
    if isinstance(data, dict) and isinstance(data.get("coupon"), dict):
        data = data["coupon"]
    return Coupon.model_validate(data)


def quote(
    catalog: str,
    product: Union[int, str],
    *,
    size: Optional[str] = None,
    side: Optional[str] = None,
    drink: Optional[str] = None,
    customizations: Optional[str] = None,
    units: Optional[int] = None,
    coupon_path: Optional[str] = None,
    debug: bool = False,
) -> dict:
    """
    Price one order line. `product` is an entry id or a product name.

    When the product cannot be found the result carries an "error" section
    (with name candidates, if any) instead of a quote.
    """
    trace = trace_enabled(debug)
    entry, resolved = find_entry(load_catalog(catalog), product, debug=trace)
    if entry is None:
        return {
            "error": {
                "code": "PRODUCT_NOT_FOUND",
                "query": str(product),
                "reason": resolved.reason if resolved is not None else "not_found",
                "candidates": [c.model_dump() for c in resolved.candidates] if resolved is not None else [],
            }
        }

    editor = ProductEditor(
        entry,
        EditRequest(
            size_name=size,
            side_name=side,
            drink_name=drink,
            serialized_customizations=customizations,
            unit_count=units,
        ),
        debug=trace,
    )
    coupon = _load_coupon(coupon_path)
    state = editor.state

    return {
        "product": {"id": entry.id, "name": entry.name, "is_combo": entry.is_combo},
        "submittable": editor.is_submittable(),
        "missing_count": editor.missing_count(),
        "label": submit_label(entry, state),
        "customizations_decode": editor.decode_result.reason,
        "payload": build_payload(entry, state).model_dump() if state.selected_size else None,
        "pricing": compute_pricing(entry, state, coupon).model_dump(),
    }


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Price an order line against a catalog file.")
    p.add_argument("--catalog", default=None, help=f"Catalog path (default: $ORDERLINE_CATALOG_PATH or {default_catalog_path()})")
    p.add_argument("--product", required=True, help="Catalog entry id or product name")
    p.add_argument("--size", default=None, help="Size name (default: first size)")
    p.add_argument("--side", default=None, help="Side name")
    p.add_argument("--drink", default=None, help="Drink name")
    p.add_argument("--customizations", default=None, help="Serialized customizations JSON")
    p.add_argument("--units", type=int, default=None, help="Unit count (clamped to 1-5)")
    p.add_argument("--coupon", dest="coupon", default=None, help="Path to a coupon JSON file")
    p.add_argument("--debug", action="store_true", help="Trace to stderr")
    args = p.parse_args(argv)

    result = quote(
        args.catalog or default_catalog_path(),
        args.product,
        size=args.size,
        side=args.side,
        drink=args.drink,
        customizations=args.customizations,
        units=args.units,
        coupon_path=args.coupon,
        debug=args.debug,
    )
    _write_json(result)
    if "error" in result:
        print(f"Product {args.product!r} not found", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
