from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .ingest import get_product_nodes
from .models import (
    CatalogEntry,
    CondimentOption,
    DrinkOption,
    IngredientOption,
    SideOption,
    SizeOption,
    default_condiments,
)


def _as_int(value: Any) -> Optional[int]:
    try:
        if value is None:
            return None
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_float(value: Any, default: float = 0.0) -> float:
    # The API serializes DECIMAL columns as strings ("150.00").
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y"}
    return False


def _name(row: Dict[str, Any]) -> Optional[str]:
    v = row.get("name")
    if isinstance(v, str) and v.strip():
        return v.strip()
    return None


def _rows(node: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    v = node.get(key)
    if not isinstance(v, list):
        return []
    return [r for r in v if isinstance(r, dict)]


def extract_sizes(node: Dict[str, Any]) -> List[SizeOption]:
    out: List[SizeOption] = []
    for row in _rows(node, "sizes"):
        sid, name = _as_int(row.get("id")), _name(row)
        if sid is None or name is None:
            continue
        out.append(SizeOption(id=sid, name=name, price_modifier=_as_float(row.get("price_modifier"))))
    return out


def extract_sides(node: Dict[str, Any]) -> List[SideOption]:
    out: List[SideOption] = []
    for row in _rows(node, "sides"):
        sid, name = _as_int(row.get("id")), _name(row)
        if sid is None or name is None:
            continue
        out.append(SideOption(id=sid, name=name, extra_price=_as_float(row.get("extra_price"))))
    return out


def extract_drinks(node: Dict[str, Any]) -> List[DrinkOption]:
    out: List[DrinkOption] = []
    for row in _rows(node, "drinks"):
        did, name = _as_int(row.get("id")), _name(row)
        if did is None or name is None:
            continue
        out.append(DrinkOption(id=did, name=name, extra_price=_as_float(row.get("extra_price"))))
    return out


def extract_ingredients(node: Dict[str, Any]) -> List[IngredientOption]:
    """
    Ingredient rows in catalog order.
    Rows without id/name are skipped; a max_quantity below 1 becomes 1.
    """
    out: List[IngredientOption] = []
    for row in _rows(node, "ingredients"):
        iid, name = _as_int(row.get("id")), _name(row)
        if iid is None or name is None:
            continue
        max_qty = _as_int(row.get("max_quantity"))
        out.append(
            IngredientOption(
                id=iid,
                name=name,
                is_required=_as_bool(row.get("is_required")),
                is_default=_as_bool(row.get("is_default")),
                max_quantity=max(1, max_qty if max_qty is not None else 1),
                extra_price=_as_float(row.get("extra_price")),
            )
        )
    return out


def extract_condiments(node: Dict[str, Any]) -> List[CondimentOption]:
    if "condiments" not in node:
        return default_condiments()
    out: List[CondimentOption] = []
    for row in _rows(node, "condiments"):
        cid, name = _as_int(row.get("id")), _name(row)
        if cid is None or name is None:
            continue
        out.append(CondimentOption(id=cid, name=name))
    return out


def normalize_entry(node: Dict[str, Any]) -> Optional[CatalogEntry]:
    """
    Parse one product payload into a CatalogEntry.
    Returns None when the product has no usable id or name, or when the
    parsed values are rejected by the model (e.g. a negative base price).
    """
    if isinstance(node.get("product"), dict):
        node = node["product"]

    entry_id = _as_int(node.get("id"))
    name = _name(node)
    if entry_id is None or name is None:
        return None

    category = node.get("category")
    description = node.get("description")
    try:
        return CatalogEntry(
            id=entry_id,
            name=name,
            base_price=_as_float(node.get("base_price")),
            is_combo=_as_bool(node.get("is_combo")),
            category=category.strip() if isinstance(category, str) and category.strip() else None,
            description=description.strip() if isinstance(description, str) and description.strip() else None,
            sizes=extract_sizes(node),
            sides=extract_sides(node),
            drinks=extract_drinks(node),
            ingredients=extract_ingredients(node),
            condiments=extract_condiments(node),
        )
    except ValidationError:
        return None


def normalize_catalog(dataset: Any) -> Dict[int, CatalogEntry]:
    """
    Parse a catalog document and return entries by id, in catalog order.
    Later duplicates of an id replace earlier ones.
    """
    entries: Dict[int, CatalogEntry] = {}
    for node in get_product_nodes(dataset):
        entry = normalize_entry(node)
        if entry is None:
            continue
        entries[entry.id] = entry
    return entries
