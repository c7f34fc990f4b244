"""
Customization codec.

Only ingredient quantities and condiment toggles travel inside the blob;
size, side, drink and unit count are separate fields of the order line.

Wire shape (the same one the cart hands back on edit):

    {"condiments": {"1": true}, "ingredients": {"3": 2, "7": 0}}
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .models import Customizations, DecodeResult, SelectionState, SerializationError
from .utils import _trace, trace_enabled


INGREDIENTS_KEY = "ingredients"
CONDIMENTS_KEY = "condiments"


def serialize(state: SelectionState) -> str:
    payload = {
        INGREDIENTS_KEY: {str(k): int(v) for k, v in state.ingredient_quantities.items()},
        CONDIMENTS_KEY: {str(k): bool(v) for k, v in state.condiments.items()},
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


def _as_id(key: Any) -> int:
    if isinstance(key, bool):
        raise ValueError(f"invalid id: {key!r}")
    if isinstance(key, int):
        return key
    if isinstance(key, str) and key.strip().lstrip("-").isdigit():
        return int(key.strip())
    raise ValueError(f"invalid id: {key!r}")


def _parse_quantities(section: Any) -> Dict[int, int]:
    if not isinstance(section, dict):
        raise ValueError(f"'{INGREDIENTS_KEY}' must be an object")
    out: Dict[int, int] = {}
    for key, value in section.items():
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"quantity for ingredient {key!r} must be an integer")
        if value < 0:
            raise ValueError(f"quantity for ingredient {key!r} is negative")
        out[_as_id(key)] = value
    return out


def _parse_condiments(section: Any) -> Dict[int, bool]:
    if not isinstance(section, dict):
        raise ValueError(f"'{CONDIMENTS_KEY}' must be an object")
    out: Dict[int, bool] = {}
    for key, value in section.items():
        if not isinstance(value, bool):
            raise ValueError(f"flag for condiment {key!r} must be a boolean")
        out[_as_id(key)] = value
    return out


def deserialize(blob: Optional[str], *, debug: bool = False) -> DecodeResult:
    """
    Decode a customization blob. Never raises.

    - None / blank -> ok, reason "empty" (nothing to restore)
    - valid        -> ok, reason "decoded"
    - anything else -> not ok, reason "malformed", with a SerializationError
      carrying the raw blob so the caller can fall back to catalog defaults.
    """
    if blob is None or not str(blob).strip():
        return DecodeResult(ok=True, reason="empty", customizations=Customizations())

    try:
        data = json.loads(blob)
        if not isinstance(data, dict):
            raise ValueError("customizations must be a JSON object")

        quantities = None
        condiments = None
        # null sections are treated as absent
        if data.get(INGREDIENTS_KEY) is not None:
            quantities = _parse_quantities(data[INGREDIENTS_KEY])
        if data.get(CONDIMENTS_KEY) is not None:
            condiments = _parse_condiments(data[CONDIMENTS_KEY])
    except (TypeError, ValueError, RecursionError) as e:
        # json.JSONDecodeError is a ValueError; deep nesting overflows the parser
        _trace(trace_enabled(debug), "codec.malformed", {"error": str(e), "raw": str(blob)[:200]})
        return DecodeResult(
            ok=False,
            reason="malformed",
            error=SerializationError(message=str(e), raw=str(blob)),
        )

    return DecodeResult(
        ok=True,
        reason="decoded",
        customizations=Customizations(ingredient_quantities=quantities, condiments=condiments),
    )
