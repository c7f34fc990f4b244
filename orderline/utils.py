from __future__ import annotations

import json
import math
import os
import re
import sys
import unicodedata


_NON_ALNUM_SPACE_RE = re.compile(r"[^a-z0-9 ]+")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(s: str) -> str:
    """
    Normalize text for matching:
    - unicode normalize (NFKD)
    - lowercase
    - remove punctuation
    - collapse whitespace
    """
    if s is None:
        return ""
    s = str(s)
    s = unicodedata.normalize("NFKD", s)
    # strip diacritics
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = s.lower()
    s = s.replace("-", " ").replace("_", " ")
    s = _NON_ALNUM_SPACE_RE.sub(" ", s)
    s = _WHITESPACE_RE.sub(" ", s).strip()
    return s


def round_money(value: float) -> float:
    """
    Round to 2 decimals, halves away from zero for positive amounts.

    Python's round() is banker's rounding; amounts shown to the user must
    match the half-up rounding the cart applies (floor(x * 100 + 0.5) / 100).
    """
    return math.floor(value * 100 + 0.5) / 100


def trace_enabled(debug: bool = False) -> bool:
    return bool(debug or os.getenv("DEBUG_TRACE") == "1")


def _trace(enabled: bool, event: str, payload: dict) -> None:
    """
    Lightweight structured tracing to stderr.
    No-op when disabled.
    """
    if not enabled:
        return
    print(
        f"[trace] {event} {json.dumps(payload, ensure_ascii=False, default=str)}",
        file=sys.stderr,
    )
