from __future__ import annotations

import json
import os
from typing import Optional

from .index import build_index
from .ingest import load_catalog_file
from .models import CatalogIndex
from .normalize import normalize_catalog

DEFAULT_CATALOG_PATH = "data/catalog.json"


def default_catalog_path() -> str:
    return os.getenv("ORDERLINE_CATALOG_PATH") or DEFAULT_CATALOG_PATH


def load_catalog(catalog_path: Optional[str] = None) -> CatalogIndex:
    """
    Load catalog JSON, normalize, build index, and return CatalogIndex.
    Must raise clear, actionable errors for invalid input files.
    """
    path = catalog_path or default_catalog_path()
    try:
        dataset = load_catalog_file(path)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in catalog file: {path}") from e

    entries = normalize_catalog(dataset)
    if not entries:
        raise ValueError(f"No catalog entries found after normalization: {path}")

    return build_index(entries)

