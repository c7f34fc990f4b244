"""
Catalog ingestion.

This module provides functions to:
- Load a catalog JSON file (products as returned by the catalog API)
- Locate the product payloads inside it
"""

import json
from pathlib import Path
from typing import Any, Dict, List


def load_catalog_file(path: str) -> Any:
    """
    Load the catalog JSON from disk.

    Args:
        path: Path to the JSON file

    Returns:
        The decoded JSON document (object or list)

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the JSON is invalid
        ValueError: If the file cannot be read
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(
            f"Catalog file not found: {path}. "
            f"Please ensure the file exists at the specified path."
        )

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(
            f"Invalid JSON in catalog file: {path}",
            e.doc,
            e.pos
        ) from e
    except OSError as e:
        raise ValueError(
            f"Error reading catalog file {path}: {e}"
        ) from e

    return data


def get_product_nodes(dataset: Any) -> List[Dict[str, Any]]:
    """
    Return the raw product payloads contained in a catalog document.

    Accepted shapes:
        {"products": [{...}, ...]}
        [{...}, ...]
        {"product": {...}}          (single product endpoint)
        {"id": ..., "name": ...}    (bare product)

    Raises:
        ValueError: If no product list can be found
    """
    if isinstance(dataset, list):
        return [p for p in dataset if isinstance(p, dict)]

    if not isinstance(dataset, dict):
        raise ValueError("Catalog must be a JSON object or list")

    products = dataset.get("products")
    if isinstance(products, list):
        return [p for p in products if isinstance(p, dict)]

    product = dataset.get("product")
    if isinstance(product, dict):
        return [product]

    if "id" in dataset and "name" in dataset:
        return [dataset]

    raise ValueError(
        "No products found. Expected structure: "
        '{"products": [{"id": ..., "name": ..., "base_price": ...}]}'
    )
