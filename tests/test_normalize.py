import pytest

from orderline.ingest import load_catalog_file
from orderline.models import CatalogEntry, IngredientOption
from orderline.normalize import (
    extract_condiments,
    extract_ingredients,
    extract_sizes,
    normalize_catalog,
    normalize_entry,
)


@pytest.fixture
def dataset():
    return load_catalog_file("data/catalog.json")


def test_normalize_returns_entries_in_catalog_order(dataset):
    entries = normalize_catalog(dataset)
    assert list(entries.keys()) == [1, 2, 3, 4]
    assert all(isinstance(e, CatalogEntry) for e in entries.values())


def test_rows_without_id_are_skipped(dataset):
    entries = normalize_catalog(dataset)
    assert all(e.name != "Broken row without id" for e in entries.values())


def test_string_numbers_and_int_flags_are_coerced(dataset):
    entry = normalize_catalog(dataset)[2]
    assert entry.base_price == 350.0
    assert entry.is_combo is False
    beef = entry.ingredient(101)
    assert beef is not None
    assert beef.is_required is True
    assert beef.extra_price == 150.0
    assert entry.sizes[0].price_modifier == 0.0


def test_missing_condiments_fall_back_to_standard_list(dataset):
    entry = normalize_catalog(dataset)[1]
    assert [c.name for c in entry.condiments] == ["Ketchup", "Mustard", "Mayonnaise", "BBQ Sauce"]


def test_explicit_empty_condiments_are_kept():
    assert extract_condiments({"condiments": []}) == []


def test_extract_ingredients_synthetic():
    node = {
        "ingredients": [
            {"id": "7", "name": "Tomato", "is_required": "false", "is_default": "true", "max_quantity": 0, "extra_price": "12.5"},
            {"name": "No id"},
            {"id": 8, "name": "Lettuce"},
        ]
    }
    ings = extract_ingredients(node)
    assert [i.id for i in ings] == [7, 8]
    assert all(isinstance(i, IngredientOption) for i in ings)
    assert ings[0].is_default is True
    assert ings[0].is_required is False
    assert ings[0].max_quantity == 1
    assert ings[0].extra_price == 12.5
    assert ings[1].max_quantity == 1


def test_extract_sizes_preserves_order():
    node = {"sizes": [{"id": 2, "name": "Large", "price_modifier": 100}, {"id": 1, "name": "Medium"}]}
    assert [s.name for s in extract_sizes(node)] == ["Large", "Medium"]


def test_normalize_entry_unwraps_product_payload():
    entry = normalize_entry({"product": {"id": 9, "name": "Shake", "base_price": 200}})
    assert entry is not None
    assert entry.id == 9
    assert entry.sizes == []


def test_normalize_entry_rejects_negative_price():
    assert normalize_entry({"id": 9, "name": "Shake", "base_price": -1}) is None


def test_normalize_entry_requires_name():
    assert normalize_entry({"id": 9, "name": "   ", "base_price": 1}) is None
