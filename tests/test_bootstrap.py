import pytest

from orderline.bootstrap import load_catalog
from orderline.models import CatalogIndex


def test_load_catalog_returns_index():
    index = load_catalog("data/catalog.json")
    assert isinstance(index, CatalogIndex)
    assert len(index.entries) == 4


def test_missing_file_raises_file_not_found():
    with pytest.raises(FileNotFoundError):
        load_catalog("data/does_not_exist.json")


def test_invalid_json_raises_value_error(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text("{nope")
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_catalog(str(p))


def test_no_usable_entries_raises_value_error(tmp_path):
    p = tmp_path / "empty.json"
    p.write_text('{"products": [{"name": "no id"}]}')
    with pytest.raises(ValueError, match="No catalog entries"):
        load_catalog(str(p))


def test_catalog_path_from_environment(monkeypatch):
    monkeypatch.setenv("ORDERLINE_CATALOG_PATH", "data/catalog.json")
    index = load_catalog()
    assert 1 in index.entries
