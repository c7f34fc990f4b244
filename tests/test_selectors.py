import pytest

from orderline.bootstrap import load_catalog
from orderline.coupons import InMemoryCouponStore
from orderline.models import Coupon, EditRequest
from orderline.selectors import CondimentSelector, IngredientStepper, OptionSelector, ProductEditor


@pytest.fixture
def index():
    return load_catalog("data/catalog.json")


@pytest.fixture
def combo(index):
    return index.entries[1]


def test_option_selector_lists_in_catalog_order(combo):
    sel = OptionSelector(combo.sizes, combo.sizes[0], lambda o: o)
    rows = sel.rows()
    assert [r.name for r in rows] == ["Medium", "Large"]
    assert [r.selected for r in rows] == [True, False]
    assert rows[1].extra_price == 100


def test_option_selector_select_calls_back(combo):
    picked = []
    sel = OptionSelector(combo.sides, None, picked.append)
    assert all(not r.selected for r in sel.rows())
    sel.select(20)
    assert [o.name for o in picked] == ["Fries"]
    assert sel.selected.id == 20


def test_option_selector_unknown_id(combo):
    sel = OptionSelector(combo.drinks, None, lambda o: o)
    with pytest.raises(ValueError):
        sel.select(999)


def test_condiment_selector_toggle_and_count(combo):
    toggled = []
    sel = CondimentSelector(combo.condiments, {}, toggled.append)
    assert sel.selected_count == 0
    sel.toggle(1)
    sel.toggle(2)
    sel.toggle(1)
    assert toggled == [1, 2, 1]
    assert sel.selected_count == 1
    assert [r.selected for r in sel.rows()] == [False, True, False, False]


def test_condiment_selector_unknown_id(combo):
    sel = CondimentSelector(combo.condiments, {}, lambda cid: cid)
    with pytest.raises(ValueError):
        sel.toggle(999)


def test_ingredient_stepper_rows(combo):
    stepper = IngredientStepper(combo.ingredients, {100: 1, 101: 1, 102: 3}, lambda i, d: (i, d))
    rows = {r.id: r for r in stepper.rows()}
    assert [r.name for r in stepper.rows()][0] == "Bun"
    assert rows[100].can_decrease is False and rows[100].can_increase is False
    assert rows[101].can_decrease is False and rows[101].can_increase is True
    assert rows[102].can_increase is False
    assert rows[102].extra_charge == 100
    assert rows[103].quantity == 0 and rows[103].can_decrease is False
    assert stepper.increment(103) == (103, 1)
    assert stepper.decrement(103) == (103, -1)


def test_editor_starts_from_catalog_defaults(combo):
    editor = ProductEditor(combo)
    assert editor.state.selected_size.name == "Medium"
    assert editor.is_submittable() is False
    assert editor.missing_count() == 2


def test_editor_selectors_write_back(combo):
    editor = ProductEditor(combo)
    editor.size_selector().select(11)
    editor.side_selector().select(20)
    editor.drink_selector().select(30)
    editor.condiment_selector().toggle(4)
    assert editor.state.selected_size.name == "Large"
    assert editor.state.condiments == {4: True}
    assert editor.is_submittable() is True
    assert editor.missing_count() == 0


def test_editor_required_ingredient_cannot_drop_below_one(combo):
    editor = ProductEditor(combo)
    stepper = editor.ingredient_stepper()
    stepper.decrement(101)
    assert editor.state.quantity_of(101) == 1
    stepper.increment(101)
    assert editor.state.quantity_of(101) == 2
    assert {r.id: r.quantity for r in stepper.rows()}[101] == 2


def test_editor_step_units_is_clamped(combo):
    editor = ProductEditor(combo)
    editor.step_units(-1)
    assert editor.state.unit_count == 1
    for _ in range(10):
        editor.step_units(1)
    assert editor.state.unit_count == 5


def test_editor_rehydrates_from_edit_request(combo):
    edit = EditRequest(
        size_name="Large",
        side_name="Fries",
        drink_name="Cola",
        serialized_customizations='{"condiments":{"2":true},"ingredients":{"100":1,"101":1,"102":3}}',
        unit_count=2,
    )
    editor = ProductEditor(combo, edit)
    assert editor.decode_result.reason == "decoded"
    assert editor.is_submittable() is True
    res = editor.pricing()
    # 500 + 100 + 80 + 0 + 2 * 50, two units
    assert res.subtotal == 1560
    assert res.total == 1560


def test_editor_pricing_with_coupon_store_and_detach(combo):
    edit = EditRequest(
        size_name="Large",
        side_name="Fries",
        drink_name="Cola",
        serialized_customizations='{"ingredients":{"100":1,"101":1,"102":3}}',
        unit_count=2,
    )
    editor = ProductEditor(combo, edit)
    store = InMemoryCouponStore(
        Coupon(id=7, title="15%", discount_type="percentage", discount_value=15, min_purchase=500, max_discount=150)
    )
    res = editor.pricing(store)
    assert (res.subtotal, res.discount, res.total) == (1560, 150, 1410)

    editor.detach_coupon(store)
    assert store.current() is None
    assert editor.pricing(store).discount == 0


def test_editor_pricing_follows_state(combo):
    editor = ProductEditor(combo)
    before = editor.pricing().subtotal
    editor.size_selector().select(11)
    assert editor.pricing().subtotal == before + 100


def test_editor_traces_rehydration_with_env(combo, capsys, monkeypatch):
    monkeypatch.setenv("DEBUG_TRACE", "1")
    editor = ProductEditor(combo, EditRequest(serialized_customizations="{broken"))
    assert editor.debug is True
    err = capsys.readouterr().err
    assert "[trace] codec.malformed" in err
    assert "[trace] selection.rehydrate" in err


def test_editor_quiet_by_default(combo, capsys, monkeypatch):
    monkeypatch.delenv("DEBUG_TRACE", raising=False)
    ProductEditor(combo, EditRequest(serialized_customizations="{broken"))
    assert capsys.readouterr().err == ""


def test_editor_survives_deeply_nested_blob(combo):
    editor = ProductEditor(combo, EditRequest(serialized_customizations="[" * 200000 + "]" * 200000))
    assert editor.decode_result.reason == "malformed"
    assert editor.state.quantity_of(101) == 1
