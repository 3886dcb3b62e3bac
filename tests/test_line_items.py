"""
Unit tests for the line item store
"""
import pytest

from erp_core.line_items import DEFAULT_LINE_ITEM, LineItem, LineItemStore, ValidationResult
from erp_core.shared.config import Settings


@pytest.fixture
def store():
    return LineItemStore(
        [
            {"id": 1, "product_id": 10, "quantity": 1, "unit_price": 1_000},
            {"id": 2, "product_id": 20, "quantity": 2, "unit_price": 2_000},
            {"id": 3, "product_id": 30, "quantity": 3, "unit_price": 3_000},
        ]
    )


class TestStoreState:
    """Tests for construction and state properties."""

    def test_empty_store(self):
        store = LineItemStore()

        assert store.count == 0
        assert store.has_items is False
        assert store.can_add is True
        assert store.can_remove is False
        assert store.items == []

    def test_min_items_seeds_default_row(self):
        store = LineItemStore(min_items=1)

        assert store.count == 1
        assert store.items[0] == LineItem(**DEFAULT_LINE_ITEM)
        assert store.items[0].quantity == 1
        assert store.items[0].unit == "pcs"
        assert store.can_remove is False

    def test_default_item_overrides(self):
        store = LineItemStore(min_items=1, default_item={"unit": "box", "tax_rate": 0.05})

        assert store.items[0].unit == "box"
        assert store.items[0].tax_rate == 0.05

    def test_initial_items_are_copied(self):
        item = LineItem(id=1, quantity=2)
        store = LineItemStore([item])

        item.quantity = 99

        assert store.get_item(0).quantity == 2

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            LineItemStore(min_items=3, max_items=2)
        with pytest.raises(ValueError):
            LineItemStore(min_items=-1)

    def test_items_returns_copy(self, store):
        store.items.clear()
        assert store.count == 3

    def test_len_and_iter(self, store):
        assert len(store) == 3
        assert [item.id for item in store] == [1, 2, 3]

    def test_from_settings(self):
        settings = Settings(line_items_min=1, line_items_max=5, line_items_require_product=True)

        store = LineItemStore.from_settings(settings)

        assert store.min_items == 1
        assert store.max_items == 5
        assert store.require_product is True
        assert store.count == 1

    def test_from_settings_keyword_overrides(self):
        store = LineItemStore.from_settings(Settings(line_items_max=5), max_items=2)
        assert store.max_items == 2


class TestStoreMutations:
    """Tests for add, remove, update, move and duplicate."""

    def test_add_item(self, store):
        assert store.add_item(product_id=40, unit_price=500) is True

        added = store.get_item(3)
        assert added.product_id == 40
        assert added.unit_price == 500
        assert added.quantity == 1

    def test_add_item_from_model(self):
        store = LineItemStore()
        store.add_item(LineItem(product_id=7, quantity=4), unit="kg")

        assert store.get_item(0).quantity == 4
        assert store.get_item(0).unit == "kg"

    def test_add_respects_max(self):
        store = LineItemStore(max_items=2)

        assert store.add_item() is True
        assert store.add_item() is True
        assert store.can_add is False
        assert store.add_item() is False
        assert store.count == 2

    def test_remove_item(self, store):
        assert store.remove_item(1) is True
        assert [item.id for item in store.items] == [1, 3]

    def test_remove_respects_min(self):
        store = LineItemStore(min_items=1)

        assert store.remove_item(0) is False
        assert store.count == 1

    def test_remove_out_of_range(self, store):
        assert store.remove_item(5) is False
        assert store.remove_item(-1) is False
        assert store.count == 3

    def test_update_item(self, store):
        assert store.update_item(0, {"quantity": 5}, notes="rush") is True

        item = store.get_item(0)
        assert item.quantity == 5
        assert item.notes == "rush"
        assert item.product_id == 10

    def test_update_out_of_range(self, store):
        assert store.update_item(3, quantity=5) is False

    def test_add_invalid_item_is_refused(self):
        """Test non-numeric input is refused like any other rejected mutation."""
        calls = []
        store = LineItemStore(on_change=calls.append)

        assert store.add_item(quantity="several") is False
        assert store.count == 0
        assert calls == []

    def test_update_invalid_value_keeps_row(self, store):
        assert store.update_item(0, unit_price="free") is False

        item = store.get_item(0)
        assert item.unit_price == 1_000
        assert item.quantity == 1

    def test_move_item(self, store):
        assert store.move_item(0, 2) is True
        assert [item.id for item in store.items] == [2, 3, 1]

    def test_move_item_noop(self, store):
        assert store.move_item(1, 1) is False
        assert store.move_item(0, 9) is False
        assert [item.id for item in store.items] == [1, 2, 3]

    def test_duplicate_item(self, store):
        """Test the copy drops its persisted id and lands right after the source."""
        assert store.duplicate_item(0) is True

        items = store.items
        assert [item.id for item in items] == [1, None, 2, 3]
        assert items[1].product_id == 10
        assert items[1] is not items[0]

    def test_duplicate_respects_max(self):
        store = LineItemStore([{"id": 1}], max_items=1)
        assert store.duplicate_item(0) is False

    def test_clear_items(self, store):
        store.clear_items()
        assert store.count == 0

    def test_clear_items_keeps_one_row_with_min(self):
        store = LineItemStore([{"id": 1}, {"id": 2}], min_items=1)

        store.clear_items()

        assert store.count == 1
        assert store.get_item(0).id is None

    def test_set_items(self, store):
        store.set_items([{"id": 9, "quantity": 2}])

        assert store.count == 1
        assert store.get_item(0).id == 9

    def test_on_change_called_after_mutations(self):
        calls = []
        store = LineItemStore(on_change=calls.append)

        store.add_item(product_id=1)
        store.update_item(0, quantity=3)
        store.remove_item(4)

        assert len(calls) == 2
        assert calls[-1][0].quantity == 3


class TestStoreQueries:
    """Tests for lookups and validation."""

    def test_get_item(self, store):
        assert store.get_item(1).id == 2
        assert store.get_item(3) is None
        assert store.get_item(-1) is None

    def test_find_by_product_id(self, store):
        item, index = store.find_by_product_id(20)

        assert item.id == 2
        assert index == 1
        assert store.find_by_product_id(99) is None

    def test_validate_valid(self, store):
        assert store.validate() == ValidationResult(valid=True, errors={})

    def test_validate_reports_each_row(self):
        store = LineItemStore(
            [
                {"quantity": 0, "unit_price": -5},
                {"quantity": 1, "unit_price": 100},
                {"quantity": 1, "unit_price": 10, "discount_type": "amount", "discount_value": -1},
            ]
        )

        result = store.validate()

        assert result.valid is False
        assert result.errors == {
            0: ["Quantity must be greater than 0", "Unit price cannot be negative"],
            2: ["Discount cannot be negative"],
        }

    def test_validate_requires_product(self):
        store = LineItemStore([{"product_id": 3}, {"product_id": None}], require_product=True)

        result = store.validate()

        assert result.errors == {1: ["Product is required"]}
