"""
Tests for line items combined with live totals
"""
import pytest

from erp_core.calculation import CalculationService, NoTaxStrategy, UnitRoundingStrategy
from erp_core.line_items import DocumentLines, LineItemStore


class TestDocumentLines:
    """Tests for the calculated line item view."""

    def test_totals_follow_mutations(self):
        lines = DocumentLines()

        lines.add_item(quantity=2, unit_price=100_000, discount_type="percent", discount_value=10)
        assert lines.totals.grand_total == 199_800

        lines.update_item(0, discount_value=0)
        assert lines.totals.grand_total == 222_000

        lines.remove_item(0)
        assert lines.totals.grand_total == 0

    def test_store_options_pass_through(self):
        lines = DocumentLines(min_items=1, max_items=2)

        assert lines.count == 1
        assert lines.can_remove is False
        assert lines.add_item() is True
        assert lines.can_add is False

    def test_line_calculations(self):
        lines = DocumentLines([{"quantity": 1, "unit_price": 1_000}, {"quantity": 2, "unit_price": 500}])

        calcs = lines.line_calculations

        assert len(calcs) == 2
        assert calcs[1].gross == 1_000
        assert lines.get_line_calculation(0).tax == pytest.approx(110)
        assert lines.get_line_calculation(5) is None

    def test_custom_calculation_service(self):
        service = CalculationService(tax_strategy=NoTaxStrategy(), rounding_strategy=UnitRoundingStrategy(100))
        lines = DocumentLines([{"quantity": 1, "unit_price": 12_345}], calculation=service)

        assert lines.totals.grand_total == 12_300
        assert lines.tax_info.name == "No Tax"

    def test_wraps_existing_store(self):
        store = LineItemStore(max_items=3)
        lines = DocumentLines([{"product_id": 1, "quantity": 1, "unit_price": 10}], store=store)

        assert store.count == 1
        assert lines.find_by_product_id(1)[1] == 0
        assert lines.get_item(0).unit_price == 10

    def test_queries_and_reordering(self):
        lines = DocumentLines([{"id": 1}, {"id": 2}])

        assert lines.move_item(0, 1) is True
        assert lines.duplicate_item(0) is True
        assert [item.id for item in lines.items] == [2, None, 1]
        assert lines.has_items is True

        lines.set_items([{"id": 5}])
        assert lines.count == 1

        lines.clear_items()
        assert lines.has_items is False

    def test_validate_items(self):
        lines = DocumentLines([{"quantity": 0}])

        result = lines.validate_items()

        assert result.valid is False
        assert result.errors[0] == ["Quantity must be greater than 0"]

    def test_on_change(self):
        seen = []
        lines = DocumentLines(on_change=seen.append)

        lines.add_item(unit_price=10)

        assert len(seen) == 1
        assert seen[0][0].unit_price == 10
