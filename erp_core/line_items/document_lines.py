"""
Document Lines
==============
A form's line items together with their live calculations.

Totals are derived from the store's current rows on every read, so they
can never go stale after a mutation.
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..calculation.models import DocumentTotals, LineItemCalculation, TaxInfo
from ..calculation.service import CalculationService
from .store import ChangeCallback, ItemInput, LineItem, LineItemStore, ValidationResult


class DocumentLines:
    """
    Line item CRUD plus totals for one document form.

    Usage:
        lines = DocumentLines(min_items=1)
        lines.add_item(quantity=2, unit_price=100_000, discount_type="percent", discount_value=10)
        lines.totals.grand_total
    """

    def __init__(
        self,
        initial_items: Optional[Iterable[ItemInput]] = None,
        calculation: Optional[CalculationService] = None,
        store: Optional[LineItemStore] = None,
        on_change: Optional[ChangeCallback] = None,
        **store_options: Any,
    ):
        if store is None:
            store = LineItemStore(initial_items, on_change=on_change, **store_options)
        elif initial_items is not None:
            store.set_items(initial_items)
        self.store = store
        self.calculation = calculation or CalculationService()

    # Line items state

    @property
    def items(self) -> List[LineItem]:
        return self.store.items

    @property
    def count(self) -> int:
        return self.store.count

    @property
    def can_add(self) -> bool:
        return self.store.can_add

    @property
    def can_remove(self) -> bool:
        return self.store.can_remove

    @property
    def has_items(self) -> bool:
        return self.store.has_items

    # Line items actions

    def add_item(self, item: Optional[ItemInput] = None, **fields: Any) -> bool:
        return self.store.add_item(item, **fields)

    def remove_item(self, index: int) -> bool:
        return self.store.remove_item(index)

    def update_item(self, index: int, updates: Optional[Mapping[str, Any]] = None, **fields: Any) -> bool:
        return self.store.update_item(index, updates, **fields)

    def move_item(self, from_index: int, to_index: int) -> bool:
        return self.store.move_item(from_index, to_index)

    def duplicate_item(self, index: int) -> bool:
        return self.store.duplicate_item(index)

    def clear_items(self) -> None:
        self.store.clear_items()

    def set_items(self, items: Iterable[ItemInput]) -> None:
        self.store.set_items(items)

    # Line items queries

    def get_item(self, index: int) -> Optional[LineItem]:
        return self.store.get_item(index)

    def find_by_product_id(self, product_id: int) -> Optional[Tuple[LineItem, int]]:
        return self.store.find_by_product_id(product_id)

    def validate_items(self) -> ValidationResult:
        return self.store.validate()

    # Calculations

    @property
    def totals(self) -> DocumentTotals:
        return self.calculation.calculate_totals(self.store.items)

    @property
    def line_calculations(self) -> List[LineItemCalculation]:
        return self.calculation.calculate_line_items(self.store.items)

    def get_line_calculation(self, index: int) -> Optional[LineItemCalculation]:
        item = self.store.get_item(index)
        if item is None:
            return None
        return self.calculation.calculate_line_item(item)

    @property
    def tax_info(self) -> TaxInfo:
        return self.calculation.get_tax_info()

