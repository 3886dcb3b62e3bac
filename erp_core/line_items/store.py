"""
Line Item Store
===============
Ordered line items for a document form, with count bounds and validation.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ConfigDict, ValidationError
import structlog

from ..calculation.models import CalculableLineItem
from ..shared.config import Settings, get_settings

logger = structlog.get_logger(__name__)


class LineItem(CalculableLineItem):
    """One row of a financial document."""
    model_config = ConfigDict(extra="allow", from_attributes=True, validate_assignment=True)

    id: Optional[int] = None
    product_id: Optional[int] = None
    description: str = ""
    quantity: float = 1.0
    unit: str = "pcs"
    notes: str = ""


DEFAULT_LINE_ITEM: Dict[str, Any] = LineItem().model_dump()

ItemInput = Union[LineItem, Mapping[str, Any]]
ChangeCallback = Callable[[List[LineItem]], None]


@dataclass
class ValidationResult:
    """Per-index error messages; ``valid`` when there are none."""
    valid: bool
    errors: Dict[int, List[str]] = field(default_factory=dict)


class LineItemStore:
    """
    CRUD over an ordered list of line items.

    Mutations that would break the configured bounds, or that address an
    index outside the list, are ignored and return ``False``.
    """

    def __init__(
        self,
        initial_items: Optional[Iterable[ItemInput]] = None,
        min_items: int = 0,
        max_items: int = 100,
        require_product: bool = False,
        default_item: Optional[Mapping[str, Any]] = None,
        on_change: Optional[ChangeCallback] = None,
    ):
        if min_items < 0 or max_items < min_items:
            raise ValueError(f"Invalid bounds: min_items={min_items}, max_items={max_items}")

        self.min_items = min_items
        self.max_items = max_items
        self.require_product = require_product
        self.default_item = dict(default_item or {})
        self._on_change = on_change

        items = [self._to_item(item) for item in (initial_items or [])]
        if not items and min_items > 0:
            items = [self._new_item()]
        self._items: List[LineItem] = items

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        **kwargs: Any,
    ) -> "LineItemStore":
        settings = settings or get_settings()
        kwargs.setdefault("min_items", settings.line_items_min)
        kwargs.setdefault("max_items", settings.line_items_max)
        kwargs.setdefault("require_product", settings.line_items_require_product)
        return cls(**kwargs)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[LineItem]:
        return list(self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def can_add(self) -> bool:
        return len(self._items) < self.max_items

    @property
    def can_remove(self) -> bool:
        return len(self._items) > self.min_items

    @property
    def has_items(self) -> bool:
        return bool(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(self, item: Optional[ItemInput] = None, **fields: Any) -> bool:
        """
        Append a row built from the defaults, ``item`` and ``fields``.

        Returns ``False`` when the list is full or the row fails validation.
        """
        if not self.can_add:
            logger.debug("Line item limit reached", max_items=self.max_items)
            return False
        overrides = self._as_dict(item) if item is not None else {}
        overrides.update(fields)
        try:
            new_item = self._new_item(overrides)
        except ValidationError as e:
            logger.warning("Line item rejected", error=str(e))
            return False
        self._items.append(new_item)
        self._changed()
        return True

    def remove_item(self, index: int) -> bool:
        if not self.can_remove or not self._in_range(index):
            return False
        del self._items[index]
        self._changed()
        return True

    def update_item(self, index: int, updates: Optional[Mapping[str, Any]] = None, **fields: Any) -> bool:
        """Merge changes into one row; an invalid result leaves the row unchanged."""
        if not self._in_range(index):
            return False
        merged = self._items[index].model_dump()
        merged.update(updates or {})
        merged.update(fields)
        try:
            self._items[index] = LineItem.model_validate(merged)
        except ValidationError as e:
            logger.warning("Line item update rejected", index=index, error=str(e))
            return False
        self._changed()
        return True

    def move_item(self, from_index: int, to_index: int) -> bool:
        if not (self._in_range(from_index) and self._in_range(to_index)):
            return False
        if from_index == to_index:
            return False
        item = self._items.pop(from_index)
        self._items.insert(to_index, item)
        self._changed()
        return True

    def duplicate_item(self, index: int) -> bool:
        """Insert a copy (without its persisted ``id``) right after ``index``."""
        if not self.can_add or not self._in_range(index):
            return False
        duplicate = self._items[index].model_copy(deep=True)
        duplicate.id = None
        self._items.insert(index + 1, duplicate)
        self._changed()
        return True

    def clear_items(self) -> None:
        """Empty the list; one default row is kept when ``min_items`` > 0."""
        self._items = [self._new_item()] if self.min_items > 0 else []
        self._changed()

    def set_items(self, items: Iterable[ItemInput]) -> None:
        self._items = [self._to_item(item) for item in items]
        self._changed()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_item(self, index: int) -> Optional[LineItem]:
        return self._items[index] if self._in_range(index) else None

    def find_by_product_id(self, product_id: int) -> Optional[Tuple[LineItem, int]]:
        """First row for ``product_id`` as ``(item, index)``."""
        for index, item in enumerate(self._items):
            if item.product_id == product_id:
                return item, index
        return None

    def validate(self) -> ValidationResult:
        errors: Dict[int, List[str]] = {}

        for index, item in enumerate(self._items):
            item_errors = []

            if item.quantity <= 0:
                item_errors.append("Quantity must be greater than 0")

            if item.unit_price < 0:
                item_errors.append("Unit price cannot be negative")

            if item.discount_value is not None and item.discount_value < 0:
                item_errors.append("Discount cannot be negative")

            if self.require_product and not item.product_id:
                item_errors.append("Product is required")

            if item_errors:
                errors[index] = item_errors

        return ValidationResult(valid=not errors, errors=errors)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._items)

    def _new_item(self, overrides: Optional[Mapping[str, Any]] = None) -> LineItem:
        data = dict(DEFAULT_LINE_ITEM)
        data.update(self.default_item)
        data.update(overrides or {})
        return LineItem.model_validate(data)

    @staticmethod
    def _as_dict(item: ItemInput) -> Dict[str, Any]:
        if isinstance(item, LineItem):
            return item.model_dump()
        return dict(item)

    @staticmethod
    def _to_item(item: ItemInput) -> LineItem:
        if isinstance(item, LineItem):
            return item.model_copy(deep=True)
        return LineItem.model_validate(item)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.items)
