"""
Calculation Models
==================
Inputs and outputs of the calculation engine.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class DiscountType(str, Enum):
    """How a line's ``discount_value`` is interpreted."""
    PERCENT = "percent"
    AMOUNT = "amount"
    TIERED = "tiered"  # volume discount; the line quantity selects the tier


class CalculableLineItem(BaseModel):
    """The fields of a line item the engine reads. Other fields are kept as-is."""
    model_config = ConfigDict(extra="allow", from_attributes=True)

    quantity: float = 0.0
    unit_price: float = 0.0
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = None
    tax_rate: Optional[float] = None

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def _missing_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None or value == "" else value

    @field_validator("discount_type", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        return None if value == "" else value


@dataclass(frozen=True)
class LineItemCalculation:
    """Per-line result: quantity x price, less discount, plus tax."""
    gross: float
    discount: float
    net: float
    tax: float
    total: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class DocumentTotals:
    """Document aggregates, each rounded once."""
    subtotal: float
    total_discount: float
    taxable_amount: float
    tax: float
    grand_total: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class TaxInfo:
    name: str
    rate: float
    is_inclusive: bool
