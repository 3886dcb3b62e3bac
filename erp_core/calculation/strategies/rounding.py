"""
Rounding Strategies
===================
Standard (half away from zero), ceiling, and cash-denomination rounding.

Rounding works on the float's shortest repr through ``Decimal``:
2.675 rounds to 2.68 at two decimals.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional


def _quantize(value: float, precision: int, mode: str) -> float:
    if not math.isfinite(value):
        return value
    try:
        exponent = Decimal(1).scaleb(-precision)
        return float(Decimal(repr(float(value))).quantize(exponent, rounding=mode))
    except InvalidOperation:
        # beyond the Decimal context precision
        return float(value)


@dataclass(frozen=True)
class StandardRoundingStrategy:
    """Half rounds away from zero at ``precision`` decimals (default 0)."""
    name: str = "Standard"

    def round(self, value: float, precision: Optional[int] = None) -> float:
        return _quantize(value, precision or 0, ROUND_HALF_UP)


@dataclass(frozen=True)
class RoundUpStrategy:
    """Ceiling at ``precision`` decimals, so a document is never under-charged."""
    name: str = "Round Up"

    def round(self, value: float, precision: Optional[int] = None) -> float:
        return _quantize(value, precision or 0, ROUND_CEILING)


@dataclass(frozen=True)
class UnitRoundingStrategy:
    """
    Round to the nearest cash denomination (e.g. 100 or 1000 rupiah).

        UnitRoundingStrategy(100).round(123450)  # 123500
        UnitRoundingStrategy(100).round(123449)  # 123400
    """
    denomination: int = 100
    name: str = ""

    def __post_init__(self):
        if self.denomination <= 0:
            raise ValueError("denomination must be positive")
        if not self.name:
            object.__setattr__(self, "name", f"Nearest {self.denomination:,}")

    def round(self, value: float, precision: Optional[int] = None) -> float:
        """``precision`` is ignored; the denomination sets the step."""
        units = _quantize(value / self.denomination, 0, ROUND_HALF_UP)
        return units * self.denomination
