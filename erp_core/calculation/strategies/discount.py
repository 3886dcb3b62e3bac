"""
Discount Strategies
===================
Percentage, fixed amount and quantity tiers.

Out-of-range inputs are clamped, never rejected: a discount is never
negative and never larger than the line's gross amount.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


@dataclass(frozen=True)
class PercentDiscountStrategy:
    """``discount_value`` percent of gross, capped to 0..100%."""
    name: str = "Percentage"

    def calculate(self, gross_amount: float, discount_value: float) -> float:
        percentage = _clamp(discount_value or 0, 0, 100)
        return gross_amount * (percentage / 100)


@dataclass(frozen=True)
class AmountDiscountStrategy:
    """A fixed amount, capped to the gross amount."""
    name: str = "Fixed Amount"

    def calculate(self, gross_amount: float, discount_value: float) -> float:
        return _clamp(discount_value or 0, 0, max(gross_amount, 0))


@dataclass(frozen=True)
class DiscountTier:
    min_quantity: float
    discount_percent: float


class TieredDiscountStrategy:
    """
    Volume discount picked by quantity.

    Tiers are kept sorted by ``min_quantity`` descending so the first tier
    whose threshold the quantity meets is the highest qualifying one:

        tiers = [DiscountTier(100, 15), DiscountTier(50, 10), DiscountTier(10, 5)]
        # 75 units -> 10%
    """

    name = "Tiered"

    def __init__(self, tiers: Iterable[DiscountTier]):
        self._tiers: Tuple[DiscountTier, ...] = tuple(
            sorted(tiers, key=lambda tier: tier.min_quantity, reverse=True)
        )

    def calculate(self, gross_amount: float, discount_value: float) -> float:
        """``discount_value`` carries the line quantity for tiered discounts."""
        tier = self.get_tier_for_quantity(discount_value or 0)
        if tier is None:
            return 0.0
        return gross_amount * (_clamp(tier.discount_percent, 0, 100) / 100)

    def get_tier_for_quantity(self, quantity: float) -> Optional[DiscountTier]:
        return next((tier for tier in self._tiers if quantity >= tier.min_quantity), None)

    def get_tiers(self) -> Tuple[DiscountTier, ...]:
        return self._tiers

    def __repr__(self) -> str:
        return f"TieredDiscountStrategy(tiers={list(self._tiers)!r})"
