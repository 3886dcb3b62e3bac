"""Calculation strategies package."""

from .base import DiscountStrategy, RoundingStrategy, TaxStrategy
from .discount import (
    AmountDiscountStrategy,
    DiscountTier,
    PercentDiscountStrategy,
    TieredDiscountStrategy,
)
from .rounding import RoundUpStrategy, StandardRoundingStrategy, UnitRoundingStrategy
from .tax import ExclusiveTaxStrategy, InclusiveTaxStrategy, NoTaxStrategy

__all__ = [
    "TaxStrategy",
    "DiscountStrategy",
    "RoundingStrategy",
    "ExclusiveTaxStrategy",
    "InclusiveTaxStrategy",
    "NoTaxStrategy",
    "PercentDiscountStrategy",
    "AmountDiscountStrategy",
    "TieredDiscountStrategy",
    "DiscountTier",
    "StandardRoundingStrategy",
    "RoundUpStrategy",
    "UnitRoundingStrategy",
]
