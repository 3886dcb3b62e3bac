"""
Calculation Engine
==================
Tax, discount and rounding strategies and the service that combines them.
"""

from .models import CalculableLineItem, DiscountType, DocumentTotals, LineItemCalculation, TaxInfo
from .service import CalculationService
from .strategies import (
    AmountDiscountStrategy,
    DiscountStrategy,
    DiscountTier,
    ExclusiveTaxStrategy,
    InclusiveTaxStrategy,
    NoTaxStrategy,
    PercentDiscountStrategy,
    RoundingStrategy,
    RoundUpStrategy,
    StandardRoundingStrategy,
    TaxStrategy,
    TieredDiscountStrategy,
    UnitRoundingStrategy,
)

__all__ = [
    "CalculationService",
    "CalculableLineItem",
    "DiscountType",
    "DocumentTotals",
    "LineItemCalculation",
    "TaxInfo",
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
