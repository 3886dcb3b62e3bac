"""
Tax Strategies
==============
Exclusive (tax on top), inclusive (tax extracted) and exempt.
"""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class ExclusiveTaxStrategy:
    """
    Tax added on top of the net amount.

    Defaults to Indonesian PPN at 11%.
    """
    rate: float = 0.11
    name: str = ""
    is_inclusive: ClassVar[bool] = False

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", f"PPN {self.rate:.0%}")

    def calculate(self, base: float) -> float:
        return base * self.rate

    def with_rate(self, rate: float) -> "ExclusiveTaxStrategy":
        return ExclusiveTaxStrategy(rate=rate)


@dataclass(frozen=True)
class InclusiveTaxStrategy:
    """
    Prices already contain tax; ``calculate`` extracts it.

    Example: 111,000 at 11% holds 111,000 - 111,000 / 1.11 = 11,000 tax.
    """
    rate: float = 0.11
    name: str = ""
    is_inclusive: ClassVar[bool] = True

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", f"Inclusive Tax {self.rate:.0%}")

    def calculate(self, base: float) -> float:
        return base - base / (1 + self.rate)

    def with_rate(self, rate: float) -> "InclusiveTaxStrategy":
        return InclusiveTaxStrategy(rate=rate)


@dataclass(frozen=True)
class NoTaxStrategy:
    """Zero-rated or exempt transactions."""
    name: str = "No Tax"
    rate: float = 0.0
    is_inclusive: ClassVar[bool] = False

    def calculate(self, base: float) -> float:
        return 0.0

    def with_rate(self, rate: float) -> "NoTaxStrategy":
        # Exempt stays exempt whatever rate a line carries
        return self
