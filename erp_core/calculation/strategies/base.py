"""
Strategy Interfaces
===================
Contracts for interchangeable tax, discount and rounding algorithms.

Strategies are stateless values: construct them once, share them freely.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class TaxStrategy(Protocol):
    name: str
    rate: float

    @property
    def is_inclusive(self) -> bool:
        ...

    def calculate(self, base: float) -> float:
        """Tax on ``base`` (added on top, or extracted when inclusive)."""
        ...

    def with_rate(self, rate: float) -> "TaxStrategy":
        """Same kind of tax at a different rate."""
        ...


@runtime_checkable
class DiscountStrategy(Protocol):
    name: str

    def calculate(self, gross_amount: float, discount_value: float) -> float:
        ...


@runtime_checkable
class RoundingStrategy(Protocol):
    name: str

    def round(self, value: float, precision: Optional[int] = None) -> float:
        ...
