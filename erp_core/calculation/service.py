"""
Calculation Service
===================
Line item and document totals built from pluggable strategies.

Per line (unrounded):
    gross    = quantity * unit_price
    discount = discount strategy for the line's ``discount_type`` (else 0)
    net      = gross - discount
    tax      = tax strategy on net (added on top, or extracted if inclusive)
    total    = net + tax, or net when tax is inclusive

Document totals sum the unrounded lines and apply the rounding strategy
once per aggregate.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError
import structlog

from ..shared.config import Settings, get_settings
from .models import CalculableLineItem, DiscountType, DocumentTotals, LineItemCalculation, TaxInfo
from .strategies import (
    AmountDiscountStrategy,
    DiscountStrategy,
    ExclusiveTaxStrategy,
    InclusiveTaxStrategy,
    NoTaxStrategy,
    PercentDiscountStrategy,
    RoundingStrategy,
    RoundUpStrategy,
    StandardRoundingStrategy,
    TaxStrategy,
    UnitRoundingStrategy,
)

logger = structlog.get_logger(__name__)

LineItemLike = Union[CalculableLineItem, Mapping[str, Any], Any]


class CalculationService:
    """
    Pure projection from line items to totals.

    Holds only its strategies; the same items always give the same result.
    """

    def __init__(
        self,
        tax_strategy: Optional[TaxStrategy] = None,
        rounding_strategy: Optional[RoundingStrategy] = None,
        discount_strategies: Optional[Mapping[Union[DiscountType, str], DiscountStrategy]] = None,
        precision: int = 0,
    ):
        self.tax_strategy = tax_strategy or ExclusiveTaxStrategy()
        self.rounding_strategy = rounding_strategy or StandardRoundingStrategy()
        self.precision = precision

        self.discount_strategies: Dict[DiscountType, DiscountStrategy] = {
            DiscountType.PERCENT: PercentDiscountStrategy(),
            DiscountType.AMOUNT: AmountDiscountStrategy(),
        }
        for discount_type, strategy in (discount_strategies or {}).items():
            self.discount_strategies[DiscountType(discount_type)] = strategy

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CalculationService":
        """Build the service described by configuration."""
        settings = settings or get_settings()

        if settings.tax_exempt:
            tax_strategy = NoTaxStrategy()
        elif settings.tax_inclusive:
            tax_strategy = InclusiveTaxStrategy(rate=settings.tax_rate)
        else:
            tax_strategy = ExclusiveTaxStrategy(rate=settings.tax_rate)

        if settings.rounding_mode == "up":
            rounding_strategy = RoundUpStrategy()
        elif settings.rounding_mode == "unit":
            rounding_strategy = UnitRoundingStrategy(settings.rounding_unit)
        else:
            rounding_strategy = StandardRoundingStrategy()

        return cls(
            tax_strategy=tax_strategy,
            rounding_strategy=rounding_strategy,
            precision=settings.rounding_precision,
        )

    def calculate_line_item(self, item: LineItemLike) -> LineItemCalculation:
        """Calculate a single line; never rounds."""
        line = self._coerce(item)

        gross = line.quantity * line.unit_price
        discount = self._discount(line, gross)
        net = gross - discount

        tax_strategy = self.tax_strategy
        if line.tax_rate is not None:
            tax_strategy = tax_strategy.with_rate(line.tax_rate)
        tax = tax_strategy.calculate(net)
        total = net if tax_strategy.is_inclusive else net + tax

        return LineItemCalculation(gross=gross, discount=discount, net=net, tax=tax, total=total)

    def calculate_line_items(self, items: Iterable[LineItemLike]) -> List[LineItemCalculation]:
        return [self.calculate_line_item(item) for item in items]

    def calculate_totals(self, items: Iterable[LineItemLike]) -> DocumentTotals:
        """Sum every line, then round each aggregate once."""
        calculations = self.calculate_line_items(items)

        subtotal = sum(calc.net for calc in calculations)
        total_discount = sum(calc.discount for calc in calculations)
        tax = sum(calc.tax for calc in calculations)
        grand_total = sum(calc.total for calc in calculations)

        return DocumentTotals(
            subtotal=self.round(subtotal),
            total_discount=self.round(total_discount),
            taxable_amount=self.round(subtotal),
            tax=self.round(tax),
            grand_total=self.round(grand_total),
        )

    def round(self, value: float) -> float:
        return self.rounding_strategy.round(value, self.precision)

    def get_tax_info(self) -> TaxInfo:
        return TaxInfo(
            name=self.tax_strategy.name,
            rate=self.tax_strategy.rate,
            is_inclusive=self.tax_strategy.is_inclusive,
        )

    def get_rounding_info(self) -> Dict[str, Any]:
        return {"name": self.rounding_strategy.name, "precision": self.precision}

    def with_tax_strategy(self, strategy: TaxStrategy) -> "CalculationService":
        """A new service that differs only in its tax strategy."""
        return CalculationService(
            tax_strategy=strategy,
            rounding_strategy=self.rounding_strategy,
            discount_strategies=self.discount_strategies,
            precision=self.precision,
        )

    def with_rounding_strategy(self, strategy: RoundingStrategy) -> "CalculationService":
        """A new service that differs only in its rounding strategy."""
        return CalculationService(
            tax_strategy=self.tax_strategy,
            rounding_strategy=strategy,
            discount_strategies=self.discount_strategies,
            precision=self.precision,
        )

    def _discount(self, line: CalculableLineItem, gross: float) -> float:
        if line.discount_type is None:
            return 0.0

        strategy = self.discount_strategies.get(line.discount_type)
        if strategy is None:
            logger.warning("No discount strategy configured", discount_type=line.discount_type.value)
            return 0.0

        if line.discount_type == DiscountType.TIERED:
            return strategy.calculate(gross, line.quantity)
        return strategy.calculate(gross, line.discount_value or 0)

    @staticmethod
    def _coerce(item: LineItemLike) -> CalculableLineItem:
        if isinstance(item, CalculableLineItem):
            return item
        try:
            return CalculableLineItem.model_validate(item)
        except ValidationError as e:
            invalid = {error["loc"][0] for error in e.errors() if error["loc"]}

        # Keep the readable fields; invalid ones fall back to their defaults
        logger.warning("Invalid line item fields ignored", fields=sorted(str(name) for name in invalid))
        data = {key: value for key, value in _fields_of(item).items() if key not in invalid}
        try:
            return CalculableLineItem.model_validate(data)
        except ValidationError as e:
            logger.warning("Unreadable line item treated as empty", error=str(e))
            return CalculableLineItem()


def _fields_of(item: LineItemLike) -> Dict[str, Any]:
    if isinstance(item, Mapping):
        return dict(item)
    return {
        name: getattr(item, name)
        for name in CalculableLineItem.model_fields
        if hasattr(item, name)
    }
