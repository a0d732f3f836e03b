"""Calculator value object — the pricing strategy behind fees and shipping methods."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String

from ordering.domain import ordering


class CalculatorKind(Enum):
    FLAT_RATE = "FlatRate"
    PER_ITEM = "PerItem"
    FLAT_PERCENT_ITEM_TOTAL = "FlatPercentItemTotal"


@ordering.value_object
class Calculator:
    """Computes a monetary amount from a quantity and an item total.

    - FlatRate: ``amount`` regardless of what is being charged.
    - PerItem: ``amount`` for every unit.
    - FlatPercentItemTotal: ``amount`` percent of the item total.
    """

    kind = String(choices=CalculatorKind, default=CalculatorKind.FLAT_RATE.value)
    amount = Float(default=0.0)

    @invariant.post
    def percentage_must_not_be_negative(self):
        if self.kind == CalculatorKind.FLAT_PERCENT_ITEM_TOTAL.value and (self.amount or 0.0) < 0:
            raise ValidationError({"amount": ["Percentage cannot be negative"]})

    def compute(self, quantity=1, item_total=0.0):
        amount = self.amount or 0.0
        kind = CalculatorKind(self.kind)
        if kind == CalculatorKind.PER_ITEM:
            return round(amount * quantity, 2)
        if kind == CalculatorKind.FLAT_PERCENT_ITEM_TOTAL:
            return round(item_total * amount / 100.0, 2)
        return round(amount, 2)
