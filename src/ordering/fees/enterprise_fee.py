"""EnterpriseFee aggregate — a configurable fee charged within an order cycle.

A fee is charged either once per order or once per matching line item. Its
calculator decides the amount; its tax rate decides how much of that amount
is tax (fees are tax inclusive).
"""

from enum import Enum

from protean.fields import Float, Identifier, String, ValueObject

from ordering.domain import ordering
from ordering.shared.calculator import Calculator
from ordering.shared.tax import included_tax


class FeeType(Enum):
    PACKING = "packing"
    TRANSPORT = "transport"
    ADMIN = "admin"
    SALES = "sales"
    FUNDRAISING = "fundraising"


class FeeApplication(Enum):
    PER_ORDER = "per_order"
    PER_ITEM = "per_item"


@ordering.aggregate
class EnterpriseFee:
    enterprise_id = Identifier()
    name = String(required=True, max_length=255)
    fee_type = String(choices=FeeType, default=FeeType.ADMIN.value)
    application = String(choices=FeeApplication, default=FeeApplication.PER_ORDER.value)
    calculator = ValueObject(Calculator)
    tax_rate = Float(default=0.0, min_value=0.0)

    @property
    def applies_per_item(self):
        return self.application == FeeApplication.PER_ITEM.value

    def amount_for(self, quantity=1, item_total=0.0):
        if self.calculator is None:
            return 0.0
        return self.calculator.compute(quantity=quantity, item_total=item_total)

    def included_tax_on(self, amount):
        return included_tax(amount, self.tax_rate)
