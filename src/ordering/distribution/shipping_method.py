"""ShippingMethod aggregate — how a distributor gets orders to customers."""

import json

from protean.fields import Boolean, String, Text, ValueObject

from ordering.domain import ordering
from ordering.shared.calculator import Calculator


@ordering.aggregate
class ShippingMethod:
    name = String(required=True, max_length=255)
    calculator = ValueObject(Calculator)
    require_ship_address = Boolean(default=True)  # False for pickup from the distributor
    distributor_ids = Text()  # JSON array

    def available_to(self, distributor_id):
        if not distributor_id or not self.distributor_ids:
            return False
        return str(distributor_id) in json.loads(self.distributor_ids)

    def compute_cost(self, order):
        if self.calculator is None:
            return 0.0
        return self.calculator.compute(quantity=order.item_count(), item_total=order.item_total())
