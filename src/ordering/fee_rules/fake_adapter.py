"""Static fee rule source for development and testing.

Fees are declared on the adapter as plain rates; every call is recorded so
tests can assert which lookups a recalculation performed.
"""

from ordering.fee_rules.port import DistributionContext, FeeCharge, FeeRuleSource


class StaticFeeRuleSource(FeeRuleSource):
    """Configurable fee rule source.

    ``per_item`` entries are charged ``rate`` per unit of every line item;
    ``per_order`` entries are charged ``rate`` once per order.
    """

    def __init__(self) -> None:
        self.per_item: list[dict] = []
        self.per_order: list[dict] = []
        self.calls: list[dict] = []

    def add_per_item_fee(self, enterprise_fee_id, rate, tax=0.0, label="Per item fee") -> None:
        self.per_item.append({"id": str(enterprise_fee_id), "rate": rate, "tax": tax, "label": label})

    def add_per_order_fee(self, enterprise_fee_id, amount, tax=0.0, label="Per order fee") -> None:
        self.per_order.append({"id": str(enterprise_fee_id), "rate": amount, "tax": tax, "label": label})

    def line_item_charges(self, context: DistributionContext, line_item) -> list[FeeCharge]:
        self.calls.append({"method": "line_item_charges", "context": context, "line_item_id": str(line_item.id)})
        return [
            FeeCharge(
                enterprise_fee_id=fee["id"],
                label=fee["label"],
                amount=round(fee["rate"] * line_item.quantity, 2),
                included_tax=round(fee["tax"] * line_item.quantity, 2),
                line_item_id=str(line_item.id),
            )
            for fee in self.per_item
        ]

    def order_charges(self, context: DistributionContext, order) -> list[FeeCharge]:
        self.calls.append({"method": "order_charges", "context": context, "order_id": str(order.id)})
        return [
            FeeCharge(
                enterprise_fee_id=fee["id"],
                label=fee["label"],
                amount=fee["rate"],
                included_tax=fee["tax"],
            )
            for fee in self.per_order
        ]
