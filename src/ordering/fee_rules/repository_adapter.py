"""Fee rule source backed by the OrderCycle and EnterpriseFee repositories.

Per-item fees for a line item come from:
- incoming exchanges that carry the variant (charged by the supplier),
- the outgoing exchange to the distributor when it carries the variant,
- the order cycle's coordinator.

Per-order fees come from the coordinator and the outgoing exchange to the
distributor.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.distribution.order_cycle import OrderCycle
from ordering.fee_rules.port import DistributionContext, FeeCharge, FeeRuleSource
from ordering.fees.enterprise_fee import EnterpriseFee

logger = structlog.get_logger(__name__)

# Adjustment labels are capped at this length
LABEL_LENGTH = 255


class RepositoryFeeRuleSource(FeeRuleSource):
    def _order_cycle(self, order_cycle_id):
        if not order_cycle_id:
            return None
        try:
            return current_domain.repository_for(OrderCycle).get(str(order_cycle_id))
        except ObjectNotFoundError:
            logger.warning("Order cycle not found for fee lookup", order_cycle_id=str(order_cycle_id))
            return None

    def _fees(self, sources):
        """Resolve (fee_id, role) pairs into (EnterpriseFee, role) pairs, skipping unknown fees."""
        repo = current_domain.repository_for(EnterpriseFee)
        resolved = []
        for fee_id, role in sources:
            try:
                resolved.append((repo.get(str(fee_id)), role))
            except ObjectNotFoundError:
                logger.warning("Enterprise fee not found", enterprise_fee_id=str(fee_id), role=role)
        return resolved

    def line_item_charges(self, context: DistributionContext, line_item) -> list[FeeCharge]:
        order_cycle = self._order_cycle(context.order_cycle_id)
        if order_cycle is None:
            return []

        variant_id = str(line_item.variant_id)
        sources = []
        for exchange in order_cycle.incoming_exchanges():
            if variant_id in exchange.variants():
                sources.extend((fee_id, "supplier") for fee_id in exchange.fee_ids())

        outgoing = order_cycle.exchange_to(context.distributor_id) if context.distributor_id else None
        if outgoing is not None and variant_id in outgoing.variants():
            sources.extend((fee_id, "distributor") for fee_id in outgoing.fee_ids())

        sources.extend((fee_id, "coordinator") for fee_id in order_cycle.coordinator_fees())

        charges = []
        for fee, role in self._fees(sources):
            if not fee.applies_per_item:
                continue
            amount = fee.amount_for(quantity=line_item.quantity, item_total=line_item.total())
            charges.append(
                FeeCharge(
                    enterprise_fee_id=str(fee.id),
                    label=f"{variant_id} - {fee.fee_type} fee by {role} {fee.name}"[:LABEL_LENGTH],
                    amount=amount,
                    included_tax=fee.included_tax_on(amount),
                    line_item_id=str(line_item.id),
                )
            )
        return charges

    def order_charges(self, context: DistributionContext, order) -> list[FeeCharge]:
        order_cycle = self._order_cycle(context.order_cycle_id)
        if order_cycle is None:
            return []

        sources = [(fee_id, "coordinator") for fee_id in order_cycle.coordinator_fees()]
        outgoing = order_cycle.exchange_to(context.distributor_id) if context.distributor_id else None
        if outgoing is not None:
            sources.extend((fee_id, "distributor") for fee_id in outgoing.fee_ids())

        charges = []
        for fee, role in self._fees(sources):
            if fee.applies_per_item:
                continue
            amount = fee.amount_for(quantity=order.item_count(), item_total=order.item_total())
            charges.append(
                FeeCharge(
                    enterprise_fee_id=str(fee.id),
                    label=f"Whole order - {fee.fee_type} fee by {role} {fee.name}"[:LABEL_LENGTH],
                    amount=amount,
                    included_tax=fee.included_tax_on(amount),
                )
            )
        return charges
