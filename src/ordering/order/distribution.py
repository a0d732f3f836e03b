"""Distribution context changes — commands and handler.

Every change of distributor or order cycle is followed by a recalculation of
the order's enterprise fee adjustments before the order is saved. The whole
sequence runs in the command's unit of work: if the save is rejected, neither
the new context nor the new adjustments are persisted.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.channel import get_catalog
from ordering.domain import ordering
from ordering.fee_rules import get_fee_rules
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


def recalculate_distribution_charge(order):
    """Regenerate the order's enterprise fee adjustments with the active sources."""
    order.update_distribution_charge(get_catalog(), get_fee_rules())
    logger.info(
        "Distribution charge updated",
        order_id=str(order.id),
        order_cycle_id=str(order.order_cycle_id) if order.order_cycle_id else None,
        admin_and_handling_total=order.admin_and_handling_total(),
    )


@ordering.command(part_of="Order")
class SetDistributor:
    order_id = Identifier(required=True)
    distributor_id = Identifier()  # Unset to clear the distributor


@ordering.command(part_of="Order")
class SetOrderCycle:
    order_id = Identifier(required=True)
    order_cycle_id = Identifier()  # Unset to clear the order cycle


@ordering.command(part_of="Order")
class UpdateDistributionCharge:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class DistributionHandler:
    @handle(SetDistributor)
    def set_distributor(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.set_distributor(command.distributor_id, get_catalog())
        recalculate_distribution_charge(order)
        repo.add(order)

    @handle(SetOrderCycle)
    def set_order_cycle(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if not order.set_order_cycle(command.order_cycle_id, get_catalog()):
            logger.info("Order cycle unchanged", order_id=str(order.id))
            return
        recalculate_distribution_charge(order)
        repo.add(order)

    @handle(UpdateDistributionCharge)
    def update_distribution_charge(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        recalculate_distribution_charge(order)
        repo.add(order)
