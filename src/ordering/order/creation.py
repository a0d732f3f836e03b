"""Order creation — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CreateOrder:
    customer_id = Identifier()  # Nullable for guest checkouts
    email = String(max_length=254)
    distributor_id = Identifier()
    order_cycle_id = Identifier()


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        order = Order.create(
            customer_id=command.customer_id,
            email=command.email,
            distributor_id=command.distributor_id,
            order_cycle_id=command.order_cycle_id,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Order created", order_id=str(order.id), distributor_id=command.distributor_id)
        return str(order.id)
