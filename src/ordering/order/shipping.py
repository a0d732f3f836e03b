"""Shipping — commands and handler.

Choosing a pickup shipping method copies the distributor's address onto the
order. Shipments are taxed with the policy from the domain configuration.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.distribution.distributor import Distributor
from ordering.distribution.shipping_method import ShippingMethod
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.shared.tax import tax_policy_from_config

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class SetShippingMethod:
    order_id = Identifier(required=True)
    shipping_method_id = Identifier()


@ordering.command(part_of="Order")
class CreateShipment:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class ShippingHandler:
    @handle(SetShippingMethod)
    def set_shipping_method(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        shipping_method = None
        if command.shipping_method_id:
            shipping_method = current_domain.repository_for(ShippingMethod).get(command.shipping_method_id)
            if not shipping_method.available_to(order.distributor_id):
                raise ValidationError({"shipping_method_id": ["Shipping method is not offered by this distributor"]})

        order.set_shipping_method(command.shipping_method_id)

        if shipping_method is not None and order.distributor_id:
            try:
                distributor = current_domain.repository_for(Distributor).get(str(order.distributor_id))
            except ObjectNotFoundError:
                distributor = None
            if order.populate_ship_address(distributor, shipping_method):
                logger.info("Ship address copied from distributor", order_id=str(order.id))

        repo.add(order)

    @handle(CreateShipment)
    def create_shipment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if not order.shipping_method_id:
            logger.info("Shipment skipped: no shipping method", order_id=str(order.id))
            return None

        shipping_method = current_domain.repository_for(ShippingMethod).get(str(order.shipping_method_id))
        order.create_shipment(shipping_method, tax_policy_from_config(current_domain))
        repo.add(order)
        return str(order.id)
