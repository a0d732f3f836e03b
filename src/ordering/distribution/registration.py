"""Distribution reference data — commands and handlers.

Registers distributors, schedules order cycles and their exchanges, and
records the shipping and payment methods distributors offer.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.distribution.distributor import Distributor
from ordering.distribution.order_cycle import OrderCycle
from ordering.distribution.payment_method import PaymentMethod
from ordering.distribution.shipping_method import ShippingMethod
from ordering.domain import ordering
from ordering.shared.address import Address
from ordering.shared.calculator import Calculator, CalculatorKind

logger = structlog.get_logger(__name__)


def _loads(value):
    if not value:
        return []
    return json.loads(value) if isinstance(value, str) else value


@ordering.command(part_of="Distributor")
class RegisterDistributor:
    name = String(required=True, max_length=255)
    address = Text()  # JSON: address dict
    variant_ids = Text()  # JSON: variants distributed outside order cycles


@ordering.command(part_of="OrderCycle")
class CreateOrderCycle:
    name = String(required=True, max_length=255)
    coordinator_id = Identifier(required=True)
    coordinator_fee_ids = Text()  # JSON array
    orders_open_at = DateTime()
    orders_close_at = DateTime()


@ordering.command(part_of="OrderCycle")
class AddExchange:
    order_cycle_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    incoming = Boolean(default=False)
    variant_ids = Text()  # JSON array
    enterprise_fee_ids = Text()  # JSON array


@ordering.command(part_of="ShippingMethod")
class CreateShippingMethod:
    name = String(required=True, max_length=255)
    calculator_kind = String(max_length=50, default=CalculatorKind.FLAT_RATE.value)
    amount = Float(default=0.0)
    require_ship_address = Boolean(default=True)
    distributor_ids = Text()  # JSON array


@ordering.command(part_of="PaymentMethod")
class CreatePaymentMethod:
    name = String(required=True, max_length=255)
    active = Boolean(default=True)
    distributor_ids = Text()  # JSON array


@ordering.command_handler(part_of=Distributor)
class RegisterDistributorHandler:
    @handle(RegisterDistributor)
    def register_distributor(self, command):
        address = json.loads(command.address) if isinstance(command.address, str) else command.address
        distributor = Distributor.register(
            name=command.name,
            address=Address(**address) if address else None,
            variant_ids=_loads(command.variant_ids),
        )
        current_domain.repository_for(Distributor).add(distributor)
        logger.info("Distributor registered", distributor_id=str(distributor.id), name=command.name)
        return str(distributor.id)


@ordering.command_handler(part_of=OrderCycle)
class ManageOrderCycleHandler:
    @handle(CreateOrderCycle)
    def create_order_cycle(self, command):
        order_cycle = OrderCycle.create(
            name=command.name,
            coordinator_id=command.coordinator_id,
            orders_open_at=command.orders_open_at,
            orders_close_at=command.orders_close_at,
            coordinator_fee_ids=_loads(command.coordinator_fee_ids),
        )
        current_domain.repository_for(OrderCycle).add(order_cycle)
        return str(order_cycle.id)

    @handle(AddExchange)
    def add_exchange(self, command):
        repo = current_domain.repository_for(OrderCycle)
        order_cycle = repo.get(command.order_cycle_id)
        exchange = order_cycle.add_exchange(
            sender_id=command.sender_id,
            receiver_id=command.receiver_id,
            incoming=bool(command.incoming),
            variant_ids=_loads(command.variant_ids),
            enterprise_fee_ids=_loads(command.enterprise_fee_ids),
        )
        repo.add(order_cycle)
        return str(exchange.id)


@ordering.command_handler(part_of=ShippingMethod)
class CreateShippingMethodHandler:
    @handle(CreateShippingMethod)
    def create_shipping_method(self, command):
        shipping_method = ShippingMethod(
            name=command.name,
            calculator=Calculator(kind=command.calculator_kind, amount=command.amount or 0.0),
            require_ship_address=command.require_ship_address,
            distributor_ids=json.dumps(_loads(command.distributor_ids)),
        )
        current_domain.repository_for(ShippingMethod).add(shipping_method)
        return str(shipping_method.id)


@ordering.command_handler(part_of=PaymentMethod)
class CreatePaymentMethodHandler:
    @handle(CreatePaymentMethod)
    def create_payment_method(self, command):
        payment_method = PaymentMethod(
            name=command.name,
            active=command.active,
            distributor_ids=json.dumps(_loads(command.distributor_ids)),
        )
        current_domain.repository_for(PaymentMethod).add(payment_method)
        return str(payment_method.id)
