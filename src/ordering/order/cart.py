"""Cart contents — commands and handler.

Cart changes alter the per-item fee schedule, so each one is followed by a
distribution charge recalculation before the order is saved.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.distribution import recalculate_distribution_charge
from ordering.order.order import Order


@ordering.command(part_of="Order")
class AddVariant:
    order_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    max_quantity = Integer()
    price = Float(default=0.0)


@ordering.command(part_of="Order")
class SetVariantAttributes:
    order_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    max_quantity = Integer()


@ordering.command(part_of="Order")
class RemoveVariant:
    order_id = Identifier(required=True)
    variant_id = Identifier(required=True)


@ordering.command(part_of="Order")
class EmptyOrder:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class ManageCartHandler:
    @handle(AddVariant)
    def add_variant(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        line_item = order.add_variant(
            variant_id=command.variant_id,
            quantity=command.quantity,
            max_quantity=command.max_quantity,
            price=command.price or 0.0,
        )
        recalculate_distribution_charge(order)
        repo.add(order)
        return str(line_item.id)

    @handle(SetVariantAttributes)
    def set_variant_attributes(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.set_variant_attributes(command.variant_id, {"max_quantity": command.max_quantity})
        repo.add(order)

    @handle(RemoveVariant)
    def remove_variant(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.remove_variant(command.variant_id)
        recalculate_distribution_charge(order)
        repo.add(order)

    @handle(EmptyOrder)
    def empty_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.empty()
        recalculate_distribution_charge(order)
        repo.add(order)
