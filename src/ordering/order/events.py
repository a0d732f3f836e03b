"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A new cart-state order was opened for a customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier()
    distributor_id = Identifier()
    order_cycle_id = Identifier()
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class VariantAdded:
    """A variant was added to the cart, or its quantity increased."""

    __version__ = 1

    order_id = Identifier(required=True)
    line_item_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)
    max_quantity = Integer()


@ordering.event(part_of="Order")
class VariantRemoved:
    """A variant's line item and its adjustments were removed from the cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    line_item_id = Identifier(required=True)
    variant_id = Identifier(required=True)


@ordering.event(part_of="Order")
class OrderEmptied:
    """All line items, adjustments, payments and the shipping method were removed."""

    __version__ = 1

    order_id = Identifier(required=True)
    removed_line_item_count = Integer(default=0)
    removed_payment_count = Integer(default=0)


@ordering.event(part_of="Order")
class DistributorSet:
    """The order's distributor changed."""

    __version__ = 1

    order_id = Identifier(required=True)
    distributor_id = Identifier()  # None when the distributor was cleared
    previous_distributor_id = Identifier()
    order_cycle_cleared = Boolean(default=False)


@ordering.event(part_of="Order")
class OrderCycleSet:
    """The order's order cycle changed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_cycle_id = Identifier()  # None when the order cycle was cleared
    previous_order_cycle_id = Identifier()
    distributor_cleared = Boolean(default=False)


@ordering.event(part_of="Order")
class DistributionChargeUpdated:
    """Enterprise fee adjustments were regenerated for the distribution context."""

    __version__ = 1

    order_id = Identifier(required=True)
    distributor_id = Identifier()
    order_cycle_id = Identifier()
    fee_adjustment_count = Integer(default=0)
    admin_and_handling_total = Float(default=0.0)
    enterprise_fee_tax = Float(default=0.0)
    line_item_count = Integer(default=0)


@ordering.event(part_of="Order")
class ShippingMethodSet:
    __version__ = 1

    order_id = Identifier(required=True)
    shipping_method_id = Identifier()


@ordering.event(part_of="Order")
class ShipmentCreated:
    """A shipment was recorded along with its shipping charge."""

    __version__ = 1

    order_id = Identifier(required=True)
    shipping_method_id = Identifier(required=True)
    cost = Float(required=True)
    shipping_tax = Float(default=0.0)


@ordering.event(part_of="Order")
class PaymentAdded:
    __version__ = 1

    order_id = Identifier(required=True)
    payment_id = Identifier(required=True)
    payment_method_id = Identifier(required=True)
    amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderCompleted:
    __version__ = 1

    order_id = Identifier(required=True)
    completed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_state = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderConfirmationRequested:
    """The customer should be sent an order confirmation.

    Delivery of the email belongs to the notification service.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier()
    email = String()
    requested_at = DateTime(required=True)
