"""Domain events for distribution channel reference data."""

from protean.fields import Boolean, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Distributor")
class DistributorRegistered:
    """A new distributor can now fulfil orders."""

    __version__ = 1

    distributor_id = Identifier(required=True)
    name = String(required=True)
    variant_ids = Text()  # JSON array of directly distributed variants


@ordering.event(part_of="OrderCycle")
class OrderCycleCreated:
    """A trading window was scheduled by its coordinator."""

    __version__ = 1

    order_cycle_id = Identifier(required=True)
    name = String(required=True)
    coordinator_id = Identifier(required=True)


@ordering.event(part_of="OrderCycle")
class ExchangeAdded:
    """An incoming or outgoing exchange was added to an order cycle."""

    __version__ = 1

    order_cycle_id = Identifier(required=True)
    exchange_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    incoming = Boolean(default=False)
    variant_ids = Text()  # JSON array
