"""OrderCycle aggregate — a time-boxed trading window.

The coordinator receives variants from suppliers through incoming exchanges
and hands them on to distributors through outgoing exchanges. Enterprise fees
are attached to the coordinator and to individual exchanges.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, String, Text

from ordering.distribution.events import ExchangeAdded, OrderCycleCreated
from ordering.domain import ordering


def _as_json(ids):
    return json.dumps([str(i) for i in (ids or [])])


@ordering.entity(part_of="OrderCycle")
class Exchange:
    """A directional hand-over of variants between two enterprises."""

    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    incoming = Boolean(default=False)
    variant_ids = Text()  # JSON array
    enterprise_fee_ids = Text()  # JSON array

    def variants(self):
        return set(json.loads(self.variant_ids)) if self.variant_ids else set()

    def fee_ids(self):
        return json.loads(self.enterprise_fee_ids) if self.enterprise_fee_ids else []


@ordering.aggregate
class OrderCycle:
    name = String(required=True, max_length=255)
    coordinator_id = Identifier(required=True)
    coordinator_fee_ids = Text()  # JSON array
    orders_open_at = DateTime()
    orders_close_at = DateTime()
    exchanges = HasMany(Exchange)

    @invariant.post
    def must_close_after_opening(self):
        if self.orders_open_at and self.orders_close_at and self.orders_close_at <= self.orders_open_at:
            raise ValidationError({"orders_close_at": ["Order cycle must close after it opens"]})

    @classmethod
    def create(cls, name, coordinator_id, orders_open_at=None, orders_close_at=None, coordinator_fee_ids=None):
        order_cycle = cls(
            name=name,
            coordinator_id=coordinator_id,
            orders_open_at=orders_open_at,
            orders_close_at=orders_close_at,
            coordinator_fee_ids=_as_json(coordinator_fee_ids),
        )
        order_cycle.raise_(
            OrderCycleCreated(
                order_cycle_id=str(order_cycle.id),
                name=name,
                coordinator_id=str(coordinator_id),
            )
        )
        return order_cycle

    # -------------------------------------------------------------------
    # Exchanges
    # -------------------------------------------------------------------
    def add_exchange(self, sender_id, receiver_id, incoming=False, variant_ids=None, enterprise_fee_ids=None):
        exchange = Exchange(
            sender_id=sender_id,
            receiver_id=receiver_id,
            incoming=incoming,
            variant_ids=_as_json(variant_ids),
            enterprise_fee_ids=_as_json(enterprise_fee_ids),
        )
        self.add_exchanges(exchange)

        self.raise_(
            ExchangeAdded(
                order_cycle_id=str(self.id),
                exchange_id=str(exchange.id),
                sender_id=str(sender_id),
                receiver_id=str(receiver_id),
                incoming=incoming,
                variant_ids=exchange.variant_ids,
            )
        )
        return exchange

    def distribute_to(self, distributor_id, variant_ids=None, enterprise_fee_ids=None):
        """Add an outgoing exchange from the coordinator to a distributor."""
        return self.add_exchange(
            sender_id=self.coordinator_id,
            receiver_id=distributor_id,
            incoming=False,
            variant_ids=variant_ids,
            enterprise_fee_ids=enterprise_fee_ids,
        )

    def incoming_exchanges(self):
        return [e for e in self.exchanges if e.incoming]

    def outgoing_exchanges(self):
        return [e for e in self.exchanges if not e.incoming]

    def exchange_to(self, distributor_id):
        """The outgoing exchange from the coordinator to ``distributor_id``, if any."""
        return next(
            (
                e
                for e in self.outgoing_exchanges()
                if str(e.sender_id) == str(self.coordinator_id) and str(e.receiver_id) == str(distributor_id)
            ),
            None,
        )

    def has_exchange_to(self, distributor_id):
        return self.exchange_to(distributor_id) is not None

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def variants(self):
        """Every variant offered through any outgoing exchange."""
        offered = set()
        for exchange in self.outgoing_exchanges():
            offered |= exchange.variants()
        return offered

    def variants_distributed_by(self, distributor_id):
        exchange = self.exchange_to(distributor_id)
        return exchange.variants() if exchange else set()

    def coordinator_fees(self):
        return json.loads(self.coordinator_fee_ids) if self.coordinator_fee_ids else []

    def is_open(self, at=None):
        at = at or datetime.now(UTC)
        if self.orders_open_at and at < self.orders_open_at:
            return False
        if self.orders_close_at and at >= self.orders_close_at:
            return False
        return True
