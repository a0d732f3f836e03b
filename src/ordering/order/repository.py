"""Repository for the Order aggregate.

Saving runs the cart-vs-channel check first: an order whose distributor and
order cycle cannot supply every variant in its cart is rejected with a single
``base`` error and nothing is persisted.
"""

import structlog
from protean.core.repository import BaseRepository
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.channel import get_catalog
from ordering.distribution.payment_method import PaymentMethod
from ordering.domain import ordering
from ordering.order.order import Order, OrderState

logger = structlog.get_logger(__name__)


@ordering.repository(part_of=Order)
class OrderRepository(BaseRepository):
    def add(self, order):
        errors = order.distribution_errors(get_catalog())
        if errors:
            logger.info(
                "Order rejected: cart cannot be supplied",
                order_id=str(order.id),
                distributor_id=str(order.distributor_id) if order.distributor_id else None,
                order_cycle_id=str(order.order_cycle_id) if order.order_cycle_id else None,
            )
            raise ValidationError(errors)
        return super().add(order)

    def save(self, order) -> dict:
        """Persist the order if its cart can be supplied.

        Returns the field errors instead of raising; empty when the order was saved.
        """
        try:
            self.add(order)
        except ValidationError as exc:
            return exc.messages
        return {}

    def not_in_state(self, state) -> list[Order]:
        """Orders in any state other than ``state``."""
        if isinstance(state, OrderState):
            state = state.value
        return [o for o in self._dao.query.all().items if o.state != state]

    def with_payment_method_name(self, names) -> list[Order]:
        """Orders with at least one payment made through a method of the given name(s)."""
        names = {names} if isinstance(names, str) else set(names)
        method_ids = {
            str(pm.id)
            for pm in current_domain.repository_for(PaymentMethod)._dao.query.all().items
            if pm.name in names
        }
        return [
            o
            for o in self._dao.query.all().items
            if any(str(p.payment_method_id) in method_ids for p in o.payments)
        ]
