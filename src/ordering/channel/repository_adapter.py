"""Channel catalogue backed by the Distributor and OrderCycle repositories."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.channel.port import ChannelCatalog
from ordering.distribution.distributor import Distributor
from ordering.distribution.order_cycle import OrderCycle

logger = structlog.get_logger(__name__)


class RepositoryChannelCatalog(ChannelCatalog):
    """Reads channel membership from the active domain's repositories.

    Unknown distributors and order cycles supply nothing.
    """

    def _get(self, aggregate_cls, identifier):
        if not identifier:
            return None
        try:
            return current_domain.repository_for(aggregate_cls).get(str(identifier))
        except ObjectNotFoundError:
            logger.warning(
                "Channel reference not found",
                aggregate=aggregate_cls.__name__,
                identifier=str(identifier),
            )
            return None

    def supplies(self, distributor_id, variant_id) -> bool:
        distributor = self._get(Distributor, distributor_id)
        return distributor is not None and distributor.supplies(variant_id)

    def order_cycle_variants(self, order_cycle_id) -> set[str]:
        order_cycle = self._get(OrderCycle, order_cycle_id)
        return order_cycle.variants() if order_cycle else set()

    def variants_distributed_by(self, order_cycle_id, distributor_id) -> set[str]:
        order_cycle = self._get(OrderCycle, order_cycle_id)
        return order_cycle.variants_distributed_by(distributor_id) if order_cycle else set()

    def has_exchange_to(self, order_cycle_id, distributor_id) -> bool:
        order_cycle = self._get(OrderCycle, order_cycle_id)
        return order_cycle is not None and order_cycle.has_exchange_to(distributor_id)
