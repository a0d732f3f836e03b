"""Channel catalogue port (abstract interface).

Answers which variants are obtainable through which distributor and order
cycle. Orders consult it to keep their distribution context consistent
without loading distributors and order cycles themselves.
"""

from abc import ABC, abstractmethod


class ChannelCatalog(ABC):
    """Read-only facts about channel membership."""

    @abstractmethod
    def supplies(self, distributor_id, variant_id) -> bool:
        """True if the distributor supplies the variant directly."""
        ...

    @abstractmethod
    def order_cycle_variants(self, order_cycle_id) -> set[str]:
        """Variants offered through any outgoing exchange of the order cycle."""
        ...

    @abstractmethod
    def variants_distributed_by(self, order_cycle_id, distributor_id) -> set[str]:
        """Variants the order cycle offers to one distributor."""
        ...

    @abstractmethod
    def has_exchange_to(self, order_cycle_id, distributor_id) -> bool:
        """True if the cycle's coordinator has an outgoing exchange to the distributor."""
        ...
