"""In-memory channel catalogue for development and testing.

Channel membership is declared directly on the adapter, so orders can be
exercised without persisting distributors and order cycles.
"""

from ordering.channel.port import ChannelCatalog


class InMemoryChannelCatalog(ChannelCatalog):
    """Configurable in-memory channel catalogue."""

    def __init__(self) -> None:
        self.direct: dict[str, set[str]] = {}
        self.exchanges: dict[str, dict[str, set[str]]] = {}
        self.calls: list[dict] = []

    def distribute(self, distributor_id, *variant_ids) -> None:
        """Let a distributor supply variants outside any order cycle."""
        self.direct.setdefault(str(distributor_id), set()).update(str(v) for v in variant_ids)

    def open_exchange(self, order_cycle_id, distributor_id, *variant_ids) -> None:
        """Add an outgoing exchange from an order cycle to a distributor."""
        outgoing = self.exchanges.setdefault(str(order_cycle_id), {})
        outgoing.setdefault(str(distributor_id), set()).update(str(v) for v in variant_ids)

    def supplies(self, distributor_id, variant_id) -> bool:
        self.calls.append({"method": "supplies", "distributor_id": distributor_id, "variant_id": variant_id})
        return str(variant_id) in self.direct.get(str(distributor_id), set())

    def order_cycle_variants(self, order_cycle_id) -> set[str]:
        self.calls.append({"method": "order_cycle_variants", "order_cycle_id": order_cycle_id})
        offered = set()
        for variants in self.exchanges.get(str(order_cycle_id), {}).values():
            offered |= variants
        return offered

    def variants_distributed_by(self, order_cycle_id, distributor_id) -> set[str]:
        return set(self.exchanges.get(str(order_cycle_id), {}).get(str(distributor_id), set()))

    def has_exchange_to(self, order_cycle_id, distributor_id) -> bool:
        return str(distributor_id) in self.exchanges.get(str(order_cycle_id), {})
