"""Fee rule source port (abstract interface).

Enumerates the enterprise fees that apply in a distribution context and
prices them for a line item or for a whole order. Answers are plain
``FeeCharge`` values; recording them as adjustments is the order's job.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DistributionContext:
    """The (order cycle, distributor) pair fees are looked up for."""

    order_cycle_id: str | None
    distributor_id: str | None = None


@dataclass(frozen=True)
class FeeCharge:
    """One enterprise fee priced for an order or one of its line items."""

    enterprise_fee_id: str
    label: str
    amount: float
    included_tax: float = 0.0
    line_item_id: str | None = None  # None for order-scoped charges


class FeeRuleSource(ABC):
    """Abstract fee rule source."""

    @abstractmethod
    def line_item_charges(self, context: DistributionContext, line_item) -> list[FeeCharge]:
        """Per-item fees for one line item."""
        ...

    @abstractmethod
    def order_charges(self, context: DistributionContext, order) -> list[FeeCharge]:
        """Per-order fees, one charge per fee."""
        ...
