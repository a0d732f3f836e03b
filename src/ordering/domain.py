"""Ordering bounded context — Orders sold through time-boxed distribution channels.

Keeps an order's distributor and order cycle consistent with the variants in
its cart, recalculates enterprise-fee adjustments whenever the distribution
context changes, and derives fee, shipping and total tax from the order's
adjustment ledger.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
