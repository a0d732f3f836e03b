"""Distributor aggregate — an enterprise that fulfils orders.

A distributor supplies some variants directly and further variants through
the order cycles it receives outgoing exchanges from. Orders refer to a
distributor by identifier only.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, String, Text, ValueObject

from ordering.distribution.events import DistributorRegistered
from ordering.domain import ordering
from ordering.shared.address import Address


@ordering.aggregate
class Distributor:
    name = String(required=True, max_length=255)
    address = ValueObject(Address)
    variant_ids = Text()  # JSON array of variants distributed outside order cycles
    created_at = DateTime()

    @classmethod
    def register(cls, name, address=None, variant_ids=None):
        distributor = cls(
            name=name,
            address=address,
            variant_ids=json.dumps([str(v) for v in (variant_ids or [])]),
            created_at=datetime.now(UTC),
        )
        distributor.raise_(
            DistributorRegistered(
                distributor_id=str(distributor.id),
                name=name,
                variant_ids=distributor.variant_ids,
            )
        )
        return distributor

    def distributed_variants(self):
        return set(json.loads(self.variant_ids)) if self.variant_ids else set()

    def supplies(self, variant_id):
        """True if the variant is distributed directly, without an order cycle."""
        return str(variant_id) in self.distributed_variants()

    def distribute(self, *variant_ids):
        variants = self.distributed_variants() | {str(v) for v in variant_ids}
        self.variant_ids = json.dumps(sorted(variants))
