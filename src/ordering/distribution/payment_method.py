"""PaymentMethod aggregate — payment options offered by distributors."""

import json

from protean.fields import Boolean, String, Text

from ordering.domain import ordering


@ordering.aggregate
class PaymentMethod:
    name = String(required=True, max_length=255)
    active = Boolean(default=True)
    distributor_ids = Text()  # JSON array

    def available_to(self, distributor_id):
        if not self.active or not distributor_id or not self.distributor_ids:
            return False
        return str(distributor_id) in json.loads(self.distributor_ids)
