"""Tax policy value object and tax-inclusive arithmetic.

Amounts in the ledger are tax inclusive: a charge of 50.00 at a 25% rate
embeds 10.00 of tax (50 * 0.25 / 1.25). The policy for shipments is passed
explicitly to the calculations that need it; ``tax_policy_from_config`` builds
the default one from the ``[custom]`` section of the domain configuration.
"""

from protean.fields import Boolean, Float

from ordering.domain import ordering


def included_tax(amount, rate):
    """Tax embedded in a tax-inclusive ``amount`` charged at ``rate``."""
    if not rate or not amount:
        return 0.0
    return round(amount * rate / (1 + rate), 2)


@ordering.value_object
class TaxPolicy:
    """How shipping charges are taxed."""

    shipment_inc_vat = Boolean(default=False)
    shipping_tax_rate = Float(default=0.0, min_value=0.0)

    def shipping_tax_on(self, amount):
        if not self.shipment_inc_vat:
            return 0.0
        return included_tax(amount, self.shipping_tax_rate)


def tax_policy_from_config(domain):
    """Build the shipping tax policy from ``domain.config["custom"]``."""
    custom = domain.config.get("custom") or {}
    return TaxPolicy(
        shipment_inc_vat=bool(custom.get("shipment_inc_vat", False)),
        shipping_tax_rate=float(custom.get("shipping_tax_rate", 0.0) or 0.0),
    )
