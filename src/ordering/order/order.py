"""Order aggregate (CQRS) — a customer's cart bought through a distribution channel.

An order is placed with a distributor and, optionally, within an order cycle.
The two must stay compatible with each other and with the variants in the
cart:

- Changing the distributor clears an order cycle that has no outgoing
  exchange to the new distributor.
- Changing the order cycle empties the cart, then clears a distributor the
  new cycle does not distribute to.
- Saving an order whose distributor (directly, or through its order cycle)
  cannot supply every variant in the cart fails with a single ``base`` error.

Enterprise fees are recorded as adjustments in the order's ledger, either on
the order itself or on individual line items. They are regenerated from
scratch whenever the distribution context changes, so the fee set is always a
function of (distributor, order cycle, line items). Fee, shipping and total
tax are read from the ledger and the shipment on demand.

State Machine:
    CART → COMPLETE → CANCELED
    CART → CANCELED
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.fee_rules.port import DistributionContext
from ordering.order.events import (
    DistributionChargeUpdated,
    DistributorSet,
    OrderCancelled,
    OrderCompleted,
    OrderConfirmationRequested,
    OrderCreated,
    OrderCycleSet,
    OrderEmptied,
    PaymentAdded,
    ShipmentCreated,
    ShippingMethodSet,
    VariantAdded,
    VariantRemoved,
)
from ordering.shared.address import Address
from ordering.shared.tax import TaxPolicy

CANNOT_SUPPLY_CART = "Distributor or order cycle cannot supply the products in your cart"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderState(Enum):
    CART = "Cart"
    COMPLETE = "Complete"
    CANCELED = "Canceled"


class OriginatorKind(Enum):
    """What raised an adjustment. Ledger filters match on this tag."""

    ENTERPRISE_FEE = "EnterpriseFee"
    SHIPPING_METHOD = "ShippingMethod"
    OTHER = "Other"


class PaymentState(Enum):
    CHECKOUT = "Checkout"
    COMPLETED = "Completed"
    VOID = "Void"


_VALID_TRANSITIONS = {
    OrderState.CART: {OrderState.COMPLETE, OrderState.CANCELED},
    OrderState.COMPLETE: {OrderState.CANCELED},
    OrderState.CANCELED: set(),  # Terminal
}


def _same_id(left, right):
    return (str(left) if left else None) == (str(right) if right else None)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Shipment:
    """The shipment recorded for an order and what it cost to ship."""

    shipping_method_id = Identifier(required=True)
    cost = Float(default=0.0)
    included_tax = Float(default=0.0)  # Under the policy the shipment was created with
    created_at = DateTime()

    def tax_component(self, tax_policy=None):
        if tax_policy is None:
            return self.included_tax or 0.0
        return tax_policy.shipping_tax_on(self.cost or 0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class LineItem:
    """One variant and quantity in the cart."""

    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    max_quantity = Integer()
    price = Float(default=0.0, min_value=0.0)

    def total(self):
        return round((self.price or 0.0) * self.quantity, 2)


@ordering.entity(part_of="Order")
class Adjustment:
    """A ledger entry: a charge or discount, tax inclusive.

    Adjustments without a ``line_item_id`` are scoped to the order itself.
    Ineligible adjustments stay in the ledger but never count towards totals.
    """

    label = String(required=True, max_length=255)
    amount = Float(required=True)
    included_tax = Float(default=0.0)
    eligible = Boolean(default=True)
    originator_type = String(choices=OriginatorKind, default=OriginatorKind.OTHER.value)
    originator_id = Identifier()
    line_item_id = Identifier()

    @invariant.post
    def included_tax_cannot_exceed_amount(self):
        amount = self.amount or 0.0
        tax = self.included_tax or 0.0
        if amount >= 0 and tax >= 0 and tax > amount:
            raise ValidationError({"included_tax": [f"Included tax exceeds the amount of '{self.label}'"]})

    def is_enterprise_fee(self):
        return self.originator_type == OriginatorKind.ENTERPRISE_FEE.value

    def is_shipping(self):
        return self.originator_type == OriginatorKind.SHIPPING_METHOD.value

    def is_order_scoped(self):
        return not self.line_item_id


@ordering.entity(part_of="Order")
class Payment:
    """A payment towards the order through one of the distributor's payment methods."""

    payment_method_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    state = String(choices=PaymentState, default=PaymentState.CHECKOUT.value)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier()
    email = String(max_length=254)
    state = String(choices=OrderState, default=OrderState.CART.value)
    distributor_id = Identifier()
    order_cycle_id = Identifier()
    line_items = HasMany(LineItem)
    adjustments = HasMany(Adjustment)
    payments = HasMany(Payment)
    shipping_method_id = Identifier()
    ship_address = ValueObject(Address)
    shipment = ValueObject(Shipment)
    created_at = DateTime()
    updated_at = DateTime()
    completed_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, email=None, distributor_id=None, order_cycle_id=None):
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            email=email,
            state=OrderState.CART.value,
            distributor_id=distributor_id,
            order_cycle_id=order_cycle_id,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                customer_id=str(customer_id) if customer_id else None,
                distributor_id=str(distributor_id) if distributor_id else None,
                order_cycle_id=str(order_cycle_id) if order_cycle_id else None,
                created_at=now,
            )
        )
        return order

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    def _assert_can_transition(self, target_state):
        current = OrderState(self.state)
        if target_state not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"state": [f"Cannot transition from {current.value} to {target_state.value}"]})

    def _assert_in_cart(self):
        if OrderState(self.state) != OrderState.CART:
            raise ValidationError({"state": ["Only orders in the cart can be changed"]})

    # -------------------------------------------------------------------
    # Cart contents
    # -------------------------------------------------------------------
    def find_line_item_by_variant(self, variant_id):
        return next((li for li in self.line_items if str(li.variant_id) == str(variant_id)), None)

    def item_count(self):
        return sum(li.quantity for li in self.line_items)

    def item_total(self):
        return round(sum(li.total() for li in self.line_items), 2)

    def add_variant(self, variant_id, quantity=1, max_quantity=None, price=0.0):
        """Add a variant to the cart, or increase the quantity already there."""
        self._assert_in_cart()
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        line_item = self.find_line_item_by_variant(variant_id)
        if line_item:
            line_item.quantity += quantity
            if max_quantity is not None:
                line_item.max_quantity = max_quantity
        else:
            line_item = LineItem(
                variant_id=variant_id,
                quantity=quantity,
                max_quantity=max_quantity,
                price=price or 0.0,
            )
            self.add_line_items(line_item)
        self._touch()

        self.raise_(
            VariantAdded(
                order_id=str(self.id),
                line_item_id=str(line_item.id),
                variant_id=str(variant_id),
                quantity=line_item.quantity,
                max_quantity=line_item.max_quantity,
            )
        )
        return line_item

    def set_variant_attributes(self, variant_id, attributes):
        """Set line item attributes (currently ``max_quantity``) for a variant.

        Does nothing when the cart holds no line item for the variant.
        """
        line_item = self.find_line_item_by_variant(variant_id)
        if line_item is None:
            return

        if attributes.get("max_quantity") is not None:
            line_item.max_quantity = int(attributes["max_quantity"])
            self._touch()

    def _remove_line_item(self, line_item):
        for adjustment in [a for a in self.adjustments if str(a.line_item_id or "") == str(line_item.id)]:
            self.remove_adjustments(adjustment)
        self.remove_line_items(line_item)

    def remove_variant(self, variant_id):
        self._assert_in_cart()
        line_item = self.find_line_item_by_variant(variant_id)
        if line_item is None:
            raise ValidationError({"variant_id": ["Variant is not in the cart"]})

        with atomic_change(self):
            self._remove_line_item(line_item)
            self._touch()

        self.raise_(
            VariantRemoved(
                order_id=str(self.id),
                line_item_id=str(line_item.id),
                variant_id=str(variant_id),
            )
        )

    def empty(self):
        """Remove every line item, adjustment and payment, and the shipping method."""
        line_item_count = len(self.line_items)
        payment_count = len(self.payments)
        had_content = bool(
            line_item_count or payment_count or self.adjustments or self.shipping_method_id or self.shipment
        )
        if not had_content:
            return

        with atomic_change(self):
            for line_item in list(self.line_items):
                self._remove_line_item(line_item)
            for adjustment in list(self.adjustments):
                self.remove_adjustments(adjustment)
            for payment in list(self.payments):
                self.remove_payments(payment)
            self.shipping_method_id = None
            self.shipment = None
            self._touch()

        self.raise_(
            OrderEmptied(
                order_id=str(self.id),
                removed_line_item_count=line_item_count,
                removed_payment_count=payment_count,
            )
        )

    # -------------------------------------------------------------------
    # Distribution context
    # -------------------------------------------------------------------
    @property
    def distribution_context(self):
        return DistributionContext(
            order_cycle_id=str(self.order_cycle_id) if self.order_cycle_id else None,
            distributor_id=str(self.distributor_id) if self.distributor_id else None,
        )

    def set_distributor(self, distributor_id, catalog):
        """Assign the distributor, dropping an order cycle that does not serve it."""
        previous_distributor_id = self.distributor_id
        order_cycle_cleared = False

        with atomic_change(self):
            self.distributor_id = distributor_id or None
            if distributor_id and self.order_cycle_id and not catalog.has_exchange_to(self.order_cycle_id, distributor_id):
                self.order_cycle_id = None
                order_cycle_cleared = True
            self._touch()

        self.raise_(
            DistributorSet(
                order_id=str(self.id),
                distributor_id=str(distributor_id) if distributor_id else None,
                previous_distributor_id=str(previous_distributor_id) if previous_distributor_id else None,
                order_cycle_cleared=order_cycle_cleared,
            )
        )

    def set_order_cycle(self, order_cycle_id, catalog):
        """Switch to another order cycle.

        Returns False without touching the cart when the cycle is unchanged.
        Otherwise the cart is emptied before the new cycle is adopted, and a
        distributor the new cycle does not serve is cleared.
        """
        if _same_id(order_cycle_id, self.order_cycle_id):
            return False

        previous_order_cycle_id = self.order_cycle_id
        distributor_cleared = False

        self.empty()
        with atomic_change(self):
            self.order_cycle_id = order_cycle_id or None
            if order_cycle_id and self.distributor_id and not catalog.has_exchange_to(order_cycle_id, self.distributor_id):
                self.distributor_id = None
                distributor_cleared = True
            self._touch()

        self.raise_(
            OrderCycleSet(
                order_id=str(self.id),
                order_cycle_id=str(order_cycle_id) if order_cycle_id else None,
                previous_order_cycle_id=str(previous_order_cycle_id) if previous_order_cycle_id else None,
                distributor_cleared=distributor_cleared,
            )
        )
        return True

    def unsuppliable_line_items(self, catalog):
        """Line items neither the distributor nor its order cycle can supply."""
        if not self.distributor_id:
            return []

        cycle_variants = (
            catalog.variants_distributed_by(self.order_cycle_id, self.distributor_id) if self.order_cycle_id else set()
        )
        return [
            li
            for li in self.line_items
            if not catalog.supplies(self.distributor_id, li.variant_id) and str(li.variant_id) not in cycle_variants
        ]

    def distribution_errors(self, catalog):
        if self.unsuppliable_line_items(catalog):
            return {"base": [CANNOT_SUPPLY_CART]}
        return {}

    def validate_distribution(self, catalog):
        errors = self.distribution_errors(catalog)
        if errors:
            raise ValidationError(errors)

    # -------------------------------------------------------------------
    # Enterprise fee recalculation
    # -------------------------------------------------------------------
    def provided_by_order_cycle(self, line_item, catalog):
        if not self.order_cycle_id:
            return False
        return str(line_item.variant_id) in catalog.order_cycle_variants(self.order_cycle_id)

    def fee_charges(self, catalog, fee_rules):
        """The enterprise fees that apply to this order right now.

        Per-item charges for every line item the order cycle provides, then
        the per-order charges once. Nothing applies without an order cycle.
        """
        if not self.order_cycle_id:
            return []

        context = self.distribution_context
        charges = []
        for line_item in self.line_items:
            if self.provided_by_order_cycle(line_item, catalog):
                charges.extend(fee_rules.line_item_charges(context, line_item))
        charges.extend(fee_rules.order_charges(context, self))
        return charges

    def clear_enterprise_fee_adjustments(self):
        for adjustment in [a for a in self.adjustments if a.is_enterprise_fee()]:
            self.remove_adjustments(adjustment)

    def update_distribution_charge(self, catalog, fee_rules):
        """Replace every enterprise fee adjustment with the currently applicable fees.

        Charges are priced and their adjustments built before the ledger is
        touched, so a failing fee lookup or an invalid charge leaves the
        existing adjustments in place.
        """
        charges = self.fee_charges(catalog, fee_rules)
        adjustments = [
            Adjustment(
                label=charge.label,
                amount=charge.amount,
                included_tax=charge.included_tax,
                originator_type=OriginatorKind.ENTERPRISE_FEE.value,
                originator_id=charge.enterprise_fee_id,
                line_item_id=charge.line_item_id,
            )
            for charge in charges
        ]

        with atomic_change(self):
            self.clear_enterprise_fee_adjustments()
            for adjustment in adjustments:
                self.add_adjustments(adjustment)
            self._touch()

        self.raise_(
            DistributionChargeUpdated(
                order_id=str(self.id),
                distributor_id=str(self.distributor_id) if self.distributor_id else None,
                order_cycle_id=str(self.order_cycle_id) if self.order_cycle_id else None,
                fee_adjustment_count=len(charges),
                admin_and_handling_total=self.admin_and_handling_total(),
                enterprise_fee_tax=self.enterprise_fee_tax(),
                line_item_count=len(self.line_items),
            )
        )

    def record_adjustment(
        self,
        label,
        amount,
        originator_type=OriginatorKind.OTHER.value,
        originator_id=None,
        line_item_id=None,
        included_tax=0.0,
        eligible=True,
    ):
        """Add an arbitrary entry to the ledger."""
        adjustment = Adjustment(
            label=label,
            amount=amount,
            included_tax=included_tax,
            eligible=eligible,
            originator_type=originator_type,
            originator_id=originator_id,
            line_item_id=line_item_id,
        )
        self.add_adjustments(adjustment)
        return adjustment

    def adjustments_for(self, line_item):
        return [a for a in self.adjustments if str(a.line_item_id or "") == str(line_item.id)]

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def _eligible_order_fee_adjustments(self):
        return [a for a in self.adjustments if a.eligible and a.is_enterprise_fee() and a.is_order_scoped()]

    def admin_and_handling_total(self):
        return round(sum(a.amount for a in self._eligible_order_fee_adjustments()), 2)

    def enterprise_fee_tax(self):
        return round(sum(a.included_tax or 0.0 for a in self._eligible_order_fee_adjustments()), 2)

    def shipping_tax(self, tax_policy=None):
        """Tax embedded in the shipping charge.

        Without a policy, the tax recorded when the shipment was created.
        """
        if self.shipment is None:
            return 0.0
        return self.shipment.tax_component(tax_policy)

    def total_tax(self, tax_policy=None):
        return round(self.shipping_tax(tax_policy) + self.enterprise_fee_tax(), 2)

    # -------------------------------------------------------------------
    # Shipping
    # -------------------------------------------------------------------
    def set_shipping_method(self, shipping_method_id):
        self.shipping_method_id = shipping_method_id or None
        self._touch()
        self.raise_(
            ShippingMethodSet(
                order_id=str(self.id),
                shipping_method_id=str(shipping_method_id) if shipping_method_id else None,
            )
        )

    def populate_ship_address(self, distributor, shipping_method):
        """Ship to the distributor's address when the shipping method is a pickup.

        Returns True if the address was copied.
        """
        if shipping_method is None or shipping_method.require_ship_address:
            return False
        if distributor is None or distributor.address is None:
            return False

        self.ship_address = distributor.address
        self._touch()
        return True

    def create_shipment(self, shipping_method, tax_policy=None):
        """Record the shipment and its shipping charge.

        Does nothing until a shipping method has been chosen.
        """
        if shipping_method is None or not self.shipping_method_id:
            return None

        tax_policy = tax_policy or TaxPolicy()
        cost = shipping_method.compute_cost(self)
        tax = tax_policy.shipping_tax_on(cost)
        now = datetime.now(UTC)

        with atomic_change(self):
            for adjustment in [a for a in self.adjustments if a.is_shipping()]:
                self.remove_adjustments(adjustment)
            self.shipment = Shipment(
                shipping_method_id=str(shipping_method.id),
                cost=cost,
                included_tax=tax,
                created_at=now,
            )
            self.add_adjustments(
                Adjustment(
                    label=f"Shipping ({shipping_method.name})",
                    amount=cost,
                    included_tax=tax,
                    originator_type=OriginatorKind.SHIPPING_METHOD.value,
                    originator_id=str(shipping_method.id),
                )
            )
            self.updated_at = now

        self.raise_(
            ShipmentCreated(
                order_id=str(self.id),
                shipping_method_id=str(shipping_method.id),
                cost=cost,
                shipping_tax=self.shipping_tax(tax_policy),
            )
        )
        return self.shipment

    # -------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------
    def available_payment_methods(self, payment_methods):
        """The payment methods the order's distributor offers."""
        return [pm for pm in payment_methods if pm.available_to(self.distributor_id)]

    def add_payment(self, payment_method_id, amount):
        payment = Payment(payment_method_id=payment_method_id, amount=amount)
        self.add_payments(payment)
        self._touch()

        self.raise_(
            PaymentAdded(
                order_id=str(self.id),
                payment_id=str(payment.id),
                payment_method_id=str(payment_method_id),
                amount=amount,
            )
        )
        return payment

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def complete(self):
        self._assert_can_transition(OrderState.COMPLETE)
        if not self.line_items:
            raise ValidationError({"line_items": ["Cannot complete an empty order"]})

        now = datetime.now(UTC)
        self.state = OrderState.COMPLETE.value
        self.completed_at = now
        self.updated_at = now

        self.raise_(OrderCompleted(order_id=str(self.id), completed_at=now))

    def cancel(self):
        previous_state = self.state
        self._assert_can_transition(OrderState.CANCELED)

        now = datetime.now(UTC)
        self.state = OrderState.CANCELED.value
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_state=previous_state,
                cancelled_at=now,
            )
        )

    def request_confirmation_email(self):
        self.raise_(
            OrderConfirmationRequested(
                order_id=str(self.id),
                customer_id=str(self.customer_id) if self.customer_id else None,
                email=self.email,
                requested_at=datetime.now(UTC),
            )
        )
