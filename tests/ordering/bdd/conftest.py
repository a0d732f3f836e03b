"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.distribution.shipping_method import ShippingMethod
from ordering.order.order import Order, OriginatorKind
from ordering.shared.calculator import Calculator
from ordering.shared.tax import TaxPolicy
from pytest_bdd import given, parsers, then


@pytest.fixture()
def result():
    """Container for the outcome of a When step."""
    return {"errors": None}


@pytest.fixture()
def tax_policy():
    return TaxPolicy()


# ---------------------------------------------------------------------------
# Given steps: distribution channel
# ---------------------------------------------------------------------------
@given(parsers.cfparse('order cycle "{order_cycle_id}" distributes "{variant_ids}" to "{distributor_id}"'))
def _(catalog, order_cycle_id, variant_ids, distributor_id):
    catalog.open_exchange(order_cycle_id, distributor_id, *[v.strip() for v in variant_ids.split(",")])


@given(parsers.cfparse("a per item fee of {rate:f} with {tax:f} tax"))
def _(fee_rules, rate, tax):
    fee_rules.add_per_item_fee("fee-per-item", rate, tax=tax, label="Packing")


@given(parsers.cfparse("a per order fee of {amount:f} with {tax:f} tax"))
def _(fee_rules, amount, tax):
    fee_rules.add_per_order_fee("fee-per-order", amount, tax=tax, label="Admin")


@given(parsers.cfparse("shipping is taxed at {rate:f} inclusive"), target_fixture="tax_policy")
def _(rate):
    return TaxPolicy(shipment_inc_vat=True, shipping_tax_rate=rate)


# ---------------------------------------------------------------------------
# Given steps: Order
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an order with distributor "{distributor_id}" in order cycle "{order_cycle_id}"'),
    target_fixture="order",
)
def _(distributor_id, order_cycle_id):
    order = Order.create(customer_id="cust-001", distributor_id=distributor_id, order_cycle_id=order_cycle_id)
    order._events.clear()
    return order


@given(parsers.cfparse('an order with distributor "{distributor_id}" and no order cycle'), target_fixture="order")
def _(distributor_id):
    order = Order.create(customer_id="cust-001", distributor_id=distributor_id)
    order._events.clear()
    return order


@given(parsers.cfparse('the cart holds {quantity:d} of "{variant_id}"'))
def _(order, quantity, variant_id):
    order.add_variant(variant_id, quantity=quantity)
    order._events.clear()


@given(parsers.cfparse("the order has a voucher of {amount:f}"))
def _(order, amount):
    order.record_adjustment("Voucher", amount)


@given(parsers.cfparse("the order has an order fee of {amount:f} including {tax:f} tax"))
def _(order, amount, tax):
    order.record_adjustment(
        "Admin", amount, originator_type=OriginatorKind.ENTERPRISE_FEE.value, originator_id="fee-1", included_tax=tax
    )


@given(parsers.cfparse("the order has a {kind} adjustment of {amount:f}"))
def _(order, kind, amount):
    fee = OriginatorKind.ENTERPRISE_FEE.value
    if kind == "fee":
        order.record_adjustment("Admin", amount, originator_type=fee)
    elif kind == "ineligible fee":
        order.record_adjustment("Admin", amount, originator_type=fee, eligible=False)
    elif kind == "shipping":
        order.record_adjustment("Shipping", amount, originator_type=OriginatorKind.SHIPPING_METHOD.value)
    elif kind == "line item fee":
        line_item = order.add_variant("var-1")
        order.record_adjustment("Packing", amount, originator_type=fee, line_item_id=str(line_item.id))
    else:
        raise ValueError(f"Unknown adjustment kind: {kind}")


@given(parsers.cfparse("the order ships for {amount:f}"))
def _(order, tax_policy, amount):
    order.set_shipping_method("ship-1")
    order.create_shipment(ShippingMethod(id="ship-1", name="Delivery", calculator=Calculator(amount=amount)), tax_policy)


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order has distributor "{distributor_id}"'))
def _(order, distributor_id):
    assert order.distributor_id == distributor_id


@then("the order has no distributor")
def _(order):
    assert order.distributor_id is None


@then(parsers.cfparse('the order is in order cycle "{order_cycle_id}"'))
def _(order, order_cycle_id):
    assert order.order_cycle_id == order_cycle_id


@then("the order has no order cycle")
def _(order):
    assert order.order_cycle_id is None


@then("the cart is empty")
def _(order):
    assert order.line_items == []
    assert order.payments == []
    assert order.shipping_method_id is None


@then(parsers.cfparse("the cart holds {count:d} line item"))
def _(order, count):
    assert len(order.line_items) == count


@then(parsers.cfparse("the admin and handling total is {amount:f}"))
def _(order, amount):
    assert order.admin_and_handling_total() == pytest.approx(amount)


@then(parsers.cfparse("the enterprise fee tax is {amount:f}"))
def _(order, amount):
    assert order.enterprise_fee_tax() == pytest.approx(amount)


@then(parsers.cfparse("the shipping tax is {amount:f}"))
def _(order, tax_policy, amount):
    assert order.shipping_tax(tax_policy) == pytest.approx(amount)


@then(parsers.cfparse("the total tax is {amount:f}"))
def _(order, tax_policy, amount):
    assert order.total_tax(tax_policy) == pytest.approx(amount)
