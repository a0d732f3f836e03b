"""BDD tests for distributor, order cycle and cart consistency."""

from ordering.order.order import CANNOT_SUPPLY_CART
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/distribution_consistency.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the distributor is changed to "{distributor_id}"'))
def _(order, catalog, distributor_id):
    order.set_distributor(distributor_id, catalog)


@when(parsers.cfparse('the order cycle is changed to "{order_cycle_id}"'))
def _(order, catalog, order_cycle_id):
    order.set_order_cycle(order_cycle_id, catalog)


@when("the order is checked for supply")
def _(order, catalog, result):
    result["errors"] = order.distribution_errors(catalog)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is rejected with "{message}"'))
def _(result, message):
    assert message == CANNOT_SUPPLY_CART
    assert result["errors"] == {"base": [message]}


@then("the order is accepted")
def _(result):
    assert result["errors"] == {}
