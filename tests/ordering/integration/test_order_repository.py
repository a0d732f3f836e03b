"""Integration tests for OrderRepository persistence rules and queries."""

import pytest
from ordering.distribution.payment_method import PaymentMethod
from ordering.order.order import CANNOT_SUPPLY_CART, Order, OrderState
from protean import current_domain
from protean.exceptions import ValidationError


def _save_order(**kwargs):
    order = Order.create(**kwargs)
    current_domain.repository_for(Order).add(order)
    return order


def _payment_method(name):
    method = PaymentMethod(name=name, distributor_ids='["dist-1"]')
    current_domain.repository_for(PaymentMethod).add(method)
    return method


class TestSaveValidation:
    def test_unsuppliable_cart_is_not_persisted(self, catalog):
        catalog.open_exchange("oc-1", "dist-1", "var-1")
        order = Order.create(distributor_id="dist-1", order_cycle_id="oc-1")
        order.add_variant("var-2")

        with pytest.raises(ValidationError) as exc_info:
            current_domain.repository_for(Order).add(order)

        assert exc_info.value.messages == {"base": [CANNOT_SUPPLY_CART]}
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    def test_save_reports_errors_without_raising(self, catalog):
        catalog.open_exchange("oc-1", "dist-1", "var-1")
        order = Order.create(distributor_id="dist-1", order_cycle_id="oc-1")
        order.add_variant("var-2")

        assert current_domain.repository_for(Order).save(order) == {"base": [CANNOT_SUPPLY_CART]}

    def test_save_suppliable_cart(self, catalog):
        catalog.open_exchange("oc-1", "dist-1", "var-1")
        order = Order.create(distributor_id="dist-1", order_cycle_id="oc-1")
        order.add_variant("var-1")

        assert current_domain.repository_for(Order).save(order) == {}
        assert len(current_domain.repository_for(Order).get(order.id).line_items) == 1


class TestQueries:
    def test_not_in_state(self, catalog):
        cart = _save_order(customer_id="cust-1")
        canceled = Order.create(customer_id="cust-2")
        canceled.cancel()
        current_domain.repository_for(Order).add(canceled)

        repo = current_domain.repository_for(Order)

        assert [o.id for o in repo.not_in_state(OrderState.CANCELED)] == [cart.id]
        assert [o.id for o in repo.not_in_state("Cart")] == [canceled.id]

    def test_with_payment_method_name(self, catalog):
        cash = _payment_method("Cash")
        card = _payment_method("Card")
        repo = current_domain.repository_for(Order)

        paid_cash = Order.create(distributor_id="dist-1")
        paid_cash.add_payment(cash.id, 10.0)
        paid_cash.add_payment(cash.id, 5.0)
        repo.add(paid_cash)
        paid_card = Order.create(distributor_id="dist-1")
        paid_card.add_payment(card.id, 10.0)
        repo.add(paid_card)
        _save_order(distributor_id="dist-1")

        assert [o.id for o in repo.with_payment_method_name("Cash")] == [paid_cash.id]
        assert sorted(o.id for o in repo.with_payment_method_name(["Cash", "Card"])) == sorted(
            [paid_cash.id, paid_card.id]
        )
        assert repo.with_payment_method_name("Cheque") == []
