"""Integration tests for the OrderCharges projection."""

import json

from ordering.distribution.registration import AddExchange, CreateOrderCycle, RegisterDistributor
from ordering.fees.management import CreateEnterpriseFee
from ordering.order.cancellation import CancelOrder
from ordering.order.cart import AddVariant, EmptyOrder
from ordering.order.completion import CompleteOrder
from ordering.order.creation import CreateOrder
from ordering.order.distribution import SetDistributor
from ordering.projections.order_charges import OrderCharges
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _order_in_cycle():
    distributor_id = _process(RegisterDistributor(name="Fitzroy Hub"))
    admin_fee = _process(CreateEnterpriseFee(name="Hub admin", amount=6.0, tax_rate=0.2))
    order_cycle_id = _process(
        CreateOrderCycle(name="Week 12", coordinator_id="hub-1", coordinator_fee_ids=json.dumps([admin_fee]))
    )
    _process(
        AddExchange(
            order_cycle_id=order_cycle_id,
            sender_id="hub-1",
            receiver_id=distributor_id,
            variant_ids=json.dumps(["var-1", "var-2"]),
        )
    )
    order_id = _process(CreateOrder(customer_id="cust-001", distributor_id=distributor_id, order_cycle_id=order_cycle_id))
    return distributor_id, order_cycle_id, order_id


def _view(order_id):
    return current_domain.repository_for(OrderCharges).get(order_id)


class TestOrderChargesProjection:
    def test_created(self):
        distributor_id, order_cycle_id, order_id = _order_in_cycle()

        view = _view(order_id)
        assert view.distributor_id == distributor_id
        assert view.order_cycle_id == order_cycle_id
        assert view.status == "Cart"
        assert view.admin_and_handling_total == 0.0

    def test_tracks_distribution_charge(self):
        _, _, order_id = _order_in_cycle()

        _process(AddVariant(order_id=order_id, variant_id="var-1", quantity=1))
        _process(AddVariant(order_id=order_id, variant_id="var-2", quantity=1))

        view = _view(order_id)
        assert view.line_item_count == 2
        assert view.admin_and_handling_total == 6.0
        assert view.enterprise_fee_tax == 1.0
        assert view.total_tax == 1.0

    def test_empty_then_recalculated(self):
        _, _, order_id = _order_in_cycle()
        _process(AddVariant(order_id=order_id, variant_id="var-1", quantity=1))

        _process(EmptyOrder(order_id=order_id))

        view = _view(order_id)
        assert view.line_item_count == 0
        # Per-order fees still apply to an empty cart in an order cycle
        assert view.admin_and_handling_total == 6.0

    def test_distributor_change_clears_cycle(self):
        _, _, order_id = _order_in_cycle()
        other_id = _process(RegisterDistributor(name="Carlton Co-op"))

        _process(SetDistributor(order_id=order_id, distributor_id=other_id))

        view = _view(order_id)
        assert view.distributor_id == other_id
        assert view.order_cycle_id is None
        assert view.admin_and_handling_total == 0.0

    def test_status_follows_lifecycle(self):
        _, _, order_id = _order_in_cycle()
        _process(AddVariant(order_id=order_id, variant_id="var-1", quantity=1))

        _process(CompleteOrder(order_id=order_id))
        assert _view(order_id).status == "Complete"

        _process(CancelOrder(order_id=order_id))
        assert _view(order_id).status == "Canceled"
