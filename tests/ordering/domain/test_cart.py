"""Tests for cart contents on an Order."""

import pytest
from ordering.order.events import OrderEmptied, VariantAdded, VariantRemoved
from ordering.order.order import Order, OriginatorKind
from protean.exceptions import ValidationError


def _order():
    order = Order.create(customer_id="cust-001", distributor_id="dist-1", order_cycle_id="oc-1")
    order._events.clear()
    return order


class TestAddVariant:
    def test_adds_line_item(self):
        order = _order()

        line_item = order.add_variant("var-1", quantity=2, price=3.5)

        assert len(order.line_items) == 1
        assert line_item.quantity == 2
        assert order.item_total() == 7.0

    def test_same_variant_merges_into_existing_line_item(self):
        order = _order()
        order.add_variant("var-1", quantity=2)

        order.add_variant("var-1", quantity=3, max_quantity=8)

        assert len(order.line_items) == 1
        assert order.line_items[0].quantity == 5
        assert order.line_items[0].max_quantity == 8
        assert order.item_count() == 5

    def test_rejects_zero_quantity(self):
        order = _order()

        with pytest.raises(ValidationError) as exc_info:
            order.add_variant("var-1", quantity=0)

        assert "quantity" in exc_info.value.messages

    def test_raises_variant_added(self):
        order = _order()

        order.add_variant("var-1", quantity=2)

        assert isinstance(order._events[-1], VariantAdded)
        assert order._events[-1].variant_id == "var-1"


class TestSetVariantAttributes:
    def test_sets_max_quantity(self):
        order = _order()
        order.add_variant("var-1", quantity=1)

        order.set_variant_attributes("var-1", {"max_quantity": "3"})

        assert order.line_items[0].max_quantity == 3

    def test_missing_variant_is_a_silent_no_op(self):
        order = _order()
        order.add_variant("var-1", quantity=1)

        order.set_variant_attributes("var-2", {"max_quantity": "3"})

        assert order.line_items[0].max_quantity is None
        assert len(order.line_items) == 1


class TestRemoveVariant:
    def test_removes_line_item_and_its_adjustments(self):
        order = _order()
        line_item = order.add_variant("var-1")
        order.add_variant("var-2")
        order.record_adjustment(
            "Packing", 1.0, originator_type=OriginatorKind.ENTERPRISE_FEE.value, line_item_id=str(line_item.id)
        )
        order.record_adjustment("Admin", 2.0, originator_type=OriginatorKind.ENTERPRISE_FEE.value)

        order.remove_variant("var-1")

        assert [li.variant_id for li in order.line_items] == ["var-2"]
        assert [a.label for a in order.adjustments] == ["Admin"]
        assert isinstance(order._events[-1], VariantRemoved)

    def test_unknown_variant_is_rejected(self):
        order = _order()

        with pytest.raises(ValidationError):
            order.remove_variant("var-1")


class TestEmpty:
    def test_removes_everything_bought_so_far(self):
        order = _order()
        order.add_variant("var-1", quantity=2)
        order.record_adjustment("Admin", 2.0, originator_type=OriginatorKind.ENTERPRISE_FEE.value)
        order.set_shipping_method("ship-1")
        order.add_payment("pm-1", 12.0)

        order.empty()

        assert order.line_items == []
        assert order.adjustments == []
        assert order.payments == []
        assert order.shipping_method_id is None
        assert order.shipment is None

    def test_keeps_distribution_context(self):
        order = _order()
        order.add_variant("var-1")

        order.empty()

        assert order.distributor_id == "dist-1"
        assert order.order_cycle_id == "oc-1"

    def test_is_idempotent(self):
        order = _order()
        order.add_variant("var-1")
        order.empty()
        order._events.clear()

        order.empty()

        assert order.line_items == []
        assert order._events == []

    def test_raises_order_emptied(self):
        order = _order()
        order.add_variant("var-1")
        order.add_variant("var-2")
        order.add_payment("pm-1", 5.0)

        order.empty()

        event = order._events[-1]
        assert isinstance(event, OrderEmptied)
        assert event.removed_line_item_count == 2
        assert event.removed_payment_count == 1
