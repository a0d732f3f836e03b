"""Order charges — per-order fee and tax summary view."""

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import (
    DistributionChargeUpdated,
    DistributorSet,
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderCycleSet,
    OrderEmptied,
    ShipmentCreated,
)
from ordering.order.order import Order


@ordering.projection
class OrderCharges:
    order_id = Identifier(identifier=True, required=True)
    distributor_id = Identifier()
    order_cycle_id = Identifier()
    status = String(default="Cart")
    line_item_count = Integer(default=0)
    admin_and_handling_total = Float(default=0.0)
    enterprise_fee_tax = Float(default=0.0)
    shipping_tax = Float(default=0.0)
    total_tax = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=OrderCharges, aggregates=[Order])
class OrderChargesProjector:
    @on(OrderCreated)
    def on_order_created(self, event):
        current_domain.repository_for(OrderCharges).add(
            OrderCharges(
                order_id=event.order_id,
                distributor_id=event.distributor_id,
                order_cycle_id=event.order_cycle_id,
                created_at=event.created_at,
                updated_at=event.created_at,
            )
        )

    @on(DistributorSet)
    def on_distributor_set(self, event):
        repo = current_domain.repository_for(OrderCharges)
        view = repo.get(event.order_id)
        view.distributor_id = event.distributor_id
        if event.order_cycle_cleared:
            view.order_cycle_id = None
        repo.add(view)

    @on(OrderCycleSet)
    def on_order_cycle_set(self, event):
        repo = current_domain.repository_for(OrderCharges)
        view = repo.get(event.order_id)
        view.order_cycle_id = event.order_cycle_id
        if event.distributor_cleared:
            view.distributor_id = None
        repo.add(view)

    @on(OrderEmptied)
    def on_order_emptied(self, event):
        repo = current_domain.repository_for(OrderCharges)
        view = repo.get(event.order_id)
        view.line_item_count = 0
        view.admin_and_handling_total = 0.0
        view.enterprise_fee_tax = 0.0
        view.shipping_tax = 0.0
        view.total_tax = 0.0
        repo.add(view)

    @on(DistributionChargeUpdated)
    def on_distribution_charge_updated(self, event):
        repo = current_domain.repository_for(OrderCharges)
        view = repo.get(event.order_id)
        view.line_item_count = event.line_item_count
        view.admin_and_handling_total = event.admin_and_handling_total
        view.enterprise_fee_tax = event.enterprise_fee_tax
        view.total_tax = round((view.shipping_tax or 0.0) + event.enterprise_fee_tax, 2)
        repo.add(view)

    @on(ShipmentCreated)
    def on_shipment_created(self, event):
        repo = current_domain.repository_for(OrderCharges)
        view = repo.get(event.order_id)
        view.shipping_tax = event.shipping_tax
        view.total_tax = round(event.shipping_tax + (view.enterprise_fee_tax or 0.0), 2)
        repo.add(view)

    def _update_status(self, order_id, status, updated_at=None):
        repo = current_domain.repository_for(OrderCharges)
        view = repo.get(order_id)
        view.status = status
        if updated_at:
            view.updated_at = updated_at
        repo.add(view)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        self._update_status(event.order_id, "Complete", event.completed_at)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._update_status(event.order_id, "Canceled", event.cancelled_at)
