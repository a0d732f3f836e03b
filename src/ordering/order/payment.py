"""Order payments — command and handler.

Only records which payment method the customer chose; capture happens in the
payments service.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from ordering.distribution.payment_method import PaymentMethod
from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class AddPayment:
    order_id = Identifier(required=True)
    payment_method_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)


@ordering.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(AddPayment)
    def add_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        payment_method = current_domain.repository_for(PaymentMethod).get(command.payment_method_id)

        if not order.available_payment_methods([payment_method]):
            raise ValidationError({"payment_method_id": ["Payment method is not available for this order"]})

        payment = order.add_payment(payment_method_id=command.payment_method_id, amount=command.amount)
        repo.add(order)
        return str(payment.id)
