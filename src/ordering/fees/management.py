"""Enterprise fee management — command and handler."""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.fees.enterprise_fee import EnterpriseFee, FeeApplication, FeeType
from ordering.shared.calculator import Calculator, CalculatorKind


@ordering.command(part_of="EnterpriseFee")
class CreateEnterpriseFee:
    enterprise_id = Identifier()
    name = String(required=True, max_length=255)
    fee_type = String(max_length=50, default=FeeType.ADMIN.value)
    application = String(max_length=20, default=FeeApplication.PER_ORDER.value)
    calculator_kind = String(max_length=50, default=CalculatorKind.FLAT_RATE.value)
    amount = Float(default=0.0)
    tax_rate = Float(default=0.0)


@ordering.command_handler(part_of=EnterpriseFee)
class ManageEnterpriseFeeHandler:
    @handle(CreateEnterpriseFee)
    def create_enterprise_fee(self, command):
        fee = EnterpriseFee(
            enterprise_id=command.enterprise_id,
            name=command.name,
            fee_type=command.fee_type,
            application=command.application,
            calculator=Calculator(kind=command.calculator_kind, amount=command.amount or 0.0),
            tax_rate=command.tax_rate or 0.0,
        )
        current_domain.repository_for(EnterpriseFee).add(fee)
        return str(fee.id)
