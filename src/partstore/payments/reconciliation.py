"""Online payment reconciliation: open a gateway order, then verify or fail it.

The order and its payment record always move together, so every handler here
loads both and persists both inside the same unit of work.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from partstore import config
from partstore.domain import partstore
from partstore.ordering.order import Order
from partstore.payments.gateway import get_gateway
from partstore.payments.payment import DEFAULT_FAILURE_REASON, SIGNATURE_MISMATCH, Payment
from partstore.payments.signature import signature_matches
from partstore.shared.errors import AuthorizationError
from partstore.shared.queries import fetch_one

logger = structlog.get_logger(__name__)


@partstore.command(part_of="Payment")
class CreateGatewayOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@partstore.command(part_of="Payment")
class VerifyPayment:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    gateway_order_id = String(required=True, max_length=100)
    gateway_payment_id = String(required=True, max_length=100)
    signature = String(required=True, max_length=256)


@partstore.command(part_of="Payment")
class RecordPaymentFailure:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason = String(max_length=500)


def owned_order(order_id, customer_id) -> Order:
    order = current_domain.repository_for(Order).get(order_id)
    if str(order.customer_id) != str(customer_id):
        raise AuthorizationError("Not authorized")
    return order


def payment_for(order_id) -> Payment:
    payment = fetch_one(Payment, order_id=str(order_id))
    if payment is None:
        raise ObjectNotFoundError("Payment not found")
    return payment


@partstore.command_handler(part_of=Payment)
class PaymentReconciliationHandler:
    @handle(CreateGatewayOrder)
    def create_gateway_order(self, command: CreateGatewayOrder):
        order = owned_order(command.order_id, command.customer_id)
        payment = payment_for(order.id)
        order.assert_online_payment_open()

        gateway_order = get_gateway().create_order(
            amount=payment.amount_in_minor_units,
            currency=config.payment_currency(),
            receipt=order.order_number,
            notes={"order_id": str(order.id), "customer_id": str(order.customer_id)},
        )
        order.attach_gateway_order(gateway_order.id)
        payment.attach_gateway_order(gateway_order.id)
        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(Payment).add(payment)

        logger.info("gateway_order_created", order_number=order.order_number, gateway_order_id=gateway_order.id)
        return {
            "gateway_order_id": gateway_order.id,
            "amount": gateway_order.amount,
            "currency": gateway_order.currency,
            "key_id": config.payment_gateway_key_id(),
        }

    @handle(VerifyPayment)
    def verify(self, command: VerifyPayment) -> bool:
        """Returns False on a signature mismatch after persisting the failure.

        The caller turns False into an error response; raising here would roll
        back the Failed status along with everything else.
        """
        order = owned_order(command.order_id, command.customer_id)
        payment = payment_for(order.id)

        if not signature_matches(command.gateway_order_id, command.gateway_payment_id, command.signature):
            order.fail_payment()
            payment.fail(
                reason=SIGNATURE_MISMATCH,
                gateway_payment_id=command.gateway_payment_id,
                signature=command.signature,
            )
            current_domain.repository_for(Order).add(order)
            current_domain.repository_for(Payment).add(payment)
            logger.warning("payment_signature_mismatch", order_number=order.order_number)
            return False

        order.gateway_order_id = command.gateway_order_id
        order.confirm_payment()
        payment.complete(command.gateway_order_id, command.gateway_payment_id, command.signature)
        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(Payment).add(payment)

        logger.info("payment_verified", order_number=order.order_number, transaction_id=command.gateway_payment_id)
        return True

    @handle(RecordPaymentFailure)
    def record_failure(self, command: RecordPaymentFailure):
        order = owned_order(command.order_id, command.customer_id)
        payment = payment_for(order.id)

        order.fail_payment()
        payment.fail(reason=command.reason or DEFAULT_FAILURE_REASON)
        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(Payment).add(payment)

        logger.info("payment_failure_recorded", order_number=order.order_number, reason=payment.failure_reason)
        return str(order.id)
