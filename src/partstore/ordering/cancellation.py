"""Order cancellation: status change, stock restore and refund together.

Cancelling hands every line's stock back to the catalogue and, when an online
payment was already captured, refunds it through the gateway. All of it runs
in the command's unit of work, so a failed refund leaves the order untouched.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from partstore.catalogue.product import Product
from partstore.domain import partstore
from partstore.ordering.order import Order
from partstore.payments.gateway import get_gateway
from partstore.payments.payment import Payment, PaymentRecordStatus
from partstore.shared.errors import AuthorizationError, PaymentGatewayError
from partstore.shared.queries import fetch_one

logger = structlog.get_logger(__name__)


@partstore.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    by_admin = Boolean(default=False)
    reason = String(max_length=500)


def _restore_stock(order):
    repo = current_domain.repository_for(Product)
    for item in order.items:
        product = repo.get(item.product_id)
        product.restore(item.quantity)
        repo.add(product)


def _refund(order, reason):
    payment = fetch_one(Payment, order_id=str(order.id))
    if payment is None or payment.status != PaymentRecordStatus.COMPLETED.value:
        return

    result = get_gateway().create_refund(
        gateway_payment_id=payment.gateway_payment_id,
        amount=payment.amount_in_minor_units,
        reason=reason or "Order cancelled",
    )
    if not result.success:
        logger.error("refund_failed", order_number=order.order_number, reason=result.failure_reason)
        raise PaymentGatewayError(f"Refund failed: {result.failure_reason}")

    payment.record_refund(result.gateway_refund_id)
    current_domain.repository_for(Payment).add(payment)
    order.mark_refunded()


def cancel(order, reason=None):
    """Cancel ``order`` and settle its side effects in the current unit of work."""
    was_paid = order.is_paid
    order.cancel(reason)
    _restore_stock(order)
    if was_paid:
        _refund(order, reason)
    current_domain.repository_for(Order).add(order)
    logger.info("order_cancelled", order_number=order.order_number, refunded=was_paid)


@partstore.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command: CancelOrder):
        order = current_domain.repository_for(Order).get(command.order_id)
        if not command.by_admin and str(order.customer_id) != str(command.requested_by):
            raise AuthorizationError("Not authorized to cancel this order")

        cancel(order, command.reason)
        return str(order.id)
