"""Admin-driven fulfilment: status updates and invoices."""

from pathlib import Path

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Identifier, String
from protean.utils.globals import current_domain

from partstore.domain import partstore
from partstore.identity.customer import Customer
from partstore.ordering.cancellation import cancel
from partstore.ordering.invoice import write_invoice
from partstore.ordering.order import Order, OrderStatus
from partstore.shared.errors import AuthorizationError

logger = structlog.get_logger(__name__)


@partstore.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    note = String(max_length=500)
    tracking_number = String(max_length=100)
    courier_partner = String(max_length=100)
    estimated_delivery = DateTime()


@partstore.command(part_of="Order")
class GenerateInvoice:
    """Write the invoice if the order has none yet; returns its path."""

    order_id = Identifier(required=True)
    requested_by = Identifier()
    by_admin = Boolean(default=False)


def _ensure_invoice(order):
    if order.invoice_path and Path(order.invoice_path).exists():
        return order.invoice_path

    customer = current_domain.repository_for(Customer).get(order.customer_id)
    number, path = write_invoice(order, customer)
    order.attach_invoice(number, path)
    logger.info("invoice_generated", order_number=order.order_number, path=path)
    return path


@partstore.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command: UpdateOrderStatus):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if command.status == OrderStatus.CANCELLED.value:
            cancel(order, command.note or "Cancelled by admin")
            return str(order.id)

        order.advance_to(
            command.status,
            note=command.note,
            tracking_number=command.tracking_number,
            courier_partner=command.courier_partner,
            estimated_delivery=command.estimated_delivery,
        )
        if order.order_status == OrderStatus.DELIVERED.value:
            try:
                _ensure_invoice(order)
            except OSError as exc:
                logger.error("invoice_generation_failed", order_number=order.order_number, error=str(exc))

        repo.add(order)
        logger.info("order_status_updated", order_number=order.order_number, status=order.order_status)
        return str(order.id)

    @handle(GenerateInvoice)
    def generate_invoice(self, command: GenerateInvoice):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if not command.by_admin and str(order.customer_id) != str(command.requested_by):
            raise AuthorizationError("Not authorized")

        path = _ensure_invoice(order)
        repo.add(order)
        return path
