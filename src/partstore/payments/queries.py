"""Read side for payment records."""

from protean.exceptions import ObjectNotFoundError

from partstore.payments.payment import Payment
from partstore.shared.errors import AuthorizationError
from partstore.shared.queries import Page, fetch_all, fetch_one, newest_first, paginate


def payment_details(order_id, principal) -> Payment:
    """Owners see their own payment; admins see any."""
    payment = fetch_one(Payment, order_id=str(order_id))
    if payment is None:
        raise ObjectNotFoundError("Payment not found")
    if not principal.is_admin and str(payment.customer_id) != principal.id:
        raise AuthorizationError("Not authorized")
    return payment


def payment_history(customer_id, page=1, limit=10) -> Page:
    return paginate(newest_first(fetch_all(Payment, customer_id=str(customer_id))), page, limit)


def list_payments(status=None, method=None, page=1, limit=20) -> Page:
    filters = {}
    if status:
        filters["status"] = status
    if method:
        filters["payment_method"] = method
    return paginate(newest_first(fetch_all(Payment, **filters)), page, limit)
