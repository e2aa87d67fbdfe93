"""Read side for orders."""

from datetime import UTC, date, datetime, time

from protean.utils.globals import current_domain

from partstore.ordering.order import Order
from partstore.shared.errors import AuthorizationError
from partstore.shared.queries import Page, as_utc, fetch_all, newest_first, paginate


def get_order(order_id, principal) -> Order:
    order = current_domain.repository_for(Order).get(order_id)
    if not principal.is_admin and str(order.customer_id) != principal.id:
        raise AuthorizationError("Not authorized to access this order")
    return order


def customer_orders(customer_id, status=None, page=1, limit=10) -> Page:
    filters = {"customer_id": str(customer_id)}
    if status:
        filters["order_status"] = status
    return paginate(newest_first(fetch_all(Order, **filters)), page, limit)


def _as_datetime(value, end_of_day=False):
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.max if end_of_day else time.min, tzinfo=UTC)
    return datetime.fromisoformat(value)


def list_orders(
    status=None,
    payment_status=None,
    search=None,
    start_date=None,
    end_date=None,
    page=1,
    limit=20,
) -> Page:
    """Admin view of every order; ``search`` matches the order number."""
    filters = {}
    if status:
        filters["order_status"] = status
    if payment_status:
        filters["payment_status"] = payment_status
    orders = fetch_all(Order, **filters)

    if search:
        needle = search.strip().lower()
        orders = [o for o in orders if needle in o.order_number.lower()]

    start = _as_datetime(start_date)
    end = _as_datetime(end_date, end_of_day=True)
    if start is not None:
        orders = [o for o in orders if o.created_at and as_utc(o.created_at) >= as_utc(start)]
    if end is not None:
        orders = [o for o in orders if o.created_at and as_utc(o.created_at) <= as_utc(end)]

    return paginate(newest_first(orders), page, limit)
