"""Admin dashboard rollups.

Revenue counts completed payments only, dated by ``paid_at``. Everything is
computed from the aggregates at request time; there are no projections.
"""

import calendar
from collections import Counter, defaultdict
from datetime import UTC, datetime, timedelta

from partstore.catalogue.product import Product
from partstore.catalogue.queries import low_stock_products
from partstore.identity.customer import Customer
from partstore.ordering.order import Order, OrderStatus
from partstore.payments.payment import Payment, PaymentRecordStatus
from partstore.shared.queries import as_utc, fetch_all, newest_first

PENDING_STATUSES = (OrderStatus.PLACED.value, OrderStatus.CONFIRMED.value, OrderStatus.PACKED.value)


def _completed_payments() -> list:
    return [p for p in fetch_all(Payment, status=PaymentRecordStatus.COMPLETED.value) if p.paid_at is not None]


def _start_of_today(now=None) -> datetime:
    now = now or datetime.now(UTC)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def stats(now=None) -> dict:
    orders = fetch_all(Order)
    payments = _completed_payments()
    today = _start_of_today(now)

    return {
        "total_orders": len(orders),
        "total_revenue": round(sum(p.amount for p in payments), 2),
        "total_customers": len(fetch_all(Customer)),
        "pending_orders": sum(1 for o in orders if o.order_status in PENDING_STATUSES),
        "low_stock_count": len(low_stock_products()),
        "today_orders": sum(1 for o in orders if o.created_at and as_utc(o.created_at) >= today),
        "today_revenue": round(sum(p.amount for p in payments if as_utc(p.paid_at) >= today), 2),
        "orders_by_status": dict(Counter(o.order_status for o in orders)),
    }


def monthly_revenue(year: int | None = None) -> dict:
    """Twelve entries, months with no sales included as zero."""
    year = year or datetime.now(UTC).year
    revenue = defaultdict(float)
    counts = Counter()
    for payment in _completed_payments():
        paid_at = as_utc(payment.paid_at)
        if paid_at.year == year:
            revenue[paid_at.month] += payment.amount
            counts[paid_at.month] += 1

    return {
        "year": year,
        "data": [
            {
                "month": month,
                "month_name": calendar.month_abbr[month],
                "revenue": round(revenue[month], 2),
                "orders": counts[month],
            }
            for month in range(1, 13)
        ],
    }


def daily_revenue(days: int = 30, now=None) -> list[dict]:
    since = (now or datetime.now(UTC)) - timedelta(days=days)
    revenue = defaultdict(float)
    counts = Counter()
    for payment in _completed_payments():
        paid_at = as_utc(payment.paid_at)
        if paid_at >= since:
            day = f"{paid_at:%Y-%m-%d}"
            revenue[day] += payment.amount
            counts[day] += 1

    return [{"date": day, "revenue": round(revenue[day], 2), "orders": counts[day]} for day in sorted(revenue)]


def recent_orders(limit: int = 10) -> list:
    return newest_first(fetch_all(Order))[:limit]


def dashboard_low_stock(limit: int = 20) -> list:
    return [p for p in low_stock_products() if p.is_active][:limit]


def top_selling(limit: int = 10) -> list:
    products = [p for p in fetch_all(Product, is_deleted=False) if p.is_active]
    products.sort(key=lambda p: p.total_sales or 0, reverse=True)
    return products[:limit]


def sales_by_category() -> list[dict]:
    """Units and revenue per catalogue category, ignoring cancelled orders."""
    categories = {str(p.id): p.category for p in fetch_all(Product)}
    units = Counter()
    revenue = defaultdict(float)
    for order in fetch_all(Order):
        if order.order_status == OrderStatus.CANCELLED.value:
            continue
        for item in order.items:
            category = categories.get(str(item.product_id))
            if category is None:
                continue
            units[category] += item.quantity
            revenue[category] += item.subtotal

    rows = [
        {"category": category, "total_sales": units[category], "total_revenue": round(revenue[category], 2)}
        for category in units
    ]
    return sorted(rows, key=lambda row: row["total_revenue"], reverse=True)


def customer_growth(months: int = 6, now=None) -> list[dict]:
    now = now or datetime.now(UTC)
    # Walk back month by month from the current one
    year, month = now.year, now.month - months
    while month <= 0:
        month += 12
        year -= 1
    since = now.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)

    signups = Counter()
    for customer in fetch_all(Customer):
        created = as_utc(customer.created_at)
        if created is not None and created >= since:
            signups[(created.year, created.month)] += 1

    return [
        {"year": year, "month": month, "new_customers": count} for (year, month), count in sorted(signups.items())
    ]


def payment_method_stats() -> list[dict]:
    counts = Counter()
    totals = defaultdict(float)
    for payment in _completed_payments():
        counts[payment.payment_method] += 1
        totals[payment.payment_method] += payment.amount
    return [
        {"payment_method": method, "count": counts[method], "total_amount": round(totals[method], 2)}
        for method in sorted(counts)
    ]
