"""Application tests for the admin dashboard rollups."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain

from partstore.dashboard.queries import (
    customer_growth,
    daily_revenue,
    dashboard_low_stock,
    monthly_revenue,
    payment_method_stats,
    recent_orders,
    sales_by_category,
    stats,
    top_selling,
)
from partstore.ordering.cancellation import CancelOrder
from partstore.payments.reconciliation import CreateGatewayOrder, VerifyPayment
from partstore.payments.signature import compute_signature


def _pay(order_id, customer_id, payment_id="pay_001"):
    gateway_order = current_domain.process(
        CreateGatewayOrder(order_id=order_id, customer_id=customer_id), asynchronous=False
    )
    current_domain.process(
        VerifyPayment(
            order_id=order_id,
            customer_id=customer_id,
            gateway_order_id=gateway_order["gateway_order_id"],
            gateway_payment_id=payment_id,
            signature=compute_signature(gateway_order["gateway_order_id"], payment_id),
        ),
        asynchronous=False,
    )


@pytest.fixture
def shop(register_customer, add_product, checkout):
    """One paid online order, one unpaid COD order, one cancelled COD order."""
    alice = register_customer(email="alice@example.com")
    bob = register_customer(email="bob@example.com")
    oil = add_product(name="Oil Filter", price=100.0, stock=20, category="Engine")
    pads = add_product(name="Brake Pads", price=200.0, stock=20, category="Brake")

    paid = checkout(alice, [(oil, 2)], payment_method="Online")
    _pay(paid, alice)
    cod = checkout(bob, [(pads, 1)], payment_method="COD")
    cancelled = checkout(bob, [(oil, 5)], payment_method="COD")
    current_domain.process(CancelOrder(order_id=cancelled, requested_by=bob), asynchronous=False)

    return {"alice": alice, "bob": bob, "oil": oil, "pads": pads, "paid": paid, "cod": cod}


class TestStats:
    def test_counts_and_revenue(self, shop):
        result = stats()

        assert result["total_orders"] == 3
        assert result["total_customers"] == 2
        # 200 subtotal + 18% tax + 100 shipping
        assert result["total_revenue"] == 336.0
        assert result["today_revenue"] == 336.0
        assert result["today_orders"] == 3
        assert result["orders_by_status"] == {"Confirmed": 1, "Placed": 1, "Cancelled": 1}
        assert result["pending_orders"] == 2

    def test_cash_on_delivery_not_counted_as_revenue(self, register_customer, add_product, checkout):
        checkout(register_customer(), [(add_product(), 1)], payment_method="COD")
        assert stats()["total_revenue"] == 0

    def test_today_is_relative_to_now(self, shop):
        tomorrow = datetime.now(UTC) + timedelta(days=1)
        result = stats(now=tomorrow)
        assert result["today_orders"] == 0
        assert result["today_revenue"] == 0

    def test_empty_store(self):
        result = stats()
        assert result["total_orders"] == 0
        assert result["total_revenue"] == 0
        assert result["orders_by_status"] == {}


class TestRevenueSeries:
    def test_monthly_has_twelve_months(self, shop):
        now = datetime.now(UTC)
        result = monthly_revenue(now.year)

        assert result["year"] == now.year
        assert [row["month"] for row in result["data"]] == list(range(1, 13))
        this_month = result["data"][now.month - 1]
        assert this_month["revenue"] == 336.0
        assert this_month["orders"] == 1
        assert this_month["month_name"] == now.strftime("%b")

    def test_monthly_other_year_is_zero(self, shop):
        result = monthly_revenue(datetime.now(UTC).year - 1)
        assert all(row["revenue"] == 0 for row in result["data"])

    def test_daily(self, shop):
        [today] = daily_revenue(days=7)
        assert today["date"] == f"{datetime.now(UTC):%Y-%m-%d}"
        assert today["revenue"] == 336.0
        assert today["orders"] == 1

    def test_daily_window(self, shop):
        assert daily_revenue(days=7, now=datetime.now(UTC) + timedelta(days=10)) == []


class TestSales:
    def test_by_category_ignores_cancelled(self, shop):
        rows = {row["category"]: row for row in sales_by_category()}
        assert rows["Engine"]["total_sales"] == 2
        assert rows["Engine"]["total_revenue"] == 200.0
        assert rows["Brake"]["total_sales"] == 1
        assert rows["Brake"]["total_revenue"] == 200.0

    def test_top_selling_uses_live_sales(self, shop):
        # Cancelling handed the five oil filters back
        top = top_selling(limit=2)
        assert [p.name for p in top] == ["Oil Filter", "Brake Pads"]
        assert top[0].total_sales == 2

    def test_payment_methods_count_completed_only(self, shop):
        assert payment_method_stats() == [{"payment_method": "Online", "count": 1, "total_amount": 336.0}]


class TestCatalogueAndCustomers:
    def test_low_stock(self, add_product):
        add_product(name="Spark Plug", stock=2)
        add_product(name="Clutch Plate", stock=50)
        assert [p.name for p in dashboard_low_stock()] == ["Spark Plug"]

    def test_recent_orders_newest_first(self, shop):
        orders = recent_orders(limit=2)
        assert len(orders) == 2
        assert orders[0].created_at >= orders[1].created_at

    def test_customer_growth(self, shop):
        now = datetime.now(UTC)
        assert customer_growth(months=6) == [{"year": now.year, "month": now.month, "new_customers": 2}]
