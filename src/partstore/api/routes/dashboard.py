"""FastAPI routes for the admin dashboard."""

from fastapi import APIRouter, Depends

from partstore.api.auth import current_admin
from partstore.api.envelope import ok
from partstore.api.views import order_view, product_view
from partstore.dashboard import queries
from partstore.realtime import get_channel

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"], dependencies=[Depends(current_admin)])


@router.get("/stats")
async def stats():
    return ok("Dashboard stats retrieved successfully", {"stats": queries.stats()})


@router.get("/revenue/monthly")
async def monthly_revenue(year: int | None = None):
    return ok("Monthly revenue retrieved successfully", queries.monthly_revenue(year))


@router.get("/revenue/daily")
async def daily_revenue(days: int = 30):
    return ok("Daily revenue retrieved successfully", {"data": queries.daily_revenue(days)})


@router.get("/orders/recent")
async def recent_orders(limit: int = 10):
    return ok("Recent orders retrieved successfully", {"orders": [order_view(o) for o in queries.recent_orders(limit)]})


@router.get("/products/low-stock")
async def low_stock():
    products = queries.dashboard_low_stock()
    return ok(
        "Low stock products retrieved successfully",
        {"products": [product_view(p) for p in products], "count": len(products)},
    )


@router.get("/products/top-selling")
async def top_selling(limit: int = 10):
    return ok(
        "Top selling products retrieved successfully",
        {"products": [product_view(p) for p in queries.top_selling(limit)]},
    )


@router.get("/sales/by-category")
async def sales_by_category():
    return ok("Sales by category retrieved successfully", {"data": queries.sales_by_category()})


@router.get("/customers/growth")
async def customer_growth(months: int = 6):
    return ok("Customer growth retrieved successfully", {"data": queries.customer_growth(months)})


@router.get("/payments/methods")
async def payment_methods():
    return ok("Payment method statistics retrieved successfully", {"data": queries.payment_method_stats()})


@router.get("/realtime")
async def realtime_stats():
    return ok("Connection stats retrieved successfully", get_channel().stats())
