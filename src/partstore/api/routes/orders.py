"""FastAPI routes for orders: checkout, listings, cancellation and fulfilment."""

from datetime import date
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from protean.utils.globals import current_domain

from partstore.api.auth import current_admin, current_customer, current_principal
from partstore.api.envelope import ok, paginated
from partstore.api.schemas import CancelOrderRequest, PlaceOrderRequest, UpdateOrderStatusRequest
from partstore.api.views import order_view
from partstore.ordering.cancellation import CancelOrder
from partstore.ordering.checkout import PlaceOrder
from partstore.ordering.fulfillment import GenerateInvoice, UpdateOrderStatus
from partstore.ordering.invoice import invoice_number_for
from partstore.ordering.queries import customer_orders, get_order, list_orders

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", status_code=201)
async def place_order(body: PlaceOrderRequest, principal=Depends(current_customer)):
    order_id = current_domain.process(
        PlaceOrder(
            customer_id=principal.id,
            payment_method=body.payment_method,
            shipping_address_id=body.shipping_address_id,
            notes=body.notes,
        ),
        asynchronous=False,
    )
    return ok("Order placed successfully", {"order": order_view(get_order(order_id, principal))})


@router.get("")
async def my_orders(status: str | None = None, page: int = 1, limit: int = 10, principal=Depends(current_customer)):
    result = customer_orders(principal.id, status=status, page=page, limit=limit)
    return paginated("Orders retrieved successfully", "orders", [order_view(o) for o in result.items], result)


@router.get("/admin/all")
async def all_orders(
    status: str | None = None,
    payment_status: str | None = None,
    search: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = 1,
    limit: int = 20,
    principal=Depends(current_admin),
):
    result = list_orders(
        status=status,
        payment_status=payment_status,
        search=search,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return paginated("Orders retrieved successfully", "orders", [order_view(o) for o in result.items], result)


@router.get("/{order_id}")
async def order_detail(order_id: str, principal=Depends(current_principal)):
    return ok("Order retrieved successfully", {"order": order_view(get_order(order_id, principal))})


@router.put("/{order_id}/cancel")
async def cancel_order(order_id: str, body: CancelOrderRequest | None = None, principal=Depends(current_principal)):
    current_domain.process(
        CancelOrder(
            order_id=order_id,
            requested_by=principal.id,
            by_admin=principal.is_admin,
            reason=body.reason if body else None,
        ),
        asynchronous=False,
    )
    return ok("Order cancelled successfully", {"order": order_view(get_order(order_id, principal))})


@router.put("/{order_id}/status")
async def update_status(order_id: str, body: UpdateOrderStatusRequest, principal=Depends(current_admin)):
    current_domain.process(
        UpdateOrderStatus(
            order_id=order_id,
            status=body.order_status,
            note=body.note,
            tracking_number=body.tracking_number,
            courier_partner=body.courier_partner,
            estimated_delivery=body.estimated_delivery,
        ),
        asynchronous=False,
    )
    return ok("Order status updated successfully", {"order": order_view(get_order(order_id, principal))})


@router.get("/{order_id}/invoice")
async def download_invoice(order_id: str, principal=Depends(current_principal)):
    path = current_domain.process(
        GenerateInvoice(order_id=order_id, requested_by=principal.id, by_admin=principal.is_admin),
        asynchronous=False,
    )
    order = get_order(order_id, principal)
    return FileResponse(Path(path), media_type="text/plain", filename=f"{invoice_number_for(order)}.txt")
