"""FastAPI routes for online payment reconciliation and payment records."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from partstore.api.auth import current_admin, current_customer, current_principal
from partstore.api.envelope import ok, paginated
from partstore.api.schemas import GatewayOrderRequest, PaymentFailureRequest, VerifyPaymentRequest
from partstore.api.views import order_view, payment_view
from partstore.ordering.queries import get_order
from partstore.payments.queries import list_payments, payment_details, payment_history
from partstore.payments.reconciliation import CreateGatewayOrder, RecordPaymentFailure, VerifyPayment
from partstore.shared.errors import PaymentVerificationError

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("/create-gateway-order")
async def create_gateway_order(body: GatewayOrderRequest, principal=Depends(current_customer)):
    gateway_order = current_domain.process(
        CreateGatewayOrder(order_id=body.order_id, customer_id=principal.id),
        asynchronous=False,
    )
    return ok("Gateway order created successfully", gateway_order)


@router.post("/verify")
async def verify_payment(body: VerifyPaymentRequest, principal=Depends(current_customer)):
    verified = current_domain.process(
        VerifyPayment(
            order_id=body.order_id,
            customer_id=principal.id,
            gateway_order_id=body.gateway_order_id,
            gateway_payment_id=body.gateway_payment_id,
            signature=body.signature,
        ),
        asynchronous=False,
    )
    if not verified:
        raise PaymentVerificationError("Payment verification failed")
    return ok("Payment verified successfully", {"order": order_view(get_order(body.order_id, principal))})


@router.post("/payment-failed")
async def payment_failed(body: PaymentFailureRequest, principal=Depends(current_customer)):
    current_domain.process(
        RecordPaymentFailure(order_id=body.order_id, customer_id=principal.id, reason=body.reason),
        asynchronous=False,
    )
    return ok("Payment failure recorded", {"order": order_view(get_order(body.order_id, principal))})


@router.get("/user/history")
async def history(page: int = 1, limit: int = 10, principal=Depends(current_customer)):
    result = payment_history(principal.id, page=page, limit=limit)
    return paginated("Payment history retrieved successfully", "payments", [payment_view(p) for p in result.items], result)


@router.get("/admin/all")
async def all_payments(
    status: str | None = None,
    method: str | None = None,
    page: int = 1,
    limit: int = 20,
    principal=Depends(current_admin),
):
    result = list_payments(status=status, method=method, page=page, limit=limit)
    return paginated("Payments retrieved successfully", "payments", [payment_view(p) for p in result.items], result)


@router.get("/{order_id}")
async def details(order_id: str, principal=Depends(current_principal)):
    return ok("Payment details retrieved successfully", {"payment": payment_view(payment_details(order_id, principal))})
