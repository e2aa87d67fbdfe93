"""Typed notification payloads, one model per notification type.

Each notification type carries exactly one payload shape; unknown keys are
rejected so a handler cannot quietly attach data a client will never read.
"""

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from protean.exceptions import ValidationError


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")


class OrderPayload(_Payload):
    order_id: str
    order_number: str
    status: str | None = None
    total_amount: float | None = None


class PaymentPayload(_Payload):
    order_id: str
    order_number: str
    amount: float | None = None
    reason: str | None = None


class StockPayload(_Payload):
    product_id: str
    part_number: str
    stock: int


class GeneralPayload(_Payload):
    pass


PAYLOAD_TYPES: dict[str, type[_Payload]] = {
    "order_placed": OrderPayload,
    "new_order": OrderPayload,
    "order_confirmed": OrderPayload,
    "order_packed": OrderPayload,
    "order_shipped": OrderPayload,
    "order_delivered": OrderPayload,
    "order_cancelled": OrderPayload,
    "payment_success": PaymentPayload,
    "payment_failed": PaymentPayload,
    "low_stock": StockPayload,
    "out_of_stock": StockPayload,
    "general": GeneralPayload,
}


def validate_payload(notification_type: str, data: dict | None) -> dict:
    """Check ``data`` against the payload model for ``notification_type``."""
    model = PAYLOAD_TYPES.get(notification_type)
    if model is None:
        raise ValidationError({"type": [f"Unknown notification type: {notification_type}"]})
    try:
        return model.model_validate(data or {}).model_dump(exclude_none=True)
    except PydanticValidationError as exc:
        messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
        raise ValidationError({"payload": messages}) from None
