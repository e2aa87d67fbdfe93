"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from partstore.domain import partstore


@partstore.event(part_of="Payment")
class PaymentCompleted:
    """The gateway confirmed the payment with a valid signature."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    amount = Float(required=True)
    transaction_id = String(required=True)
    paid_at = DateTime(required=True)


@partstore.event(part_of="Payment")
class PaymentFailed:
    """The payment failed, either reported by the gateway or on signature mismatch."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    amount = Float(required=True)
    reason = String(required=True, max_length=500)
    failed_at = DateTime(required=True)


@partstore.event(part_of="Payment")
class PaymentRefunded:
    """Money for a cancelled, already-paid order went back to the customer."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    refund_id = String(required=True)
    amount = Float(required=True)
    refunded_at = DateTime(required=True)
