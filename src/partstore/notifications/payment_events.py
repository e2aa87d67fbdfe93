"""Notifications react to payment outcomes."""

from protean.utils.mixins import handle

from partstore.domain import partstore
from partstore.notifications.fanout import fanout_guard, notify, push_to_user
from partstore.notifications.notification import Notification, NotificationType, Priority
from partstore.payments.events import PaymentCompleted, PaymentFailed


@partstore.event_handler(part_of=Notification, stream_category="partstore::payment")
class PaymentEventsHandler:
    @fanout_guard
    @handle(PaymentCompleted)
    def on_payment_completed(self, event: PaymentCompleted) -> None:
        data = {"order_id": str(event.order_id), "order_number": event.order_number, "amount": event.amount}
        notify(
            recipient_id=event.customer_id,
            notification_type=NotificationType.PAYMENT_SUCCESS.value,
            title="Payment successful",
            message=f"We received your payment of {event.amount:.2f} for order {event.order_number}.",
            payload=data,
        )
        push_to_user(event.customer_id, "payment_success", data)

    @fanout_guard
    @handle(PaymentFailed)
    def on_payment_failed(self, event: PaymentFailed) -> None:
        data = {
            "order_id": str(event.order_id),
            "order_number": event.order_number,
            "amount": event.amount,
            "reason": event.reason,
        }
        notify(
            recipient_id=event.customer_id,
            notification_type=NotificationType.PAYMENT_FAILED.value,
            title="Payment failed",
            message=f"Payment for order {event.order_number} failed: {event.reason}.",
            payload=data,
            priority=Priority.HIGH.value,
        )
        push_to_user(event.customer_id, "payment_failed", {"order_id": data["order_id"], "order_number": data["order_number"]})
