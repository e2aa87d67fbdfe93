"""Notifications react to order lifecycle events.

Customers hear about their own order at every step; admins hear about new
and cancelled orders.
"""

import structlog
from protean.utils.mixins import handle

from partstore.domain import partstore
from partstore.notifications.fanout import fanout_guard, notify, notify_admins, push_to_admins, push_to_user
from partstore.notifications.notification import Notification, NotificationType, Priority
from partstore.ordering.events import OrderCancelled, OrderPlaced, OrderStatusChanged

logger = structlog.get_logger(__name__)

_STATUS_NOTIFICATIONS = {
    "Confirmed": (NotificationType.ORDER_CONFIRMED, "Order confirmed", "Your order {number} has been confirmed."),
    "Packed": (NotificationType.ORDER_PACKED, "Order packed", "Your order {number} has been packed."),
    "Shipped": (NotificationType.ORDER_SHIPPED, "Order shipped", "Your order {number} is on its way."),
    "Delivered": (NotificationType.ORDER_DELIVERED, "Order delivered", "Your order {number} has been delivered."),
}


@partstore.event_handler(part_of=Notification, stream_category="partstore::order")
class OrderingEventsHandler:
    @fanout_guard
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        payload = {
            "order_id": str(event.order_id),
            "order_number": event.order_number,
            "status": "Placed",
            "total_amount": event.total_amount,
        }
        notify(
            recipient_id=event.customer_id,
            notification_type=NotificationType.ORDER_PLACED.value,
            title="Order placed",
            message=f"Your order {event.order_number} has been placed successfully.",
            payload=payload,
        )
        push_to_user(
            event.customer_id,
            "order_placed",
            {"order_id": str(event.order_id), "order_number": event.order_number, "total_amount": event.total_amount},
        )

        customer = event.customer_name or "A customer"
        notify_admins(
            NotificationType.NEW_ORDER.value,
            title="New order received",
            message=f"{customer} placed order {event.order_number} ({event.item_count} items).",
            payload=payload,
            priority=Priority.HIGH.value,
        )
        push_to_admins(
            "new_order",
            {
                "order_id": str(event.order_id),
                "order_number": event.order_number,
                "customer_name": event.customer_name,
                "total_amount": event.total_amount,
            },
        )

    @fanout_guard
    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        push_to_user(
            event.customer_id,
            "order_status_updated",
            {
                "order_id": str(event.order_id),
                "order_number": event.order_number,
                "order_status": event.new_status,
                "tracking_number": event.tracking_number,
            },
        )

        template = _STATUS_NOTIFICATIONS.get(event.new_status)
        if template is None:
            logger.debug("no_notification_for_status", status=event.new_status)
            return
        notification_type, title, message = template
        notify(
            recipient_id=event.customer_id,
            notification_type=notification_type.value,
            title=title,
            message=message.format(number=event.order_number),
            payload={"order_id": str(event.order_id), "order_number": event.order_number, "status": event.new_status},
        )

    @fanout_guard
    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        data = {"order_id": str(event.order_id), "order_number": event.order_number}
        payload = {**data, "status": "Cancelled"}
        notify(
            recipient_id=event.customer_id,
            notification_type=NotificationType.ORDER_CANCELLED.value,
            title="Order cancelled",
            message=f"Your order {event.order_number} has been cancelled.",
            payload=payload,
        )
        push_to_user(event.customer_id, "order_cancelled", data)

        notify_admins(
            NotificationType.ORDER_CANCELLED.value,
            title="Order cancelled",
            message=f"Order {event.order_number} was cancelled.",
            payload=payload,
        )
        push_to_admins("order_cancelled", data)
