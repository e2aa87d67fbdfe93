"""Admins are told when an order drains a product to low or zero stock."""

from protean.utils.mixins import handle

from partstore.catalogue.events import StockRunningLow
from partstore.catalogue.product import StockStatus
from partstore.domain import partstore
from partstore.notifications.fanout import fanout_guard, notify_admins
from partstore.notifications.notification import Notification, NotificationType, Priority


@partstore.event_handler(part_of=Notification, stream_category="partstore::product")
class CatalogueEventsHandler:
    @fanout_guard
    @handle(StockRunningLow)
    def on_stock_running_low(self, event: StockRunningLow) -> None:
        payload = {"product_id": str(event.product_id), "part_number": event.part_number, "stock": event.stock}
        if event.stock_status == StockStatus.OUT_OF_STOCK.value:
            notify_admins(
                NotificationType.OUT_OF_STOCK.value,
                title="Product out of stock",
                message=f"{event.name} ({event.part_number}) is out of stock.",
                payload=payload,
                priority=Priority.HIGH.value,
            )
        else:
            notify_admins(
                NotificationType.LOW_STOCK.value,
                title="Low stock alert",
                message=f"{event.name} ({event.part_number}) has only {event.stock} left in stock.",
                payload=payload,
            )
