"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from partstore.domain import partstore


@partstore.event(part_of="Order")
class OrderPlaced:
    """Checkout committed: stock is taken and a pending payment exists."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    customer_name = String()
    payment_method = String(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@partstore.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along Placed → Confirmed → Packed → Shipped → Delivered."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    note = String(max_length=500)
    tracking_number = String(max_length=100)
    changed_at = DateTime(required=True)


@partstore.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled and its stock handed back."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String(max_length=500)
    items = Text()  # JSON: [{product_id, quantity}]
    cancelled_at = DateTime(required=True)

