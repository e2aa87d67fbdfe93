"""Order aggregate: an immutable purchase snapshot driven by a status state machine.

State Machine:
    PLACED → CONFIRMED → PACKED → SHIPPED → DELIVERED
    CANCELLED (from any state except DELIVERED and CANCELLED)

Every status change appends a StatusChange entry. Item, address and price
data are copied at checkout and never follow later catalog edits.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from partstore.domain import partstore
from partstore.ordering.events import OrderCancelled, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PLACED = "Placed"
    CONFIRMED = "Confirmed"
    PACKED = "Packed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "COD"
    ONLINE = "Online"


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PACKED, OrderStatus.CANCELLED},
    OrderStatus.PACKED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def order_number_for(placed_at: datetime, sequence: int) -> str:
    """ORD + YYYYMMDD + the order's 4-digit position within that day."""
    return f"ORD{placed_at:%Y%m%d}{sequence:04d}"


@partstore.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, copied from the customer's address book at checkout."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=6)
    phone = String(max_length=10)


@partstore.entity(part_of="Order")
class OrderItem:
    """A purchased line, frozen at checkout."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    part_number = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)
    image = String(max_length=1000)


@partstore.entity(part_of="Order")
class StatusChange:
    status = String(required=True, max_length=20)
    note = String(max_length=500)
    changed_at = DateTime(required=True)


@partstore.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    placed_on = String(max_length=8)  # YYYYMMDD, drives the daily sequence
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    tax_percentage = Float(default=0.0)
    shipping_charges = Float(default=0.0)
    total_amount = Float(default=0.0)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    gateway_order_id = String(max_length=100)
    paid_at = DateTime()
    order_status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    status_history = HasMany(StatusChange)
    tracking_number = String(max_length=100)
    courier_partner = String(max_length=100)
    estimated_delivery = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    cancellation_reason = String(max_length=500)
    invoice_number = String(max_length=30)
    invoice_path = String(max_length=500)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        order_number,
        items_data,
        shipping_address,
        totals,
        payment_method,
        notes=None,
        customer_name=None,
        placed_at=None,
    ):
        """Create a Placed order with a pending payment status.

        Args:
            items_data: List of dicts with product_id, name, part_number,
                        quantity, price, subtotal, image.
            shipping_address: Dict with street, city, state, pincode, phone.
            totals: ``partstore.shared.pricing.Totals`` for the items.
        """
        if payment_method not in {m.value for m in PaymentMethod}:
            raise ValidationError({"payment_method": ["Invalid payment method"]})
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = placed_at or datetime.now(UTC)
        order = cls(
            order_number=order_number,
            placed_on=f"{now:%Y%m%d}",
            customer_id=customer_id,
            shipping_address=ShippingAddress(**shipping_address),
            subtotal=totals.subtotal,
            tax=totals.tax,
            tax_percentage=totals.tax_percentage,
            shipping_charges=totals.shipping_charges,
            total_amount=totals.total_amount,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING.value,
            order_status=OrderStatus.PLACED.value,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for item in items_data:
            order.add_items(OrderItem(**item))
        order.add_status_history(
            StatusChange(status=OrderStatus.PLACED.value, note="Order placed", changed_at=now)
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                customer_name=customer_name,
                payment_method=payment_method,
                item_count=sum(i["quantity"] for i in items_data),
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def can_transition_to(self, target_status: OrderStatus) -> bool:
        return target_status in _VALID_TRANSITIONS.get(OrderStatus(self.order_status), set())

    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.order_status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"order_status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def _record_status(self, target_status, note, now):
        self.order_status = target_status.value
        self.add_status_history(StatusChange(status=target_status.value, note=note, changed_at=now))
        self.updated_at = now

    @property
    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[OrderStatus(self.order_status)]

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED.value

    # -------------------------------------------------------------------
    # Fulfillment flow
    # -------------------------------------------------------------------
    def advance_to(self, status, note=None, tracking_number=None, courier_partner=None, estimated_delivery=None):
        """Move forward along the fulfillment path. Cancellation goes through ``cancel``."""
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"order_status": ["Invalid order status"]}) from None
        if target == OrderStatus.CANCELLED:
            raise ValidationError({"order_status": ["Use cancellation to cancel an order"]})
        self._assert_can_transition(target)

        now = datetime.now(UTC)
        previous = self.order_status
        if tracking_number:
            self.tracking_number = tracking_number
        if courier_partner:
            self.courier_partner = courier_partner
        if estimated_delivery:
            self.estimated_delivery = estimated_delivery
        if target == OrderStatus.DELIVERED:
            self.delivered_at = now

        self._record_status(target, note, now)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                previous_status=previous,
                new_status=target.value,
                note=note,
                tracking_number=self.tracking_number,
                changed_at=now,
            )
        )

    def cancel(self, reason=None):
        if OrderStatus(self.order_status) in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            raise ValidationError({"order_status": [f"Cannot cancel order with status: {self.order_status}"]})

        now = datetime.now(UTC)
        previous = self.order_status
        self.cancellation_reason = reason
        self.cancelled_at = now
        self._record_status(OrderStatus.CANCELLED, reason, now)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                previous_status=previous,
                reason=reason,
                items=json.dumps([{"product_id": str(i.product_id), "quantity": i.quantity} for i in self.items]),
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def assert_online_payment_open(self):
        if self.payment_method != PaymentMethod.ONLINE.value:
            raise ValidationError({"payment_method": ["Order payment method is not online payment"]})
        if self.is_paid:
            raise ValidationError({"payment_status": ["Order already paid"]})
        if OrderStatus(self.order_status) == OrderStatus.CANCELLED:
            raise ValidationError({"order_status": ["Order is cancelled"]})

    def attach_gateway_order(self, gateway_order_id):
        self.assert_online_payment_open()
        self.gateway_order_id = gateway_order_id
        self.updated_at = datetime.now(UTC)

    def confirm_payment(self):
        """Gateway confirmed the money: payment Completed and the order Confirmed."""
        self.assert_online_payment_open()
        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.COMPLETED.value
        self.paid_at = now
        if self.can_transition_to(OrderStatus.CONFIRMED):
            self.advance_to(OrderStatus.CONFIRMED.value, note="Payment received")
        self.updated_at = now

    def fail_payment(self):
        if self.is_paid:
            raise ValidationError({"payment_status": ["Order already paid"]})
        self.payment_status = PaymentStatus.FAILED.value
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Invoice
    # -------------------------------------------------------------------
    def attach_invoice(self, invoice_number, invoice_path):
        self.invoice_number = invoice_number
        self.invoice_path = invoice_path
        self.updated_at = datetime.now(UTC)

    def mark_refunded(self):
        self.payment_status = PaymentStatus.REFUNDED.value
        self.updated_at = datetime.now(UTC)
