"""Checkout: turn a customer's cart into an order in one unit of work.

Every product line is re-read and validated before anything is written, then
stock is taken, the order and its pending payment are created and the cart is
emptied. An exception anywhere rolls the whole unit of work back.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from partstore.cart.cart import Cart
from partstore.cart.items import cart_for
from partstore.catalogue.product import Product
from partstore.domain import partstore
from partstore.identity.customer import Customer
from partstore.ordering.order import Order, PaymentMethod, order_number_for
from partstore.payments.payment import Payment
from partstore.shared.pricing import calculate_totals
from partstore.shared.queries import fetch_all

logger = structlog.get_logger(__name__)


@partstore.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    payment_method = String(required=True, max_length=20)
    shipping_address_id = Identifier()
    notes = Text()


def next_order_number(placed_at: datetime) -> str:
    placed_on = f"{placed_at:%Y%m%d}"
    return order_number_for(placed_at, len(fetch_all(Order, placed_on=placed_on)) + 1)


def _load_lines(cart):
    """Pair every cart line with its product, failing before any write."""
    repo = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        try:
            product = repo.get(item.product_id)
        except ObjectNotFoundError:
            raise ValidationError({"product": ["A product in your cart is no longer available"]}) from None
        product.ensure_can_supply(item.quantity)
        lines.append((item, product))
    return lines


@partstore.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command: PlaceOrder):
        if command.payment_method not in {m.value for m in PaymentMethod}:
            raise ValidationError({"payment_method": ["Please provide a valid payment method"]})

        customer = current_domain.repository_for(Customer).get(command.customer_id)
        address = customer.shipping_address(command.shipping_address_id)
        if address is None:
            raise ValidationError({"shipping_address": ["Please provide a shipping address"]})

        cart = cart_for(customer.id)
        if cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        lines = _load_lines(cart)

        product_repo = current_domain.repository_for(Product)
        items_data = []
        for item, product in lines:
            product.reserve(item.quantity)
            product_repo.add(product)
            items_data.append(
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "part_number": product.part_number,
                    "quantity": item.quantity,
                    "price": product.final_price,
                    "subtotal": round(product.final_price * item.quantity, 2),
                    "image": product.primary_image_url(),
                }
            )

        placed_at = datetime.now(UTC)
        totals = calculate_totals(sum(line["subtotal"] for line in items_data))
        order = Order.place(
            customer_id=str(customer.id),
            order_number=next_order_number(placed_at),
            items_data=items_data,
            shipping_address={
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "pincode": address.pincode,
                "phone": customer.phone,
            },
            totals=totals,
            payment_method=command.payment_method,
            notes=command.notes,
            customer_name=customer.name,
            placed_at=placed_at,
        )
        current_domain.repository_for(Order).add(order)

        payment = Payment.open_for(
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(customer.id),
            amount=order.total_amount,
            payment_method=order.payment_method,
        )
        current_domain.repository_for(Payment).add(payment)

        cart.clear()
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "order_placed",
            order_number=order.order_number,
            customer_id=str(customer.id),
            items=len(items_data),
            total_amount=order.total_amount,
        )
        return str(order.id)
