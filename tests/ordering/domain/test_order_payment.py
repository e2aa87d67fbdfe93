"""Tests for the payment side of the Order aggregate."""

import pytest
from protean.exceptions import ValidationError

from partstore.ordering.order import Order, OrderStatus, PaymentStatus
from partstore.shared.pricing import calculate_totals


def _make_order(payment_method="Online"):
    return Order.place(
        customer_id="cust-001",
        order_number="ORD202601150001",
        items_data=[
            {
                "product_id": "prod-001",
                "name": "Radiator Cap",
                "part_number": "HY-25330",
                "quantity": 1,
                "price": 150.0,
                "subtotal": 150.0,
            }
        ],
        shipping_address={"street": "5 Park St", "city": "Kolkata", "state": "West Bengal", "pincode": "700016"},
        totals=calculate_totals(150.0),
        payment_method=payment_method,
    )


class TestConfirmPayment:
    def test_confirms_placed_order(self):
        order = _make_order()
        order.confirm_payment()
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert order.paid_at is not None
        assert order.order_status == OrderStatus.CONFIRMED.value
        assert order.status_history[-1].note == "Payment received"

    def test_already_paid(self):
        order = _make_order()
        order.confirm_payment()
        with pytest.raises(ValidationError):
            order.confirm_payment()

    def test_cash_on_delivery_is_not_online(self):
        order = _make_order(payment_method="COD")
        with pytest.raises(ValidationError):
            order.assert_online_payment_open()

    def test_cancelled_order_cannot_take_payment(self):
        order = _make_order()
        order.cancel()
        with pytest.raises(ValidationError):
            order.confirm_payment()


class TestFailPayment:
    def test_marks_failed(self):
        order = _make_order()
        order.fail_payment()
        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.order_status == OrderStatus.PLACED.value

    def test_retry_after_failure(self):
        order = _make_order()
        order.fail_payment()
        order.confirm_payment()
        assert order.is_paid

    def test_paid_order_cannot_fail(self):
        order = _make_order()
        order.confirm_payment()
        with pytest.raises(ValidationError):
            order.fail_payment()


class TestGatewayOrderAndRefund:
    def test_attach_gateway_order(self):
        order = _make_order()
        order.attach_gateway_order("order_gw_1")
        assert order.gateway_order_id == "order_gw_1"

    def test_mark_refunded(self):
        order = _make_order()
        order.confirm_payment()
        order.mark_refunded()
        assert order.payment_status == PaymentStatus.REFUNDED.value
