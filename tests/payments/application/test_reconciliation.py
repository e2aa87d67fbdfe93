"""Application tests for the online payment flow: gateway order, verify, fail."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from partstore.ordering.order import Order, OrderStatus, PaymentStatus
from partstore.payments.payment import SIGNATURE_MISMATCH, Payment, PaymentRecordStatus
from partstore.payments.reconciliation import CreateGatewayOrder, RecordPaymentFailure, VerifyPayment
from partstore.payments.signature import compute_signature
from partstore.shared.errors import AuthorizationError
from partstore.shared.queries import fetch_one


@pytest.fixture
def online_order(register_customer, add_product, checkout):
    customer_id = register_customer()
    order_id = checkout(customer_id, [(add_product(price=100.0), 2)], payment_method="Online")
    return order_id, customer_id


def _order(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


def _payment(order_id) -> Payment:
    return fetch_one(Payment, order_id=order_id)


def _gateway_order(order_id, customer_id):
    return current_domain.process(CreateGatewayOrder(order_id=order_id, customer_id=customer_id), asynchronous=False)


def _verify(order_id, customer_id, gateway_order_id, payment_id="pay_123", signature=None):
    return current_domain.process(
        VerifyPayment(
            order_id=order_id,
            customer_id=customer_id,
            gateway_order_id=gateway_order_id,
            gateway_payment_id=payment_id,
            signature=signature if signature is not None else compute_signature(gateway_order_id, payment_id),
        ),
        asynchronous=False,
    )


class TestCreateGatewayOrder:
    def test_opens_order_for_total_in_minor_units(self, online_order, gateway):
        order_id, customer_id = online_order
        result = _gateway_order(order_id, customer_id)

        assert result["amount"] == 33600
        assert result["currency"] == "INR"
        assert result["gateway_order_id"].startswith("order_fake_")
        call = gateway.calls_to("create_order")[0]
        assert call.arguments["receipt"] == _order(order_id).order_number
        assert _order(order_id).gateway_order_id == result["gateway_order_id"]
        assert _payment(order_id).gateway_order_id == result["gateway_order_id"]

    def test_other_customer_refused(self, online_order, register_customer):
        order_id, _ = online_order
        stranger = register_customer(email="stranger@example.com")
        with pytest.raises(AuthorizationError):
            _gateway_order(order_id, stranger)

    def test_cash_on_delivery_order_refused(self, register_customer, add_product, checkout):
        customer_id = register_customer()
        order_id = checkout(customer_id, [(add_product(), 1)], payment_method="COD")
        with pytest.raises(ValidationError):
            _gateway_order(order_id, customer_id)

    def test_paid_order_refused(self, online_order):
        order_id, customer_id = online_order
        gateway_order_id = _gateway_order(order_id, customer_id)["gateway_order_id"]
        _verify(order_id, customer_id, gateway_order_id)
        with pytest.raises(ValidationError):
            _gateway_order(order_id, customer_id)


class TestVerifyPayment:
    def test_valid_signature_confirms_order(self, online_order):
        order_id, customer_id = online_order
        gateway_order_id = _gateway_order(order_id, customer_id)["gateway_order_id"]

        assert _verify(order_id, customer_id, gateway_order_id) is True

        order = _order(order_id)
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert order.order_status == OrderStatus.CONFIRMED.value
        assert order.paid_at is not None
        payment = _payment(order_id)
        assert payment.status == PaymentRecordStatus.COMPLETED.value
        assert payment.transaction_id == "pay_123"

    def test_tampered_signature_fails_payment(self, online_order):
        order_id, customer_id = online_order
        gateway_order_id = _gateway_order(order_id, customer_id)["gateway_order_id"]

        assert _verify(order_id, customer_id, gateway_order_id, signature="0" * 64) is False

        order = _order(order_id)
        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.order_status == OrderStatus.PLACED.value
        payment = _payment(order_id)
        assert payment.status == PaymentRecordStatus.FAILED.value
        assert payment.failure_reason == SIGNATURE_MISMATCH

    def test_non_ascii_signature_fails_payment(self, online_order):
        order_id, customer_id = online_order
        gateway_order_id = _gateway_order(order_id, customer_id)["gateway_order_id"]

        assert _verify(order_id, customer_id, gateway_order_id, signature="\u00e9" * 64) is False

        assert _order(order_id).payment_status == PaymentStatus.FAILED.value
        assert _payment(order_id).status == PaymentRecordStatus.FAILED.value

    def test_signature_for_another_payment_fails(self, online_order):
        order_id, customer_id = online_order
        gateway_order_id = _gateway_order(order_id, customer_id)["gateway_order_id"]
        forged = compute_signature(gateway_order_id, "pay_other")
        assert _verify(order_id, customer_id, gateway_order_id, payment_id="pay_123", signature=forged) is False

    def test_retry_after_failure(self, online_order):
        order_id, customer_id = online_order
        gateway_order_id = _gateway_order(order_id, customer_id)["gateway_order_id"]
        _verify(order_id, customer_id, gateway_order_id, signature="bad")
        assert _verify(order_id, customer_id, gateway_order_id, payment_id="pay_456") is True
        assert _payment(order_id).status == PaymentRecordStatus.COMPLETED.value


class TestRecordPaymentFailure:
    def test_records_reason(self, online_order):
        order_id, customer_id = online_order
        current_domain.process(
            RecordPaymentFailure(order_id=order_id, customer_id=customer_id, reason="Card declined"),
            asynchronous=False,
        )
        assert _order(order_id).payment_status == PaymentStatus.FAILED.value
        assert _payment(order_id).failure_reason == "Card declined"

    def test_default_reason(self, online_order):
        order_id, customer_id = online_order
        current_domain.process(RecordPaymentFailure(order_id=order_id, customer_id=customer_id), asynchronous=False)
        assert _payment(order_id).failure_reason == "Payment failed"
