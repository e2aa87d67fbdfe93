"""Shared BDD fixtures and step definitions for Payments."""

from protean import current_domain
from pytest_bdd import given, parsers, then

from partstore.ordering.order import Order
from partstore.payments.payment import Payment
from partstore.payments.reconciliation import CreateGatewayOrder
from partstore.shared.queries import fetch_one


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an online order awaiting payment", target_fixture="order")
def online_order(register_customer, add_product, checkout):
    customer_id = register_customer()
    order_id = checkout(customer_id, [(add_product(price=100.0, stock=5), 2)], payment_method="Online")
    return {"order_id": order_id, "customer_id": customer_id}


@given("a gateway order was opened for it", target_fixture="gateway_order_id")
def gateway_order_opened(order):
    result = current_domain.process(
        CreateGatewayOrder(order_id=order["order_id"], customer_id=order["customer_id"]),
        asynchronous=False,
    )
    return result["gateway_order_id"]


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert current_domain.repository_for(Order).get(order["order_id"]).order_status == status


@then(parsers.cfparse('the order payment status is "{status}"'))
def order_payment_status_is(order, status):
    assert current_domain.repository_for(Order).get(order["order_id"]).payment_status == status


@then(parsers.cfparse('the payment record is "{status}"'))
def payment_record_is(order, status):
    assert fetch_one(Payment, order_id=order["order_id"]).status == status
