"""Shared BDD fixtures and step definitions for Ordering."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from partstore.cart.items import AddToCart, cart_for
from partstore.catalogue.management import UpdateProductStock
from partstore.catalogue.product import Product
from partstore.ordering.checkout import PlaceOrder
from partstore.ordering.fulfillment import UpdateOrderStatus
from partstore.ordering.order import Order
from partstore.shared.queries import fetch_all


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def error():
    return {"exc": None}


def _product(products, name) -> Product:
    return current_domain.repository_for(Product).get(products[name])


def _order(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered customer with a delivery address", target_fixture="customer_id")
def registered_customer(register_customer):
    return register_customer()


@given(parsers.cfparse('a product "{name}" priced {price:g} with {stock:d} in stock'))
def product_in_catalogue(add_product, products, name, price, stock):
    products[name] = add_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('the customer has {qty:d} of "{name}" in the cart'))
def carted(customer_id, products, qty, name):
    current_domain.process(
        AddToCart(customer_id=customer_id, product_id=products[name], quantity=qty),
        asynchronous=False,
    )


@given(parsers.cfparse('the stock of "{name}" is corrected to {stock:d}'))
def stock_corrected(products, name, stock):
    current_domain.process(UpdateProductStock(product_id=products[name], stock=stock), asynchronous=False)


@given(parsers.cfparse('the customer checked out paying "{method}"'), target_fixture="order_id")
def checked_out(customer_id, method):
    return current_domain.process(PlaceOrder(customer_id=customer_id, payment_method=method), asynchronous=False)


@given("the order was delivered")
def order_delivered(order_id):
    for status in ("Confirmed", "Packed", "Shipped", "Delivered"):
        current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    assert _order(order_id).order_status == status


@then(parsers.cfparse('the order payment status is "{status}"'))
def order_payment_status_is(order_id, status):
    assert _order(order_id).payment_status == status


@then(parsers.cfparse('"{name}" has {stock:d} left in stock'))
def stock_left(products, name, stock):
    assert _product(products, name).stock == stock


@then("the order update is rejected")
def order_update_rejected(error):
    assert isinstance(error["exc"], ValidationError), f"Expected a validation error, got {error['exc']!r}"


@then("no order was placed")
def no_order_placed():
    assert fetch_all(Order) == []


@then("the customer's cart is empty")
def cart_is_empty(customer_id):
    assert len(cart_for(customer_id).items) == 0
