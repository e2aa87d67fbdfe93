"""Shared BDD fixtures and step definitions for the Cart."""

import pytest
from pytest_bdd import given, parsers, then

from partstore.cart.cart import Cart
from partstore.shared.errors import InsufficientStockError


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart():
    cart = Cart.create(customer_id="cust-001")
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_one_line(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse("the cart subtotal is {amount:g}"))
def cart_subtotal_is(cart, amount):
    assert cart.subtotal == pytest.approx(amount)


@then(parsers.cfparse("the cart tax is {amount:g}"))
def cart_tax_is(cart, amount):
    assert cart.tax == pytest.approx(amount)


@then(parsers.cfparse("the cart shipping is {amount:g}"))
def cart_shipping_is(cart, amount):
    assert cart.shipping_charges == pytest.approx(amount)


@then(parsers.cfparse("the cart total is {amount:g}"))
def cart_total_is(cart, amount):
    assert cart.total_amount == pytest.approx(amount)


@then("the cart action fails for insufficient stock")
def cart_action_fails(error):
    assert isinstance(error["exc"], InsufficientStockError), f"Expected insufficient stock, got {error['exc']!r}"
