"""Shared BDD fixtures and step definitions for the Wishlist."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from partstore.wishlist.management import ToggleWishlistItem
from partstore.wishlist.queries import in_wishlist, saved_products

CUSTOMER_ID = "cust-001"


@pytest.fixture()
def products():
    return {}


@given(parsers.cfparse('a product "{name}" in the catalogue'))
def product_in_catalogue(add_product, products, name):
    products[name] = add_product(name=name)


@given(parsers.cfparse('the customer saved "{name}"'))
def saved(products, name):
    current_domain.process(
        ToggleWishlistItem(customer_id=CUSTOMER_ID, product_id=products[name]), asynchronous=False
    )


@then(parsers.cfparse('"{name}" is on the wishlist'))
def on_wishlist(products, name):
    assert in_wishlist(CUSTOMER_ID, products[name]) is True


@then(parsers.cfparse('"{name}" is not on the wishlist'))
def not_on_wishlist(products, name):
    assert in_wishlist(CUSTOMER_ID, products[name]) is False


@then(parsers.cfparse("the wishlist lists {count:d} parts"))
def wishlist_lists(count):
    assert len(saved_products(CUSTOMER_ID)) == count
