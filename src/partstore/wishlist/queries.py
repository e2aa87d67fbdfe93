"""Read side for wishlists."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from partstore.catalogue.product import Product
from partstore.shared.queries import fetch_one
from partstore.wishlist.wishlist import Wishlist


def saved_products(customer_id) -> list[tuple]:
    """``(product, added_at)`` pairs, skipping products removed from the catalogue."""
    wishlist = fetch_one(Wishlist, customer_id=str(customer_id))
    if wishlist is None:
        return []

    repo = current_domain.repository_for(Product)
    saved = []
    for entry in wishlist.products:
        try:
            product = repo.get(entry.product_id)
        except ObjectNotFoundError:
            continue
        if not product.is_deleted:
            saved.append((product, entry.added_at))
    return saved


def in_wishlist(customer_id, product_id) -> bool:
    wishlist = fetch_one(Wishlist, customer_id=str(customer_id))
    return wishlist is not None and wishlist.contains(product_id)
