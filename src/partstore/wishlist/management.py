"""Wishlist commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from partstore.catalogue.product import Product
from partstore.domain import partstore
from partstore.shared.queries import fetch_one
from partstore.wishlist.wishlist import Wishlist


@partstore.command(part_of="Wishlist")
class ToggleWishlistItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@partstore.command(part_of="Wishlist")
class ClearWishlist:
    customer_id = Identifier(required=True)


@partstore.command_handler(part_of=Wishlist)
class WishlistHandler:
    @handle(ToggleWishlistItem)
    def toggle(self, command: ToggleWishlistItem):
        try:
            product = current_domain.repository_for(Product).get(command.product_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError("Product not found") from None
        if product.is_deleted:
            raise ObjectNotFoundError("Product not found")

        wishlist = fetch_one(Wishlist, customer_id=str(command.customer_id))
        if wishlist is None:
            wishlist = Wishlist.create(str(command.customer_id))

        result = wishlist.toggle(product.id)
        current_domain.repository_for(Wishlist).add(wishlist)
        return result.value

    @handle(ClearWishlist)
    def clear(self, command: ClearWishlist):
        wishlist = fetch_one(Wishlist, customer_id=str(command.customer_id))
        if wishlist is None:
            raise ObjectNotFoundError("Wishlist not found")
        wishlist.clear()
        current_domain.repository_for(Wishlist).add(wishlist)
        return str(wishlist.id)
