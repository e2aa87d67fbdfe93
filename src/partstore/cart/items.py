"""Cart commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from partstore.cart.cart import Cart, LiveProduct
from partstore.catalogue.product import Product
from partstore.domain import partstore
from partstore.shared.queries import fetch_one


@partstore.command(part_of="Cart")
class OpenCart:
    customer_id = Identifier(required=True)


@partstore.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@partstore.command(part_of="Cart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@partstore.command(part_of="Cart")
class RemoveCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@partstore.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


@partstore.command(part_of="Cart")
class SyncCart:
    customer_id = Identifier(required=True)


def cart_for(customer_id) -> Cart:
    """Load the customer's cart, creating an empty one on first access."""
    cart = fetch_one(Cart, customer_id=str(customer_id))
    return cart if cart is not None else Cart.create(customer_id=str(customer_id))


def live_product(product: Product) -> LiveProduct:
    return LiveProduct(
        name=product.name,
        price=product.final_price,
        stock=product.stock,
        available=product.is_available,
    )


def _purchasable(product_id) -> Product:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError("Product not found or unavailable") from None
    if not product.is_available:
        raise ObjectNotFoundError("Product not found or unavailable")
    return product


@partstore.command_handler(part_of=Cart)
class CartHandler:
    @handle(OpenCart)
    def open_cart(self, command: OpenCart):
        cart = cart_for(command.customer_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(AddToCart)
    def add_to_cart(self, command: AddToCart):
        product = _purchasable(command.product_id)
        cart = cart_for(command.customer_id)
        cart.add_item(str(product.id), command.quantity, live_product(product))
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(UpdateCartItem)
    def update_item(self, command: UpdateCartItem):
        cart = cart_for(command.customer_id)
        item = next((i for i in cart.items if str(i.id) == str(command.item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        product = _purchasable(item.product_id)
        cart.update_item(command.item_id, command.quantity, live_product(product))
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(RemoveCartItem)
    def remove_item(self, command: RemoveCartItem):
        cart = cart_for(command.customer_id)
        cart.remove_item(command.item_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear(self, command: ClearCart):
        cart = cart_for(command.customer_id)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(SyncCart)
    def sync(self, command: SyncCart):
        cart = cart_for(command.customer_id)
        if cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        repo = current_domain.repository_for(Product)
        catalog = {}
        for item in cart.items:
            try:
                catalog[str(item.product_id)] = live_product(repo.get(item.product_id))
            except ObjectNotFoundError:
                catalog[str(item.product_id)] = None

        updated, removed = cart.sync(catalog)
        current_domain.repository_for(Cart).add(cart)
        return {"updates": updated, "removed": removed}
