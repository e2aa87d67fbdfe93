"""FastAPI routes for the customer's cart."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from partstore.api.auth import current_customer
from partstore.api.envelope import ok
from partstore.api.schemas import AddToCartRequest, UpdateCartItemRequest
from partstore.api.views import cart_view
from partstore.cart.items import AddToCart, ClearCart, OpenCart, RemoveCartItem, SyncCart, UpdateCartItem, cart_for
from partstore.catalogue.product import Product

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _cart_payload(customer_id) -> dict:
    cart = cart_for(customer_id)
    repo = current_domain.repository_for(Product)
    products = {}
    for item in cart.items:
        try:
            products[str(item.product_id)] = repo.get(item.product_id)
        except ObjectNotFoundError:
            continue
    return {"cart": cart_view(cart, products)}


@router.get("")
async def get_cart(principal=Depends(current_customer)):
    current_domain.process(OpenCart(customer_id=principal.id), asynchronous=False)
    return ok("Cart retrieved successfully", _cart_payload(principal.id))


@router.post("/add")
async def add_to_cart(body: AddToCartRequest, principal=Depends(current_customer)):
    current_domain.process(
        AddToCart(customer_id=principal.id, product_id=body.product_id, quantity=body.quantity),
        asynchronous=False,
    )
    return ok("Item added to cart", _cart_payload(principal.id))


@router.put("/update/{item_id}")
async def update_item(item_id: str, body: UpdateCartItemRequest, principal=Depends(current_customer)):
    current_domain.process(
        UpdateCartItem(customer_id=principal.id, item_id=item_id, quantity=body.quantity),
        asynchronous=False,
    )
    return ok("Cart updated successfully", _cart_payload(principal.id))


@router.delete("/remove/{item_id}")
async def remove_item(item_id: str, principal=Depends(current_customer)):
    current_domain.process(RemoveCartItem(customer_id=principal.id, item_id=item_id), asynchronous=False)
    return ok("Item removed from cart", _cart_payload(principal.id))


@router.delete("/clear")
async def clear_cart(principal=Depends(current_customer)):
    current_domain.process(ClearCart(customer_id=principal.id), asynchronous=False)
    return ok("Cart cleared successfully", _cart_payload(principal.id))


@router.post("/sync")
async def sync_cart(principal=Depends(current_customer)):
    changes = current_domain.process(SyncCart(customer_id=principal.id), asynchronous=False)
    return ok("Cart synced successfully", {**_cart_payload(principal.id), **changes})
