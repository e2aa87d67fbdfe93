"""FastAPI routes for the customer's wishlist."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from partstore.api.auth import current_customer
from partstore.api.envelope import ok
from partstore.api.schemas import ToggleWishlistRequest
from partstore.api.views import product_view
from partstore.wishlist.management import ClearWishlist, ToggleWishlistItem
from partstore.wishlist.queries import in_wishlist, saved_products

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


def _entries(customer_id) -> list:
    return [{"product": product_view(p), "added_at": added_at} for p, added_at in saved_products(customer_id)]


@router.post("/toggle")
async def toggle(body: ToggleWishlistRequest, principal=Depends(current_customer)):
    action = current_domain.process(
        ToggleWishlistItem(customer_id=principal.id, product_id=body.product_id),
        asynchronous=False,
    )
    message = "Product added to wishlist" if action == "added" else "Product removed from wishlist"
    return {**ok(message, {"products": _entries(principal.id)}), "action": action}


@router.get("")
async def get_wishlist(principal=Depends(current_customer)):
    entries = _entries(principal.id)
    return ok("Wishlist retrieved successfully", {"products": entries, "count": len(entries)})


@router.get("/check/{product_id}")
async def check(product_id: str, principal=Depends(current_customer)):
    return ok("Wishlist checked", {"in_wishlist": in_wishlist(principal.id, product_id)})


@router.delete("/clear")
async def clear(principal=Depends(current_customer)):
    current_domain.process(ClearWishlist(customer_id=principal.id), asynchronous=False)
    return ok("Wishlist cleared successfully")
