"""FastAPI routes for the product catalogue."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from partstore.api.auth import current_admin
from partstore.api.envelope import ok, paginated
from partstore.api.schemas import ImageRequest, ProductRequest, StockRequest, UpdateProductRequest
from partstore.api.views import product_view
from partstore.catalogue.management import (
    AddProduct,
    AddProductImage,
    DeleteProduct,
    RemoveProductImage,
    UpdateProduct,
    UpdateProductStock,
)
from partstore.catalogue.queries import (
    featured_products,
    get_product,
    list_products,
    low_stock_products,
    products_by_category,
)

router = APIRouter(prefix="/api/products", tags=["products"])


def _json_fields(body, fields) -> dict:
    """Collection fields travel to commands as JSON text."""
    data = {}
    for name in fields:
        value = getattr(body, name)
        if value is None:
            continue
        if name == "compatible_models":
            value = [m.model_dump() for m in value]
        data[name] = json.dumps(value)
    return data


_COLLECTIONS = ("compatible_models", "specifications", "tags")


@router.get("")
async def browse(
    category: str | None = None,
    model: str | None = None,
    search: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    in_stock: bool = False,
    sort: str = "newest",
    page: int = 1,
    limit: int = 12,
):
    result = list_products(
        category=category,
        model=model,
        search=search,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        sort=sort,
        page=page,
        limit=limit,
    )
    return paginated("Products retrieved successfully", "products", [product_view(p) for p in result.items], result)


@router.get("/featured")
async def featured():
    return ok("Featured products retrieved successfully", {"products": [product_view(p) for p in featured_products()]})


@router.get("/low-stock")
async def low_stock(principal=Depends(current_admin)):
    products = low_stock_products()
    return ok("Low stock products retrieved successfully", {"products": [product_view(p) for p in products], "count": len(products)})


@router.get("/category/{category}")
async def by_category(category: str, page: int = 1, limit: int = 12):
    result = products_by_category(category, page=page, limit=limit)
    return paginated("Products retrieved successfully", "products", [product_view(p) for p in result.items], result)


@router.get("/{product_id}")
async def product_detail(product_id: str):
    return ok("Product retrieved successfully", {"product": product_view(get_product(product_id))})


@router.post("", status_code=201)
async def create_product(body: ProductRequest, principal=Depends(current_admin)):
    fields = body.model_dump(exclude=set(_COLLECTIONS), exclude_none=True)
    product_id = current_domain.process(
        AddProduct(**fields, **_json_fields(body, _COLLECTIONS)),
        asynchronous=False,
    )
    return ok("Product created successfully", {"product": product_view(get_product(product_id))})


@router.put("/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest, principal=Depends(current_admin)):
    fields = body.model_dump(exclude=set(_COLLECTIONS), exclude_none=True)
    current_domain.process(
        UpdateProduct(product_id=product_id, **fields, **_json_fields(body, _COLLECTIONS)),
        asynchronous=False,
    )
    return ok("Product updated successfully", {"product": product_view(get_product(product_id))})


@router.delete("/{product_id}")
async def delete_product(product_id: str, principal=Depends(current_admin)):
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return ok("Product deleted successfully")


@router.patch("/{product_id}/stock")
async def update_stock(product_id: str, body: StockRequest, principal=Depends(current_admin)):
    current_domain.process(UpdateProductStock(product_id=product_id, stock=body.stock), asynchronous=False)
    return ok("Stock updated successfully", {"product": product_view(get_product(product_id))})


@router.post("/{product_id}/images", status_code=201)
async def add_image(product_id: str, body: ImageRequest, principal=Depends(current_admin)):
    current_domain.process(
        AddProductImage(product_id=product_id, url=body.url, public_id=body.public_id),
        asynchronous=False,
    )
    return ok("Image added successfully", {"product": product_view(get_product(product_id))})


@router.delete("/{product_id}/images/{image_id}")
async def remove_image(product_id: str, image_id: str, principal=Depends(current_admin)):
    public_id = current_domain.process(
        RemoveProductImage(product_id=product_id, image_id=image_id),
        asynchronous=False,
    )
    return ok("Image deleted successfully", {"public_id": public_id})
