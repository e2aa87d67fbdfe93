"""Catalog read side: filtered listing, featured and low-stock views."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from partstore.catalogue.product import Category, Product, StockStatus, sanitize_part_number
from partstore.shared.queries import Page, fetch_all, paginate

FEATURED_LIMIT = 8

_SORTS = {
    "price_asc": (lambda p: p.final_price, False),
    "price_desc": (lambda p: p.final_price, True),
    "name": (lambda p: (p.name or "").lower(), False),
    "popular": (lambda p: p.total_sales or 0, True),
    "rating": (lambda p: p.average_rating or 0, True),
    "newest": (lambda p: p.created_at, True),
}


def _visible_products() -> list:
    return fetch_all(Product, is_active=True, is_deleted=False)


def _matches_search(product: Product, term: str) -> bool:
    term = term.strip().lower()
    if not term:
        return True
    haystack = " ".join([product.name or "", product.description or "", product.part_number or ""]).lower()
    if term in haystack:
        return True
    sanitized = sanitize_part_number(term)
    if sanitized and sanitized in (product.sanitized_part_number or ""):
        return True
    return any(term in tag for tag in product.tag_list())


def _fits_model(product: Product, model: str) -> bool:
    model = model.strip().lower()
    return any(model in (m.model_name or "").lower() for m in product.compatible_models)


def get_product(product_id) -> Product:
    """Return a visible product, hiding soft-deleted records behind NotFound."""
    product = current_domain.repository_for(Product).get(product_id)
    if product.is_deleted:
        raise ObjectNotFoundError(f"Product with id {product_id} does not exist")
    return product


def list_products(
    category=None,
    model=None,
    search=None,
    min_price=None,
    max_price=None,
    in_stock=False,
    sort="newest",
    page=1,
    limit=12,
) -> Page:
    products = _visible_products()

    if category:
        products = [p for p in products if p.category == category]
    if model:
        products = [p for p in products if _fits_model(p, model)]
    if search:
        products = [p for p in products if _matches_search(p, search)]
    if min_price is not None:
        products = [p for p in products if p.final_price >= min_price]
    if max_price is not None:
        products = [p for p in products if p.final_price <= max_price]
    if in_stock:
        products = [p for p in products if p.stock > 0]

    key, reverse = _SORTS.get(sort or "newest", _SORTS["newest"])
    products.sort(key=key, reverse=reverse)
    return paginate(products, page, limit)


def products_by_category(category, page=1, limit=12) -> Page:
    if category not in {c.value for c in Category}:
        raise ObjectNotFoundError(f"Unknown category {category}")
    return list_products(category=category, page=page, limit=limit)


def featured_products(limit: int = FEATURED_LIMIT) -> list:
    products = [p for p in _visible_products() if p.stock > 0]
    products.sort(key=lambda p: (p.total_sales or 0, p.average_rating or 0), reverse=True)
    return products[:limit]


def low_stock_products(limit: int | None = None) -> list:
    """Live products at or under their threshold, emptiest first."""
    products = [
        p
        for p in fetch_all(Product, is_deleted=False)
        if p.stock_status in (StockStatus.LOW_STOCK.value, StockStatus.OUT_OF_STOCK.value)
    ]
    products.sort(key=lambda p: p.stock)
    return products[:limit] if limit else products
