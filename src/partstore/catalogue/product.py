"""Product aggregate root with CompatibleModel and ProductImage entities."""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String, Text

from partstore.catalogue.events import ProductAdded, ProductRemoved, StockAdjusted, StockRunningLow
from partstore.domain import partstore
from partstore.shared.errors import InsufficientStockError


class Category(Enum):
    ENGINE = "Engine"
    BRAKE = "Brake"
    ELECTRICAL = "Electrical"
    BODY = "Body"
    ACCESSORIES = "Accessories"
    SUSPENSION = "Suspension"
    TRANSMISSION = "Transmission"
    INTERIOR = "Interior"
    EXTERIOR = "Exterior"
    SERVICE_PARTS = "Service Parts"


class StockStatus(Enum):
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"


DEFAULT_LOW_STOCK_THRESHOLD = 5

# Fields an admin may change through update_details
_EDITABLE_FIELDS = {
    "name",
    "part_number",
    "description",
    "category",
    "subcategory",
    "price",
    "discount_price",
    "low_stock_threshold",
    "warranty_period",
    "manufacturer",
    "weight",
    "is_active",
}


def normalize_part_number(part_number: str) -> str:
    return part_number.strip().upper()


def sanitize_part_number(part_number: str) -> str:
    """Alphanumerics only, lowercase, so 'HY-5810 2' matches 'hy58102'."""
    return re.sub(r"[^a-z0-9]", "", part_number.lower())


def stock_status_for(stock: int, threshold: int) -> str:
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK.value
    if stock <= threshold:
        return StockStatus.LOW_STOCK.value
    return StockStatus.IN_STOCK.value


@partstore.entity(part_of="Product")
class CompatibleModel:
    """A vehicle model (and year range) the part fits."""

    model_name: String(required=True, max_length=100)
    year_from: Integer(min_value=1900)
    year_to: Integer(min_value=1900)
    variant: String(max_length=100)


@partstore.entity(part_of="Product")
class ProductImage:
    """An image held in external object storage."""

    url: String(required=True, max_length=1000)
    public_id: String(max_length=255)


@partstore.aggregate
class Product:
    """A spare part offered in the catalog.

    Stock status is derived from stock and the low-stock threshold and is
    recomputed on every stock change. Deletion is soft: the record stays for
    order history and dashboards.
    """

    name: String(required=True, max_length=200)
    part_number: String(required=True, max_length=50, unique=True)
    sanitized_part_number: String(max_length=50)
    description: Text(required=True)
    category: String(required=True, choices=Category)
    subcategory: String(max_length=100)
    compatible_models: HasMany(CompatibleModel)
    price: Float(required=True, min_value=0.0)
    discount_price: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    stock_status: String(choices=StockStatus, default=StockStatus.OUT_OF_STOCK.value)
    low_stock_threshold: Integer(default=DEFAULT_LOW_STOCK_THRESHOLD, min_value=0)
    images: HasMany(ProductImage)
    specifications: Text()  # JSON object
    warranty_period: String(max_length=50, default="6 months")
    manufacturer: String(max_length=100, default="Hyundai Mobis")
    tags: Text()  # JSON list
    weight: Float(min_value=0.0)
    is_active: Boolean(default=True)
    is_deleted: Boolean(default=False)
    average_rating: Float(default=0.0, min_value=0.0, max_value=5.0)
    total_reviews: Integer(default=0)
    total_sales: Integer(default=0)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def discount_must_be_below_price(self):
        if self.discount_price is not None and self.price is not None and self.discount_price >= self.price:
            raise ValidationError({"discount_price": ["Discount price must be less than regular price"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        part_number,
        description,
        category,
        price,
        stock=0,
        discount_price=None,
        subcategory=None,
        low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD,
        compatible_models=None,
        specifications=None,
        tags=None,
        warranty_period=None,
        manufacturer=None,
        weight=None,
    ):
        now = datetime.now(UTC)
        normalized = normalize_part_number(part_number)
        threshold = DEFAULT_LOW_STOCK_THRESHOLD if low_stock_threshold is None else low_stock_threshold

        optional = {}
        if warranty_period:
            optional["warranty_period"] = warranty_period
        if manufacturer:
            optional["manufacturer"] = manufacturer

        product = cls(
            name=name,
            part_number=normalized,
            sanitized_part_number=sanitize_part_number(normalized),
            description=description,
            category=category,
            subcategory=subcategory,
            price=price,
            discount_price=discount_price,
            stock=stock,
            stock_status=stock_status_for(stock, threshold),
            low_stock_threshold=threshold,
            specifications=json.dumps(specifications or {}),
            tags=json.dumps([tag.strip().lower() for tag in tags or []]),
            weight=weight,
            created_at=now,
            updated_at=now,
            **optional,
        )
        for model in compatible_models or []:
            product.add_compatible_models(CompatibleModel(**model))

        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                part_number=normalized,
                category=category,
                price=price,
                stock=stock,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def final_price(self) -> float:
        return self.discount_price if self.discount_price else self.price

    @property
    def is_available(self) -> bool:
        return bool(self.is_active) and not self.is_deleted

    def primary_image_url(self):
        return self.images[0].url if self.images else None

    def tag_list(self) -> list:
        return json.loads(self.tags) if self.tags else []

    def specification_map(self) -> dict:
        return json.loads(self.specifications) if self.specifications else {}

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(self, compatible_models=None, specifications=None, tags=None, **changes):
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        if changes.get("part_number"):
            changes["part_number"] = normalize_part_number(changes["part_number"])
            changes["sanitized_part_number"] = sanitize_part_number(changes["part_number"])

        with atomic_change(self):
            for field, value in changes.items():
                setattr(self, field, value)

        if compatible_models is not None:
            for existing in list(self.compatible_models):
                self.remove_compatible_models(existing)
            for model in compatible_models:
                self.add_compatible_models(CompatibleModel(**model))
        if specifications is not None:
            self.specifications = json.dumps(specifications)
        if tags is not None:
            self.tags = json.dumps([tag.strip().lower() for tag in tags])

        if "low_stock_threshold" in changes:
            self._apply_stock(self.stock, reason="threshold")
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def _apply_stock(self, new_stock, reason):
        previous_stock = self.stock
        previous_status = self.stock_status

        self.stock = new_stock
        self.stock_status = stock_status_for(new_stock, self.low_stock_threshold)
        self.updated_at = datetime.now(UTC)

        if previous_stock != new_stock:
            self.raise_(
                StockAdjusted(
                    product_id=str(self.id),
                    previous_stock=previous_stock,
                    new_stock=new_stock,
                    stock_status=self.stock_status,
                    reason=reason,
                )
            )

        worsened = self.stock_status != StockStatus.IN_STOCK.value and self.stock_status != previous_status
        if worsened and new_stock < previous_stock:
            self.raise_(
                StockRunningLow(
                    product_id=str(self.id),
                    name=self.name,
                    part_number=self.part_number,
                    stock=new_stock,
                    stock_status=self.stock_status,
                )
            )

    def set_stock(self, quantity):
        """Manual stock correction by an admin."""
        if quantity is None or quantity < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})
        self._apply_stock(quantity, reason="manual")

    def ensure_can_supply(self, quantity):
        if not self.is_available:
            raise ValidationError({"product": [f"Product {self.name} is no longer available"]})
        if self.stock < quantity:
            raise InsufficientStockError(self.name, self.stock)

    def reserve(self, quantity):
        """Take stock for a placed order and count the sale."""
        self.ensure_can_supply(quantity)
        self.total_sales = (self.total_sales or 0) + quantity
        self._apply_stock(self.stock - quantity, reason="order")

    def restore(self, quantity):
        """Give back stock from a cancelled order and uncount the sale."""
        self.total_sales = max(0, (self.total_sales or 0) - quantity)
        self._apply_stock(self.stock + quantity, reason="cancellation")

    # -------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------
    def add_image(self, url, public_id=None):
        image = ProductImage(url=url, public_id=public_id)
        self.add_images(image)
        self.updated_at = datetime.now(UTC)
        return image

    def remove_image(self, image_id):
        image = next((i for i in self.images if str(i.id) == str(image_id)), None)
        if image is None:
            raise ValidationError({"image_id": ["Image not found"]})
        self.remove_images(image)
        self.updated_at = datetime.now(UTC)
        return image

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def soft_delete(self):
        if self.is_deleted:
            raise ValidationError({"product": ["Product is already deleted"]})
        now = datetime.now(UTC)
        self.is_deleted = True
        self.is_active = False
        self.updated_at = now
        self.raise_(ProductRemoved(product_id=str(self.id), part_number=self.part_number, removed_at=now))
