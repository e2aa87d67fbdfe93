"""Cart aggregate: one per customer, with totals derived from its items.

Totals (item count, subtotal, tax, shipping and grand total) are never set
directly; every mutation ends with a full recalculation so they always agree
with the items.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean import atomic_change
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer

from partstore.domain import partstore
from partstore.shared.errors import InsufficientStockError
from partstore.shared.pricing import calculate_totals


@dataclass(frozen=True)
class LiveProduct:
    """Catalog state a cart needs to price and bound a line."""

    name: str
    price: float
    stock: int
    available: bool


@partstore.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    subtotal = Float(default=0.0)
    added_at = DateTime()


@partstore.aggregate
class Cart:
    customer_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    total_items = Integer(default=0)
    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    tax_percentage = Float(default=0.0)
    shipping_charges = Float(default=0.0)
    total_amount = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        cart = cls(customer_id=customer_id, created_at=now, updated_at=now)
        cart._recalculate()
        return cart

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def _recalculate(self):
        for item in self.items:
            item.subtotal = round(item.quantity * item.price, 2)

        totals = calculate_totals(sum(item.subtotal for item in self.items))
        self.total_items = sum(item.quantity for item in self.items)
        self.subtotal = totals.subtotal
        self.tax = totals.tax
        self.tax_percentage = totals.tax_percentage
        self.shipping_charges = totals.shipping_charges
        self.total_amount = totals.total_amount
        self.updated_at = datetime.now(UTC)

    def _find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})
        return item

    def item_for_product(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    @property
    def is_empty(self) -> bool:
        return not self.items

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, product: LiveProduct):
        """Add ``quantity`` units, merging into an existing line for the product."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.item_for_product(product_id)
        requested = quantity + (existing.quantity if existing else 0)
        if requested > product.stock:
            raise InsufficientStockError(
                product.name, product.stock, message=f"Only {product.stock} items available in stock"
            )

        with atomic_change(self):
            if existing:
                existing.quantity = requested
                existing.price = product.price
            else:
                self.add_items(
                    CartItem(
                        product_id=product_id,
                        quantity=quantity,
                        price=product.price,
                        added_at=datetime.now(UTC),
                    )
                )
            self._recalculate()

    def update_item(self, item_id, quantity, product: LiveProduct):
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self._find_item(item_id)
        if quantity > product.stock:
            raise InsufficientStockError(
                product.name, product.stock, message=f"Only {product.stock} items available in stock"
            )

        with atomic_change(self):
            item.quantity = quantity
            item.price = product.price
            self._recalculate()

    def remove_item(self, item_id):
        item = self._find_item(item_id)
        with atomic_change(self):
            self.remove_items(item)
            self._recalculate()

    def clear(self):
        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self._recalculate()

    def sync(self, catalog: dict):
        """Reconcile lines against live catalog state.

        ``catalog`` maps product ids to ``LiveProduct`` (or None when the
        product no longer exists). Unavailable or sold-out lines are dropped,
        re-priced lines and lines clamped to stock count as updates.

        Returns:
            (updated, removed) counts.
        """
        updated = 0
        removed = 0

        with atomic_change(self):
            for item in list(self.items):
                product = catalog.get(str(item.product_id))
                if product is None or not product.available or product.stock <= 0:
                    self.remove_items(item)
                    removed += 1
                    continue

                changed = False
                if item.price != product.price:
                    item.price = product.price
                    changed = True
                if item.quantity > product.stock:
                    item.quantity = product.stock
                    changed = True
                updated += int(changed)

            self._recalculate()

        return updated, removed
