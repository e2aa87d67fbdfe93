"""Wishlist aggregate: the set of products a customer has saved for later."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, HasMany, Identifier

from partstore.domain import partstore


class ToggleResult(Enum):
    ADDED = "added"
    REMOVED = "removed"


@partstore.entity(part_of="Wishlist")
class SavedProduct:
    product_id = Identifier(required=True)
    added_at = DateTime()


@partstore.aggregate
class Wishlist:
    customer_id = Identifier(required=True, unique=True)
    products = HasMany(SavedProduct)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    def _entry_for(self, product_id):
        return next((p for p in self.products if str(p.product_id) == str(product_id)), None)

    def contains(self, product_id) -> bool:
        return self._entry_for(product_id) is not None

    def toggle(self, product_id) -> ToggleResult:
        now = datetime.now(UTC)
        entry = self._entry_for(product_id)
        if entry is not None:
            self.remove_products(entry)
            result = ToggleResult.REMOVED
        else:
            self.add_products(SavedProduct(product_id=str(product_id), added_at=now))
            result = ToggleResult.ADDED
        self.updated_at = now
        return result

    def clear(self):
        for entry in list(self.products):
            self.remove_products(entry)
        self.updated_at = datetime.now(UTC)
