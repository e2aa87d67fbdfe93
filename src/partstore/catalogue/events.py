"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from partstore.domain import partstore


@partstore.event(part_of="Product")
class ProductAdded:
    """A new part was added to the catalog."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    part_number = String(required=True)
    category = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)
    added_at = DateTime()


@partstore.event(part_of="Product")
class StockAdjusted:
    """Stock moved because of an order, a cancellation or a manual correction."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    stock_status = String(required=True)
    reason = String(max_length=50)


@partstore.event(part_of="Product")
class StockRunningLow:
    """Stock dropped into the Low Stock or Out of Stock band."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    part_number = String(required=True)
    stock = Integer(required=True)
    stock_status = String(required=True)


@partstore.event(part_of="Product")
class ProductRemoved:
    """A part was soft-deleted from the catalog."""

    __version__ = 1

    product_id = Identifier(required=True)
    part_number = String(required=True)
    removed_at = DateTime()
