"""Catalog administration: commands and handler."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from partstore.catalogue.product import Product, normalize_part_number
from partstore.domain import partstore
from partstore.shared.errors import ConflictError

logger = structlog.get_logger(__name__)


def _decode(value, default):
    if value in (None, ""):
        return default
    return json.loads(value) if isinstance(value, str) else value


@partstore.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=200)
    part_number = String(required=True, max_length=50)
    description = Text(required=True)
    category = String(required=True, max_length=50)
    subcategory = String(max_length=100)
    price = Float(required=True, min_value=0.0)
    discount_price = Float()
    stock = Integer(default=0)
    low_stock_threshold = Integer()
    compatible_models = Text()  # JSON list of {model_name, year_from, year_to, variant}
    specifications = Text()  # JSON object
    tags = Text()  # JSON list
    warranty_period = String(max_length=50)
    manufacturer = String(max_length=100)
    weight = Float()


@partstore.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=200)
    part_number = String(max_length=50)
    description = Text()
    category = String(max_length=50)
    subcategory = String(max_length=100)
    price = Float()
    discount_price = Float()
    low_stock_threshold = Integer()
    warranty_period = String(max_length=50)
    manufacturer = String(max_length=100)
    weight = Float()
    is_active = Boolean()
    compatible_models = Text()
    specifications = Text()
    tags = Text()


@partstore.command(part_of="Product")
class UpdateProductStock:
    product_id = Identifier(required=True)
    stock = Integer(required=True)


@partstore.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@partstore.command(part_of="Product")
class AddProductImage:
    product_id = Identifier(required=True)
    url = String(required=True, max_length=1000)
    public_id = String(max_length=255)


@partstore.command(part_of="Product")
class RemoveProductImage:
    product_id = Identifier(required=True)
    image_id = Identifier(required=True)


def _ensure_part_number_free(part_number, product_id=None):
    repo = current_domain.repository_for(Product)
    clashes = repo._dao.query.filter(part_number=normalize_part_number(part_number)).all().items
    if any(str(p.id) != str(product_id) for p in clashes):
        raise ConflictError(
            "Product with this part number already exists",
            errors={"part_number": [f"{normalize_part_number(part_number)} is already in use"]},
        )


@partstore.command_handler(part_of=Product)
class CatalogueHandler:
    @handle(AddProduct)
    def add_product(self, command: AddProduct):
        _ensure_part_number_free(command.part_number)

        product = Product.create(
            name=command.name,
            part_number=command.part_number,
            description=command.description,
            category=command.category,
            subcategory=command.subcategory,
            price=command.price,
            discount_price=command.discount_price,
            stock=command.stock or 0,
            low_stock_threshold=command.low_stock_threshold,
            compatible_models=_decode(command.compatible_models, []),
            specifications=_decode(command.specifications, {}),
            tags=_decode(command.tags, []),
            warranty_period=command.warranty_period,
            manufacturer=command.manufacturer,
            weight=command.weight,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("product_added", product_id=str(product.id), part_number=product.part_number)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command: UpdateProduct):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if command.part_number:
            _ensure_part_number_free(command.part_number, product_id=product.id)

        changes = {
            field: getattr(command, field)
            for field in (
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
            )
            if getattr(command, field) is not None
        }
        product.update_details(
            compatible_models=_decode(command.compatible_models, None),
            specifications=_decode(command.specifications, None),
            tags=_decode(command.tags, None),
            **changes,
        )
        repo.add(product)
        return str(product.id)

    @handle(UpdateProductStock)
    def update_stock(self, command: UpdateProductStock):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_stock(command.stock)
        repo.add(product)

        logger.info(
            "product_stock_updated",
            product_id=str(product.id),
            stock=product.stock,
            stock_status=product.stock_status,
        )
        return str(product.id)

    @handle(DeleteProduct)
    def delete_product(self, command: DeleteProduct):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.soft_delete()
        repo.add(product)
        return str(product.id)

    @handle(AddProductImage)
    def add_image(self, command: AddProductImage):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        image = product.add_image(command.url, command.public_id)
        repo.add(product)
        return str(image.id)

    @handle(RemoveProductImage)
    def remove_image(self, command: RemoveProductImage):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        image = product.remove_image(command.image_id)
        repo.add(product)
        # The stored object is deleted by the storage client; we only hand back its handle
        return image.public_id
