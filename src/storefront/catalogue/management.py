"""Catalogue administration — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    title: String(required=True, max_length=255)
    description: Text()
    category: String(max_length=100)
    price: Float(required=True, min_value=0.0)
    image_url: String(max_length=1000)
    stock_quantity: Integer(default=0, min_value=0)


@storefront.command(part_of="Product")
class UpdateProductDetails:
    """Partial update: only fields that were sent are changed."""

    product_id: Identifier(required=True)
    title: String(max_length=255)
    description: Text()
    category: String(max_length=100)
    price: Float(min_value=0.0)
    image_url: String(max_length=1000)


@storefront.command(part_of="Product")
class RestockProduct:
    product_id: Identifier(required=True)
    stock_quantity: Integer(required=True, min_value=0)


@storefront.command(part_of="Product")
class EnableProduct:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class DisableProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageCatalogueHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            title=command.title,
            description=command.description,
            category=command.category,
            price=command.price,
            image_url=command.image_url,
            stock_quantity=command.stock_quantity or 0,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        changes = {
            field: getattr(command, field)
            for field in ("title", "description", "category", "price", "image_url")
            if getattr(command, field) is not None
        }
        product.update_details(**changes)
        repo.add(product)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.stock_quantity)
        repo.add(product)

    @handle(EnableProduct)
    def enable_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.enable()
        repo.add(product)

    @handle(DisableProduct)
    def disable_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.disable()
        repo.add(product)
