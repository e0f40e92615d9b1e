"""Cart item management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.errors import ProductUnavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get(command.product_id)
        quantity = command.quantity or 1
        if not product.can_supply(quantity):
            raise ProductUnavailable(product_id=str(product.id))

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)
        item = cart.add_item(
            product_id=command.product_id,
            quantity=quantity,
            available_stock=product.stock_quantity,
        )
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_user(command.user_id)
        item = cart.line(command.item_id) if cart else None
        if item is None:
            raise ObjectNotFoundError(f"Cart item {command.item_id} not found")

        product = current_domain.repository_for(Product).get(item.product_id)
        if not product.can_supply(command.quantity):
            raise ProductUnavailable(product_id=str(product.id))

        cart.set_quantity(command.item_id, command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_user(command.user_id)
        if cart is None or not cart.remove_item(command.item_id):
            logger.debug("cart_item_absent", user_id=command.user_id, item_id=command.item_id)
            return
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_user(command.user_id)
        if cart is None or cart.is_empty:
            return
        cart.clear()
        repo.add(cart)
