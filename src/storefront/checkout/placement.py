"""Checkout commands and handler.

`PlaceOrder` runs as a single unit of work: every cart line is checked
against stock before anything is written, and the order, the stock
withdrawals and the emptied cart are committed together.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.listing import CartLine
from storefront.catalogue.product import Product
from storefront.checkout.pricing import price_order
from storefront.domain import storefront
from storefront.identity.user import User
from storefront.order.order import Order, OrderPricing, ShippingAddress
from storefront.shared.errors import EmptyCart, InsufficientStock
from storefront.shared.money import to_money
from storefront.shared.numbering import allocate_number
from storefront.utils.logging import get_logger
from storefront.verification.code import CodePurpose
from storefront.verification.issuer import issue_code

logger = get_logger(__name__)

ORDER_NUMBER_PREFIX = "ORD"


@storefront.command(part_of="ShoppingCart")
class RequestCheckoutCode:
    user_id = Identifier(required=True)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: ShippingAddress fields


@storefront.command_handler(part_of=ShoppingCart)
class RequestCheckoutCodeHandler:
    @handle(RequestCheckoutCode)
    def request_checkout_code(self, command):
        cart = current_domain.repository_for(ShoppingCart).find_for_user(command.user_id)
        if cart is None or cart.is_empty:
            raise EmptyCart()

        user = current_domain.repository_for(User).get(command.user_id)
        otp = issue_code(command.user_id, CodePurpose.ORDER_PLACEMENT.value, recipient=user.email)
        return str(otp.id)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.find_for_user(command.user_id)
        if cart is None or cart.is_empty:
            raise EmptyCart()

        shipping_data = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        shipping_address = ShippingAddress(**shipping_data)

        # Validate every line before touching any stock
        product_repo = current_domain.repository_for(Product)
        reserved = []
        for item in cart.items:
            try:
                product = product_repo.get(item.product_id)
            except ObjectNotFoundError:
                raise InsufficientStock(item.product_id) from None
            if not product.can_supply(item.quantity):
                raise InsufficientStock(product.id, product.title)
            reserved.append((item, product))

        lines = [
            CartLine(
                id=str(item.id),
                product_id=str(product.id),
                quantity=item.quantity,
                title=product.title,
                unit_price=to_money(product.price),
                image_url=product.image_url,
                stock_quantity=product.stock_quantity,
                is_available=bool(product.is_available),
            )
            for item, product in reserved
        ]
        breakdown = price_order(lines)

        order_repo = current_domain.repository_for(Order)
        order = Order.place(
            user_id=command.user_id,
            order_number=allocate_number(ORDER_NUMBER_PREFIX, order_repo.number_taken),
            lines=[
                {
                    "product_id": line.product_id,
                    "title": line.title,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                    "image_url": line.image_url,
                    "category": product.category,
                }
                for line, (_, product) in zip(lines, reserved)
            ],
            shipping_address=shipping_address,
            pricing=OrderPricing(**breakdown.as_dict()),
        )

        for item, product in reserved:
            product.withdraw(item.quantity)
            product_repo.add(product)

        cart.clear()
        cart_repo.add(cart)
        order_repo.add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            total_amount=str(breakdown.total_amount),
        )
        return str(order.id)
