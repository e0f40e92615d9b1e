"""Cart reads: lines joined with the current product snapshot."""

from dataclasses import dataclass
from decimal import Decimal

from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.shared.money import to_money


@dataclass(frozen=True)
class CartLine:
    """A cart line as the customer sees it, priced at today's catalogue price."""

    id: str
    product_id: str
    quantity: int
    title: str
    unit_price: Decimal
    image_url: str | None
    stock_quantity: int
    is_available: bool

    @property
    def line_total(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)


def list_cart(user_id) -> list[CartLine]:
    cart = current_domain.repository_for(ShoppingCart).find_for_user(user_id)
    if cart is None:
        return []

    products = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        product = products.get(item.product_id)
        lines.append(
            CartLine(
                id=str(item.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
                title=product.title,
                unit_price=to_money(product.price),
                image_url=product.image_url,
                stock_quantity=product.stock_quantity,
                is_available=bool(product.is_available),
            )
        )
    return lines


def compute_total(lines) -> Decimal:
    return to_money(sum((to_money(line.unit_price) * line.quantity for line in lines), Decimal("0")))
