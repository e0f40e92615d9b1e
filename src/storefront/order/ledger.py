"""Order ledger reads scoped to the asking user."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.order.order import Order


def orders_for_user(user_id) -> list[Order]:
    return current_domain.repository_for(Order).find_by_user(user_id)


def order_for_user(user_id, order_id) -> Order:
    """Fetch an order, treating someone else's order as missing."""
    order = current_domain.repository_for(Order).get(order_id)
    if str(order.user_id) != str(user_id):
        raise ObjectNotFoundError(f"Order {order_id} not found")
    return order
