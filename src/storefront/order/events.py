"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order after the customer's code checked out."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=50)
    new_status = String(required=True, max_length=50)
    note = String(max_length=1000)
    changed_at = DateTime(required=True)
