"""Domain events for the CustomOrder aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="CustomOrder")
class CustomOrderSubmitted:
    """A customer asked for a commissioned piece after confirming their code."""

    __version__ = 1

    custom_order_id: Identifier(required=True)
    order_number: String(required=True, max_length=50)
    user_id: Identifier(required=True)
    title: String(required=True, max_length=255)
    expected_price: Float()
    submitted_at: DateTime(required=True)


@storefront.event(part_of="CustomOrder")
class CustomOrderStatusChanged:
    __version__ = 1

    custom_order_id: Identifier(required=True)
    previous_status: String(required=True, max_length=50)
    new_status: String(required=True, max_length=50)
    approved_price: Float()
    changed_by: Identifier()
    changed_at: DateTime(required=True)
