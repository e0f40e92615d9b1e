"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A new artwork was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    title: String(required=True, max_length=255)
    category: String(max_length=100)
    price: Float(required=True)
    stock_quantity: Integer(required=True)
    added_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    title: String(max_length=255)
    category: String(max_length=100)
    price: Float()


@storefront.event(part_of="Product")
class ProductRestocked:
    """Stock was set by an admin to an absolute count."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)


@storefront.event(part_of="Product")
class ProductStockWithdrawn:
    """Units left the shelf because an order was placed."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining_quantity: Integer(required=True)


@storefront.event(part_of="Product")
class ProductAvailabilityChanged:
    __version__ = 1

    product_id: Identifier(required=True)
    is_available: Boolean(required=True)
    reason: String(max_length=50)
