"""Shopping Cart aggregate — one per user, holding the lines to be checked out.

Lines are unique per product: adding a product that is already in the cart
tops up the existing line. Quantities are clamped to the stock seen at the
time of the change and not checked again until checkout.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from storefront.domain import storefront


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def line(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    @property
    def is_empty(self) -> bool:
        return not self.items

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, available_stock):
        """Add `quantity` of a product, clamping the line to `available_stock`."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.line_for(product_id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity = min(existing.quantity + quantity, available_stock)
            item = existing
        else:
            item = CartItem(
                product_id=product_id,
                quantity=min(quantity, available_stock),
                added_at=now,
            )
            self.add_items(item)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                item_id=str(item.id),
                product_id=str(product_id),
                requested_quantity=quantity,
                quantity=item.quantity,
            )
        )
        return item

    def set_quantity(self, item_id, quantity):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self.line(item_id)
        if item is None:
            raise ObjectNotFoundError(f"Cart item {item_id} not found")

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id) -> bool:
        """Drop a line. Removing a line that is not there is a no-op."""
        item = self.line(item_id)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
                product_id=str(item.product_id),
            )
        )
        return True

    def clear(self):
        removed = len(self.items)
        if removed == 0:
            return

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                items_removed=removed,
            )
        )


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_user(self, user_id) -> ShoppingCart | None:
        carts = self._dao.query.filter(user_id=str(user_id)).all().items
        return carts[0] if carts else None

    def for_user(self, user_id) -> ShoppingCart:
        """The user's cart, created on first use."""
        cart = self.find_for_user(user_id)
        if cart is None:
            cart = ShoppingCart.create(user_id=str(user_id))
        return cart
