"""Order aggregate — the durable record of a completed purchase.

Line items are snapshots of the catalogue at purchase time and never change
afterwards. Status moves forward through the map below; every change,
including a note-only entry on the current status, appends to the history.

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING / PROCESSING → CANCELLED
"""

from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.shared.clock import as_utc, utcnow


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes, as typed at checkout. Later profile edits do not touch it."""

    full_name = String(required=True, max_length=200)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(max_length=30)


@storefront.value_object(part_of="Order")
class OrderPricing:
    subtotal = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    tax_amount = Float(default=0.0)
    total_amount = Float(default=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image_url = String(max_length=1000)
    category = String(max_length=100)
    position = Integer(default=0)


@storefront.entity(part_of="Order")
class StatusChange:
    status = String(required=True, choices=OrderStatus)
    note = Text()
    changed_by = Identifier()
    changed_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    order_number = String(required=True, max_length=50, unique=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    history = HasMany(StatusChange)
    shipping_address = ValueObject(ShippingAddress)
    pricing = ValueObject(OrderPricing)
    placed_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def place(cls, user_id, order_number, lines, shipping_address, pricing):
        """Record a purchase.

        `lines` are dicts with product_id, title, unit_price, quantity,
        image_url and category, already validated against stock by the caller.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = utcnow()
        order = cls(
            user_id=str(user_id),
            order_number=order_number,
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
            pricing=pricing,
            placed_at=now,
            updated_at=now,
        )
        for position, line in enumerate(lines):
            order.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    title=line["title"],
                    unit_price=float(line["unit_price"]),
                    quantity=line["quantity"],
                    image_url=line.get("image_url"),
                    category=line.get("category"),
                    position=position,
                )
            )
        order.add_history(
            StatusChange(
                status=OrderStatus.PENDING.value,
                note="Order placed",
                changed_at=now,
            )
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                item_count=sum(line["quantity"] for line in lines),
                total_amount=pricing.total_amount,
                placed_at=now,
            )
        )
        return order

    @property
    def sorted_items(self):
        return sorted(self.items, key=lambda i: i.position or 0)

    @property
    def timeline(self):
        return sorted(self.history, key=lambda h: as_utc(h.changed_at))

    def can_move_to(self, status: OrderStatus) -> bool:
        return status in _VALID_TRANSITIONS[OrderStatus(self.status)]

    def append_status(self, status, note=None, changed_by=None):
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {status!r}"]}) from None

        current = OrderStatus(self.status)
        if target != current and not self.can_move_to(target):
            raise ValidationError({"status": [f"Cannot move order from {current.value} to {target.value}"]})

        now = utcnow()
        self.add_history(
            StatusChange(
                status=target.value,
                note=note,
                changed_by=changed_by,
                changed_at=now,
            )
        )
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                note=note,
                changed_at=now,
            )
        )


@storefront.repository(part_of=Order)
class OrderRepository:
    def number_taken(self, order_number: str) -> bool:
        return bool(self._dao.query.filter(order_number=order_number).all().items)

    def find_by_user(self, user_id) -> list[Order]:
        """A user's orders, newest first."""
        orders = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(orders, key=lambda o: as_utc(o.placed_at), reverse=True)

    def find_all(self) -> list[Order]:
        orders = self._dao.query.all().items
        return sorted(orders, key=lambda o: as_utc(o.placed_at), reverse=True)
