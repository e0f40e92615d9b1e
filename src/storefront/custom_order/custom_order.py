"""CustomOrder aggregate — a request for a commissioned artwork.

Submitted by a customer after confirming a one-time code, then reviewed by
an admin who approves it (optionally at a price), rejects it, or moves it
through production.

State Machine:
    PENDING → APPROVED → IN_PRODUCTION → COMPLETED
    PENDING / APPROVED → REJECTED
"""

import json
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, String, Text, ValueObject

from storefront.custom_order.events import CustomOrderStatusChanged, CustomOrderSubmitted
from storefront.domain import storefront
from storefront.shared.clock import as_utc, utcnow


class CustomOrderStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    IN_PRODUCTION = "in_production"
    COMPLETED = "completed"


_VALID_TRANSITIONS = {
    CustomOrderStatus.PENDING: {CustomOrderStatus.APPROVED, CustomOrderStatus.REJECTED},
    CustomOrderStatus.APPROVED: {CustomOrderStatus.IN_PRODUCTION, CustomOrderStatus.REJECTED},
    CustomOrderStatus.IN_PRODUCTION: {CustomOrderStatus.COMPLETED},
    CustomOrderStatus.REJECTED: set(),  # Terminal
    CustomOrderStatus.COMPLETED: set(),  # Terminal
}


@storefront.value_object(part_of="CustomOrder")
class CustomerInfo:
    name: String(required=True, max_length=200)
    phone: String(required=True, max_length=30)
    email: String(required=True, max_length=254)
    otp_verified: Boolean(default=False)


@storefront.value_object(part_of="CustomOrder")
class ProductRequest:
    """What the customer wants made. `attachments` is a JSON array of reference image URLs."""

    title: String(required=True, max_length=255)
    description: Text(required=True)
    specifications: Text()
    customizations: Text()
    expected_price: Float(default=0.0, min_value=0.0)
    attachments: Text()

    @property
    def attachment_urls(self) -> list[str]:
        return json.loads(self.attachments) if self.attachments else []


@storefront.value_object(part_of="CustomOrder")
class DeliveryAddress:
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip: String(required=True, max_length=20)
    country: String(required=True, max_length=100)


@storefront.entity(part_of="CustomOrder")
class CustomOrderStatusChange:
    status: String(required=True, choices=CustomOrderStatus)
    note: Text()
    changed_by: Identifier()
    changed_at: DateTime(required=True)


@storefront.aggregate
class CustomOrder:
    user_id: Identifier(required=True)
    order_number: String(required=True, max_length=50, unique=True)
    customer_info: ValueObject(CustomerInfo)
    product_details: ValueObject(ProductRequest)
    shipping_address: ValueObject(DeliveryAddress)
    status: String(choices=CustomOrderStatus, default=CustomOrderStatus.PENDING.value)
    history: HasMany(CustomOrderStatusChange)
    admin_notes: Text()
    validation_notes: Text()
    approved_price: Float(min_value=0.0)
    approved_by: Identifier()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def submit(cls, user_id, order_number, customer_info, product_details, shipping_address):
        """Record a request whose code has already been verified."""
        now = utcnow()
        custom_order = cls(
            user_id=str(user_id),
            order_number=order_number,
            customer_info=CustomerInfo(**{**customer_info, "otp_verified": True}),
            product_details=ProductRequest(**product_details),
            shipping_address=DeliveryAddress(**shipping_address),
            status=CustomOrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        custom_order.add_history(
            CustomOrderStatusChange(
                status=CustomOrderStatus.PENDING.value,
                note="Custom order placed",
                changed_at=now,
            )
        )

        custom_order.raise_(
            CustomOrderSubmitted(
                custom_order_id=custom_order.id,
                order_number=order_number,
                user_id=str(user_id),
                title=custom_order.product_details.title,
                expected_price=custom_order.product_details.expected_price,
                submitted_at=now,
            )
        )
        return custom_order

    @property
    def timeline(self):
        return sorted(self.history, key=lambda h: as_utc(h.changed_at))

    def update_status(self, status, changed_by, admin_notes=None, approved_price=None, validation_notes=None):
        try:
            target = CustomOrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown custom order status {status!r}"]}) from None

        current = CustomOrderStatus(self.status)
        if target != current and target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot move custom order from {current.value} to {target.value}"]})

        now = utcnow()
        if admin_notes is not None:
            self.admin_notes = admin_notes
        if approved_price is not None:
            self.approved_price = approved_price
        if validation_notes is not None:
            self.validation_notes = validation_notes
        self.approved_by = changed_by
        self.status = target.value
        self.updated_at = now

        note = f"Status updated to {target.value}"
        if validation_notes:
            note = f"{note} - {validation_notes}"
        self.add_history(
            CustomOrderStatusChange(
                status=target.value,
                note=note,
                changed_by=changed_by,
                changed_at=now,
            )
        )

        self.raise_(
            CustomOrderStatusChanged(
                custom_order_id=self.id,
                previous_status=current.value,
                new_status=target.value,
                approved_price=self.approved_price,
                changed_by=changed_by,
                changed_at=now,
            )
        )


@storefront.repository(part_of=CustomOrder)
class CustomOrderRepository:
    def number_taken(self, order_number: str) -> bool:
        return bool(self._dao.query.filter(order_number=order_number).all().items)

    def find_by_user(self, user_id) -> list[CustomOrder]:
        orders = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(orders, key=lambda o: as_utc(o.created_at), reverse=True)

    def find_all(self) -> list[CustomOrder]:
        orders = self._dao.query.all().items
        return sorted(orders, key=lambda o: as_utc(o.created_at), reverse=True)
