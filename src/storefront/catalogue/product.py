"""Product aggregate — an artwork on sale and its sellable stock.

Availability is never set directly. It is derived from the manual enabled
flag and the stock count and refreshed on every mutation that touches either.
Products are never deleted; `disable()` hides them from sale instead.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.catalogue.events import (
    ProductAdded,
    ProductAvailabilityChanged,
    ProductDetailsUpdated,
    ProductRestocked,
    ProductStockWithdrawn,
)
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


@storefront.aggregate
class Product:
    title: String(required=True, max_length=255)
    description: Text()
    category: String(max_length=100)
    price: Float(required=True, min_value=0.0)
    image_url: String(max_length=1000)
    stock_quantity: Integer(default=0, min_value=0)
    is_enabled: Boolean(default=True)
    is_available: Boolean(default=False)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def availability_follows_stock_and_enabled_flag(self):
        expected = bool(self.is_enabled) and (self.stock_quantity or 0) > 0
        if bool(self.is_available) != expected:
            raise ValidationError({"is_available": ["Availability must reflect stock and the enabled flag"]})

    @classmethod
    def add(cls, title, price, stock_quantity=0, description=None, category=None, image_url=None, is_enabled=True):
        now = datetime.now(UTC)
        product = cls(
            title=title,
            description=description,
            category=category,
            price=price,
            image_url=image_url,
            stock_quantity=stock_quantity,
            is_enabled=is_enabled,
            is_available=bool(is_enabled) and stock_quantity > 0,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                title=title,
                category=category,
                price=price,
                stock_quantity=stock_quantity,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def can_supply(self, quantity) -> bool:
        return bool(self.is_available) and self.stock_quantity >= quantity

    def withdraw(self, quantity):
        """Take `quantity` units off the shelf, refusing to go below zero.

        This is the compare-and-decrement used by order placement: the check
        and the decrement happen on the same loaded state.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.can_supply(quantity):
            raise InsufficientStock(self.id, self.title)

        with atomic_change(self):
            self.stock_quantity = max(self.stock_quantity - quantity, 0)
            self.updated_at = datetime.now(UTC)
            became_unavailable = self._refresh_availability()

        self.raise_(
            ProductStockWithdrawn(
                product_id=self.id,
                quantity=quantity,
                remaining_quantity=self.stock_quantity,
            )
        )
        if became_unavailable:
            self._announce_availability("sold_out")

    def restock(self, quantity):
        """Set the stock count to an absolute value."""
        if quantity is None or quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock cannot be negative"]})

        previous = self.stock_quantity
        with atomic_change(self):
            self.stock_quantity = quantity
            self.updated_at = datetime.now(UTC)
            changed = self._refresh_availability()

        self.raise_(
            ProductRestocked(
                product_id=self.id,
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )
        if changed:
            self._announce_availability("restocked" if self.is_available else "sold_out")

    # -------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------
    def enable(self):
        with atomic_change(self):
            self.is_enabled = True
            changed = self._refresh_availability()
        if changed:
            self._announce_availability("enabled")

    def disable(self):
        with atomic_change(self):
            self.is_enabled = False
            changed = self._refresh_availability()
        if changed:
            self._announce_availability("disabled")

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(
        self,
        title=_UNSET,
        description=_UNSET,
        category=_UNSET,
        price=_UNSET,
        image_url=_UNSET,
    ):
        with atomic_change(self):
            if title is not _UNSET:
                self.title = title
            if description is not _UNSET:
                self.description = description
            if category is not _UNSET:
                self.category = category
            if price is not _UNSET:
                self.price = price
            if image_url is not _UNSET:
                self.image_url = image_url
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                title=self.title,
                category=self.category,
                price=self.price,
            )
        )

    def _refresh_availability(self) -> bool:
        """Recompute `is_available`; True when it flipped."""
        available = bool(self.is_enabled) and self.stock_quantity > 0
        if available == bool(self.is_available):
            return False
        self.is_available = available
        return True

    def _announce_availability(self, reason):
        self.raise_(
            ProductAvailabilityChanged(
                product_id=self.id,
                is_available=self.is_available,
                reason=reason,
            )
        )


@storefront.repository(part_of=Product)
class ProductRepository:
    """Catalogue lookups used by the storefront listing."""

    def search(self, term: str | None = None, category: str | None = None, include_disabled: bool = False):
        products = self._dao.query.all().items
        if not include_disabled:
            products = [p for p in products if p.is_enabled]
        if category:
            products = [p for p in products if (p.category or "").lower() == category.lower()]
        if term:
            needle = term.lower()
            products = [
                p
                for p in products
                if needle in (p.title or "").lower()
                or needle in (p.description or "").lower()
                or needle in (p.category or "").lower()
            ]
        return sorted(products, key=lambda p: p.title.lower())

    def categories(self) -> list[str]:
        return sorted({p.category for p in self._dao.query.all().items if p.category and p.is_enabled})
