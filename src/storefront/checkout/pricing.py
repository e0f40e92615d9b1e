"""Order pricing: flat-rate shipping plus a fixed tax rate on the subtotal."""

import os
from dataclasses import dataclass
from decimal import Decimal

from storefront.cart.listing import compute_total
from storefront.shared.money import to_money

FLAT_SHIPPING_RATE = to_money(os.environ.get("STOREFRONT_FLAT_SHIPPING_RATE", "15.00"))
TAX_RATE = Decimal(os.environ.get("STOREFRONT_TAX_RATE", "0.08"))


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    total_amount: Decimal

    def as_dict(self) -> dict:
        return {
            "subtotal": float(self.subtotal),
            "shipping_cost": float(self.shipping_cost),
            "tax_amount": float(self.tax_amount),
            "total_amount": float(self.total_amount),
        }


def price_order(lines, shipping_rate: Decimal = FLAT_SHIPPING_RATE, tax_rate: Decimal = TAX_RATE) -> PriceBreakdown:
    """Price lines that expose `unit_price` and `quantity`."""
    subtotal = compute_total(lines)
    shipping = to_money(shipping_rate)
    tax = to_money(subtotal * tax_rate)
    return PriceBreakdown(
        subtotal=subtotal,
        shipping_cost=shipping,
        tax_amount=tax,
        total_amount=to_money(subtotal + shipping + tax),
    )
