"""Tests for money helpers and order pricing."""

from decimal import Decimal

from storefront.cart.listing import CartLine, compute_total
from storefront.checkout.pricing import price_order
from storefront.shared.money import to_money


def _line(price, quantity, product_id="prod"):
    return CartLine(
        id=f"line-{product_id}",
        product_id=product_id,
        quantity=quantity,
        title=product_id,
        unit_price=to_money(price),
        image_url=None,
        stock_quantity=quantity,
        is_available=True,
    )


class TestToMoney:
    def test_float_goes_through_str(self):
        assert to_money(0.1) == Decimal("0.10")

    def test_rounds_half_up(self):
        assert to_money("2.005") == Decimal("2.01")


class TestComputeTotal:
    def test_sums_price_times_quantity(self):
        lines = [_line(10, 2, "a"), _line(5, 1, "b")]
        assert compute_total(lines) == Decimal("25.00")

    def test_empty_cart_totals_zero(self):
        assert compute_total([]) == Decimal("0.00")

    def test_line_total(self):
        assert _line("19.99", 3).line_total == Decimal("59.97")


class TestPriceOrder:
    def test_flat_shipping_and_eight_percent_tax(self):
        breakdown = price_order([_line(10, 2, "a"), _line(5, 1, "b")])
        assert breakdown.subtotal == Decimal("25.00")
        assert breakdown.shipping_cost == Decimal("15.00")
        assert breakdown.tax_amount == Decimal("2.00")
        assert breakdown.total_amount == Decimal("42.00")

    def test_tax_rounded_to_cents(self):
        breakdown = price_order([_line("12.34", 1)])
        assert breakdown.tax_amount == Decimal("0.99")
        assert breakdown.total_amount == Decimal("28.33")

    def test_custom_rates(self):
        breakdown = price_order([_line(100, 1)], shipping_rate=Decimal("0"), tax_rate=Decimal("0.2"))
        assert breakdown.total_amount == Decimal("120.00")

    def test_as_dict_uses_floats(self):
        breakdown = price_order([_line(10, 2, "a"), _line(5, 1, "b")])
        assert breakdown.as_dict() == {
            "subtotal": 25.0,
            "shipping_cost": 15.0,
            "tax_amount": 2.0,
            "total_amount": 42.0,
        }
