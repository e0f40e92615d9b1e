"""Application tests for the customer dashboard figures."""

from datetime import UTC, datetime
from decimal import Decimal

from protean import current_domain
from storefront.order.order import Order, OrderPricing, ShippingAddress
from storefront.order.summary import customer_summary, loyalty_status, order_frequency

ADDRESS = {
    "full_name": "Ada Lovelace",
    "address": "12 Gallery Lane",
    "city": "London",
    "postal_code": "N1 9GU",
    "country": "UK",
}


def _record(user_id, placed_at, categories, total, number):
    """Store an order placed at `placed_at` with one line per category."""
    order = Order.place(
        user_id=user_id,
        order_number=number,
        lines=[
            {"product_id": f"p-{i}", "title": f"Piece {i}", "unit_price": 10.0, "quantity": 1, "category": category}
            for i, category in enumerate(categories)
        ],
        shipping_address=ShippingAddress(**ADDRESS),
        pricing=OrderPricing(subtotal=total, shipping_cost=0.0, tax_amount=0.0, total_amount=total),
    )
    order.placed_at = placed_at
    current_domain.repository_for(Order).add(order)
    return str(order.id)


class TestCustomerSummary:
    def test_no_orders(self):
        summary = customer_summary("user-1")

        assert summary.total_orders == 0
        assert summary.total_spent == Decimal("0.00")
        assert summary.average_order_value == Decimal("0.00")
        assert summary.total_items == 0
        assert summary.favorite_category == "N/A"
        assert summary.order_frequency == "0/month"
        assert summary.loyalty_status == "Bronze"

    def test_totals_and_favourite_category(self):
        _record("user-1", datetime(2026, 1, 10, tzinfo=UTC), ["Painting", "Sculpture"], 40.0, "ORD-000001-0001")
        _record("user-1", datetime(2026, 2, 10, tzinfo=UTC), ["Sculpture"], 25.5, "ORD-000002-0001")
        _record("user-1", datetime(2026, 3, 10, tzinfo=UTC), ["Print", "Sculpture"], 60.0, "ORD-000003-0001")

        summary = customer_summary("user-1")

        assert summary.total_orders == 3
        assert summary.total_spent == Decimal("125.50")
        assert summary.average_order_value == Decimal("41.83")
        assert summary.total_items == 5
        assert summary.favorite_category == "Sculpture"
        assert summary.order_frequency == "1.5/month"
        assert summary.loyalty_status == "Silver"

    def test_tie_goes_to_the_category_bought_first(self):
        _record("user-1", datetime(2026, 1, 10, tzinfo=UTC), ["Print"], 10.0, "ORD-000001-0001")
        _record("user-1", datetime(2026, 2, 10, tzinfo=UTC), ["Painting"], 10.0, "ORD-000002-0001")

        assert customer_summary("user-1").favorite_category == "Print"

    def test_lines_without_category_are_not_counted(self):
        _record("user-1", datetime(2026, 1, 10, tzinfo=UTC), [None, None], 20.0, "ORD-000001-0001")

        summary = customer_summary("user-1")
        assert summary.total_items == 2
        assert summary.favorite_category == "N/A"

    def test_only_the_users_own_orders_count(self):
        _record("user-1", datetime(2026, 1, 10, tzinfo=UTC), ["Painting"], 10.0, "ORD-000001-0001")
        _record("user-2", datetime(2026, 1, 11, tzinfo=UTC), ["Print"], 99.0, "ORD-000002-0001")

        summary = customer_summary("user-1")
        assert summary.total_orders == 1
        assert summary.total_spent == Decimal("10.00")

    def test_category_comes_from_the_purchase_snapshot(self, make_user, make_product, delivery):
        from storefront.cart.items import AddToCart
        from storefront.catalogue.management import UpdateProductDetails
        from storefront.checkout.workflow import place_order, request_checkout_otp

        user_id = make_user()
        product_id = make_product(category="Ceramics")
        current_domain.process(AddToCart(user_id=user_id, product_id=product_id, quantity=1), asynchronous=False)
        request_checkout_otp(user_id)
        place_order(user_id, delivery.last_code(), ADDRESS)

        current_domain.process(UpdateProductDetails(product_id=product_id, category="Textiles"), asynchronous=False)

        assert customer_summary(user_id).favorite_category == "Ceramics"


class TestLoyaltyStatus:
    def test_thresholds(self):
        assert [loyalty_status(n) for n in (0, 2, 3, 4, 5, 12)] == [
            "Bronze",
            "Bronze",
            "Silver",
            "Silver",
            "Gold",
            "Gold",
        ]


class TestOrderFrequency:
    def test_single_order_is_the_plain_count(self):
        assert order_frequency([datetime(2026, 5, 1, tzinfo=UTC)]) == "1/month"

    def test_same_instant_is_the_plain_count(self):
        moment = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)
        assert order_frequency([moment, moment]) == "2/month"

    def test_same_calendar_month(self):
        stamps = [datetime(2026, 5, 1, tzinfo=UTC), datetime(2026, 5, 20, tzinfo=UTC)]
        assert order_frequency(stamps) == "2.0/month"

    def test_spread_over_months(self):
        stamps = [
            datetime(2026, 1, 31, tzinfo=UTC),
            datetime(2026, 3, 1, tzinfo=UTC),
            datetime(2026, 4, 15, tzinfo=UTC),
            datetime(2025, 12, 1, tzinfo=UTC),
        ]
        assert order_frequency(stamps) == "1.0/month"

    def test_naive_datetimes_are_read_as_utc(self):
        stamps = [datetime(2026, 1, 1), datetime(2026, 3, 1, tzinfo=UTC)]
        assert order_frequency(stamps) == "1.0/month"
