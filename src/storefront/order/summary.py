"""Customer dashboard figures, computed from the user's order snapshots.

Categories come from the line snapshots taken at purchase, so a product
that was later re-categorised or removed still counts the way it was sold.
"""

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal

from storefront.order.ledger import orders_for_user
from storefront.shared.clock import as_utc
from storefront.shared.money import to_money

NO_CATEGORY = "N/A"

GOLD_ORDERS = 5
SILVER_ORDERS = 3


@dataclass(frozen=True)
class CustomerSummary:
    total_orders: int
    total_spent: Decimal
    average_order_value: Decimal
    total_items: int
    favorite_category: str
    order_frequency: str
    loyalty_status: str


def loyalty_status(order_count: int) -> str:
    if order_count >= GOLD_ORDERS:
        return "Gold"
    if order_count >= SILVER_ORDERS:
        return "Silver"
    return "Bronze"


def order_frequency(placed_at: list) -> str:
    """Orders per calendar month between the first and the latest order.

    A single order, or orders all stamped with the same instant, reads as the
    plain count. Several orders within one calendar month read as the count
    with one decimal place.
    """
    if not placed_at:
        return "0/month"

    stamps = sorted(as_utc(p) for p in placed_at)
    first, last = stamps[0], stamps[-1]
    if len(stamps) == 1 or first == last:
        return f"{len(stamps)}/month"

    months = (last.year - first.year) * 12 + (last.month - first.month)
    frequency = len(stamps) / months if months > 0 else len(stamps)
    return f"{frequency:.1f}/month"


def favorite_category(orders) -> str:
    """Most frequent line category; ties go to the category seen first, oldest order first."""
    counts = Counter(
        item.category
        for order in orders
        for item in order.sorted_items
        if item.category
    )
    if not counts:
        return NO_CATEGORY
    return counts.most_common(1)[0][0]


def customer_summary(user_id) -> CustomerSummary:
    orders = list(reversed(orders_for_user(user_id)))

    total_spent = to_money(sum((to_money(o.pricing.total_amount) for o in orders), Decimal("0")))
    average = to_money(total_spent / len(orders)) if orders else to_money(0)

    return CustomerSummary(
        total_orders=len(orders),
        total_spent=total_spent,
        average_order_value=average,
        total_items=sum(len(o.items) for o in orders),
        favorite_category=favorite_category(orders),
        order_frequency=order_frequency([o.placed_at for o in orders]),
        loyalty_status=loyalty_status(len(orders)),
    )
