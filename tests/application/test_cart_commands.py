"""Application tests for cart commands and cart reads."""

from decimal import Decimal

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.listing import compute_total, list_cart
from storefront.catalogue.management import DisableProduct
from storefront.shared.errors import ProductUnavailable

USER = "user-1"


def _add(product_id, quantity=1, user_id=USER):
    return current_domain.process(
        AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


def _cart(user_id=USER):
    return current_domain.repository_for(ShoppingCart).find_for_user(user_id)


class TestAddToCart:
    def test_creates_cart_on_first_add(self, make_product):
        product_id = make_product()
        item_id = _add(product_id, 2)

        cart = _cart()
        assert len(cart.items) == 1
        assert cart.line(item_id).quantity == 2

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            _add("no-such-product")

    def test_disabled_product_is_unavailable(self, make_product):
        product_id = make_product()
        current_domain.process(DisableProduct(product_id=product_id), asynchronous=False)
        with pytest.raises(ProductUnavailable):
            _add(product_id)

    def test_more_than_stock_is_unavailable(self, make_product):
        product_id = make_product(stock_quantity=2)
        with pytest.raises(ProductUnavailable):
            _add(product_id, 3)

    def test_adding_twice_merges_and_caps_at_stock(self, make_product):
        product_id = make_product(stock_quantity=4)
        _add(product_id, 3)
        _add(product_id, 2)

        cart = _cart()
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 4

    def test_carts_are_per_user(self, make_product):
        product_id = make_product()
        _add(product_id, user_id="user-1")
        _add(product_id, user_id="user-2")

        assert len(_cart("user-1").items) == 1
        assert len(_cart("user-2").items) == 1


class TestUpdateQuantity:
    def test_sets_quantity(self, make_product):
        item_id = _add(make_product(stock_quantity=5), 1)
        current_domain.process(UpdateCartQuantity(user_id=USER, item_id=item_id, quantity=4), asynchronous=False)
        assert _cart().line(item_id).quantity == 4

    def test_above_stock_is_unavailable(self, make_product):
        item_id = _add(make_product(stock_quantity=2), 1)
        with pytest.raises(ProductUnavailable):
            current_domain.process(UpdateCartQuantity(user_id=USER, item_id=item_id, quantity=3), asynchronous=False)
        assert _cart().line(item_id).quantity == 1

    def test_missing_line(self, make_product):
        _add(make_product())
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateCartQuantity(user_id=USER, item_id="nope", quantity=1), asynchronous=False)


class TestRemoveAndClear:
    def test_remove_line(self, make_product):
        item_id = _add(make_product())
        current_domain.process(RemoveFromCart(user_id=USER, item_id=item_id), asynchronous=False)
        assert _cart().is_empty

    def test_removing_missing_line_is_a_no_op(self, make_product):
        _add(make_product())
        current_domain.process(RemoveFromCart(user_id=USER, item_id="nope"), asynchronous=False)
        assert len(_cart().items) == 1

    def test_clear(self, make_product):
        _add(make_product(title="One"))
        _add(make_product(title="Two"))
        current_domain.process(ClearCart(user_id=USER), asynchronous=False)
        assert _cart().is_empty

    def test_clear_without_cart(self):
        current_domain.process(ClearCart(user_id="nobody"), asynchronous=False)
        assert _cart("nobody") is None


class TestCartListing:
    def test_lines_carry_current_product_details(self, make_product):
        product_id = make_product(title="Tide Pool", price=12.5, stock_quantity=7)
        _add(product_id, 2)

        [line] = list_cart(USER)
        assert line.title == "Tide Pool"
        assert line.unit_price == Decimal("12.50")
        assert line.line_total == Decimal("25.00")
        assert line.stock_quantity == 7
        assert line.is_available is True

    def test_total(self, make_product):
        _add(make_product(title="A", price=10.0), 2)
        _add(make_product(title="B", price=5.0), 1)
        assert compute_total(list_cart(USER)) == Decimal("25.00")

    def test_no_cart_lists_nothing(self):
        assert list_cart("nobody") == []
        assert compute_total([]) == Decimal("0.00")
