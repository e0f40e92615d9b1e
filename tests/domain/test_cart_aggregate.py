"""Tests for the ShoppingCart aggregate."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated


def _make_cart():
    return ShoppingCart.create(user_id="user-001")


class TestAddItem:
    def test_add_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available_stock=10)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_adding_same_product_tops_up_one_line(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available_stock=10)
        cart.add_item("prod-001", 3, available_stock=10)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5

    def test_top_up_is_clamped_to_stock(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available_stock=4)
        cart.add_item("prod-001", 3, available_stock=4)
        assert cart.items[0].quantity == 4

    def test_raises_item_added_with_final_quantity(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available_stock=3)
        cart.add_item("prod-001", 2, available_stock=3)
        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(events) == 2
        assert events[1].requested_quantity == 2
        assert events[1].quantity == 3

    def test_different_products_get_separate_lines(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_stock=5)
        cart.add_item("prod-002", 1, available_stock=5)
        assert len(cart.items) == 2

    def test_zero_quantity_rejected(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item("prod-001", 0, available_stock=5)


class TestSetQuantity:
    def test_overwrites_quantity(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1, available_stock=5)
        cart.set_quantity(item.id, 4)
        assert cart.items[0].quantity == 4
        event = cart._events[-1]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 1
        assert event.new_quantity == 4

    def test_quantity_below_one_rejected(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1, available_stock=5)
        with pytest.raises(ValidationError):
            cart.set_quantity(item.id, 0)

    def test_unknown_line_is_not_found(self):
        cart = _make_cart()
        with pytest.raises(ObjectNotFoundError):
            cart.set_quantity("missing", 2)


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1, available_stock=5)
        assert cart.remove_item(item.id) is True
        assert cart.is_empty
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_removing_unknown_line_is_a_no_op(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_stock=5)
        cart._events.clear()
        assert cart.remove_item("missing") is False
        assert len(cart.items) == 1
        assert cart._events == []

    def test_clear_drops_every_line(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_stock=5)
        cart.add_item("prod-002", 2, available_stock=5)
        cart.clear()
        assert cart.is_empty
        event = cart._events[-1]
        assert isinstance(event, CartCleared)
        assert event.items_removed == 2

    def test_clearing_empty_cart_raises_nothing(self):
        cart = _make_cart()
        cart.clear()
        assert cart._events == []
