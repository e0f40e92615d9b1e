"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart
from storefront.catalogue.product import Product
from storefront.order.order import Order


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the storefront error raised by the last step."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Product ids by title."""
    return {}


@pytest.fixture()
def placed():
    return {"order_id": None, "code": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a registered customer "{email}"'), target_fixture="customer_id")
def registered_customer(make_user, email):
    return make_user(email=email)


@given(parsers.cfparse('the catalogue has "{title}" priced {price:f} with {stock:d} in stock'))
def catalogue_has(make_product, products, title, price, stock):
    products[title] = make_product(title=title, price=price, stock_quantity=stock)


@given(parsers.cfparse('the cart holds {quantity:d} of "{title}"'))
def cart_holds(customer_id, products, quantity, title):
    current_domain.process(
        AddToCart(user_id=customer_id, product_id=products[title], quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request fails with "{code}"'))
def request_fails_with(error, code):
    assert error["exc"] is not None, "Expected a storefront error but none was raised"
    assert error["exc"].code == code


@then(parsers.cfparse('"{title}" has {stock:d} in stock'))
def product_has_stock(products, title, stock):
    assert current_domain.repository_for(Product).get(products[title]).stock_quantity == stock


@then("the cart is empty")
def cart_is_empty(customer_id):
    assert current_domain.repository_for(ShoppingCart).find_for_user(customer_id).is_empty


@then(parsers.cfparse("the cart still holds {count:d} lines"))
def cart_still_holds(customer_id, count):
    assert len(current_domain.repository_for(ShoppingCart).find_for_user(customer_id).items) == count


@then("no order is recorded")
def no_order_recorded():
    assert current_domain.repository_for(Order).find_all() == []


@then(parsers.cfparse("{count:d} order is recorded"))
def orders_recorded(count):
    assert len(current_domain.repository_for(Order).find_all()) == count
