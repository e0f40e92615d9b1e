"""Fixtures for API tests: a bare FastAPI app with the storefront routers and bearer tokens."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    from storefront.api import (
        admin_router,
        auth_router,
        cart_router,
        custom_order_router,
        order_router,
        product_router,
        user_router,
    )
    from storefront.api.errors import register_error_handlers

    app = FastAPI()
    for router in (
        auth_router,
        product_router,
        cart_router,
        order_router,
        custom_order_router,
        user_router,
        admin_router,
    ):
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app, raise_server_exceptions=False)


def _bearer(user_id, email, is_admin=False):
    from storefront.identity.tokens import create_access_token

    return {"Authorization": f"Bearer {create_access_token(user_id, email, is_admin=is_admin)}"}


@pytest.fixture()
def customer(make_user):
    """A registered customer and the headers to act as them."""
    user_id = make_user(email="ada@example.com")
    return {"id": user_id, "email": "ada@example.com", "headers": _bearer(user_id, "ada@example.com")}


@pytest.fixture()
def admin(make_user):
    user_id = make_user(email="curator@example.com", is_admin=True)
    return {"id": user_id, "email": "curator@example.com", "headers": _bearer(user_id, "curator@example.com", True)}
