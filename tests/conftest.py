import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported anywhere."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("STOREFRONT_DELIVERY_CHANNEL", "fake")
    os.environ.setdefault("STOREFRONT_PASSWORD_ITERATIONS", "1000")
    os.environ.setdefault("STOREFRONT_LOG_DIR", str(Path(session.config.rootpath) / "logs"))


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    bed = DomainFixture(storefront)
    bed.setup()
    setup_db(storefront)
    yield bed
    drop_db(storefront)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def delivery():
    """Every test gets a fresh in-memory delivery channel to read codes from."""
    from storefront.channel import reset_channel, set_channel
    from storefront.channel.fake import FakeDelivery

    fake = FakeDelivery()
    set_channel(fake)
    yield fake
    reset_channel()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    from protean import current_domain
    from storefront.catalogue.management import AddProduct

    def _make(**overrides):
        defaults = {"title": "Untitled Study", "price": 10.0, "stock_quantity": 5, "category": "Painting"}
        defaults.update(overrides)
        return current_domain.process(AddProduct(**defaults), asynchronous=False)

    return _make


@pytest.fixture()
def make_user():
    from protean import current_domain
    from storefront.identity.passwords import hash_password
    from storefront.identity.user import User

    def _make(email="ada@example.com", password="s3cret-pass", is_admin=False):
        user = User.register(email=email, password_hash=hash_password(password), is_admin=is_admin)
        current_domain.repository_for(User).add(user)
        return str(user.id)

    return _make
