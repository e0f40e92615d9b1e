"""Tests for the User and PendingRegistration aggregates."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.identity.events import PasswordChanged, UserRegistered
from storefront.identity.passwords import hash_password
from storefront.identity.pending import PendingRegistration
from storefront.identity.user import User


def _register(**overrides):
    defaults = {"email": "Ada@Example.com ", "password_hash": hash_password("s3cret-pass")}
    defaults.update(overrides)
    return User.register(**defaults)


class TestRegister:
    def test_normalizes_email_and_derives_username(self):
        user = _register()
        assert user.email == "ada@example.com"
        assert user.username == "ada"
        assert user.is_verified is True
        assert user.is_admin is False

    def test_raises_user_registered(self):
        user = _register()
        event = user._events[0]
        assert isinstance(event, UserRegistered)
        assert event.email == "ada@example.com"

    def test_checks_password(self):
        user = _register()
        assert user.check_password("s3cret-pass") is True
        assert user.check_password("wrong") is False


class TestProfile:
    def test_partial_update(self):
        user = _register()
        user.update_profile(phone="+44 20 7946 0000")
        assert user.phone == "+44 20 7946 0000"
        assert user.username == "ada"


class TestPasswordReset:
    def test_token_is_live_until_expiry(self):
        user = _register()
        user.start_password_reset(timedelta(hours=1))
        assert user.reset_token_is_live() is True
        assert user.reset_token_is_live(as_of=datetime.now(UTC) + timedelta(hours=2)) is False

    def test_change_password_clears_token(self):
        user = _register()
        user.start_password_reset(timedelta(hours=1))
        user._events.clear()
        user.change_password("brand-new-pass")
        assert user.reset_token is None
        assert user.check_password("brand-new-pass") is True
        assert isinstance(user._events[0], PasswordChanged)

    def test_short_password_rejected(self):
        user = _register()
        with pytest.raises(ValidationError):
            user.change_password("123")


class TestPendingRegistration:
    def test_accepts_its_code_before_expiry(self):
        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        pending = PendingRegistration.start("ada@example.com", "hash", ttl=timedelta(minutes=10), now=now)
        assert pending.accepts(pending.code, as_of=now + timedelta(minutes=5)) is True

    def test_rejects_after_expiry_and_after_use(self):
        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        pending = PendingRegistration.start("ada@example.com", "hash", ttl=timedelta(minutes=10), now=now)
        assert pending.accepts(pending.code, as_of=now + timedelta(minutes=10)) is False
        pending.consume()
        assert pending.accepts(pending.code, as_of=now) is False

    def test_tokens_are_unique(self):
        a = PendingRegistration.start("a@example.com", "hash", ttl=timedelta(minutes=10))
        b = PendingRegistration.start("a@example.com", "hash", ttl=timedelta(minutes=10))
        assert a.token != b.token
