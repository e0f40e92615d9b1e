"""Application tests for the password reset flow."""

from datetime import timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.identity.password_reset import RequestPasswordReset, ResetPassword
from storefront.identity.user import User
from storefront.shared.clock import utcnow


def _users():
    return current_domain.repository_for(User)


class TestRequestPasswordReset:
    def test_sends_link_with_token(self, make_user, delivery):
        user_id = make_user()
        current_domain.process(RequestPasswordReset(email="ada@example.com"), asynchronous=False)

        user = _users().get(user_id)
        assert user.reset_token
        [message] = delivery.sent_messages
        assert message["to"] == "ada@example.com"
        assert f"/reset-password/{user.reset_token}" in message["body"]

    def test_unknown_email_is_silent(self, delivery):
        current_domain.process(RequestPasswordReset(email="nobody@example.com"), asynchronous=False)
        assert delivery.sent_messages == []


class TestResetPassword:
    def _token(self, user_id):
        current_domain.process(RequestPasswordReset(email="ada@example.com"), asynchronous=False)
        return _users().get(user_id).reset_token

    def test_changes_password_and_clears_token(self, make_user):
        user_id = make_user()
        token = self._token(user_id)

        current_domain.process(ResetPassword(token=token, new_password="brand-new"), asynchronous=False)

        user = _users().get(user_id)
        assert user.check_password("brand-new")
        assert not user.check_password("s3cret-pass")
        assert user.reset_token is None

    def test_token_works_once(self, make_user):
        user_id = make_user()
        token = self._token(user_id)
        current_domain.process(ResetPassword(token=token, new_password="brand-new"), asynchronous=False)

        with pytest.raises(ValidationError):
            current_domain.process(ResetPassword(token=token, new_password="another-one"), asynchronous=False)

    def test_unknown_token(self):
        with pytest.raises(ValidationError):
            current_domain.process(ResetPassword(token="bogus", new_password="brand-new"), asynchronous=False)

    def test_expired_token(self, make_user):
        user_id = make_user()
        token = self._token(user_id)
        user = _users().get(user_id)
        user.reset_token_expires_at = utcnow() - timedelta(minutes=1)
        _users().add(user)

        with pytest.raises(ValidationError):
            current_domain.process(ResetPassword(token=token, new_password="brand-new"), asynchronous=False)

    def test_weak_new_password(self, make_user):
        user_id = make_user()
        token = self._token(user_id)
        with pytest.raises(ValidationError):
            current_domain.process(ResetPassword(token=token, new_password="abc"), asynchronous=False)
