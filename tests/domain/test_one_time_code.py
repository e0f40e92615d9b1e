"""Tests for the OneTimeCode aggregate."""

import re
from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.verification.code import CodePurpose, OneTimeCode, generate_code
from storefront.verification.events import CodeConsumed, CodeIssued

ISSUED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
PURPOSE = CodePurpose.ORDER_PLACEMENT.value


def _issue(**overrides):
    defaults = {"user_id": "user-001", "purpose": PURPOSE, "ttl": timedelta(minutes=10), "now": ISSUED_AT}
    defaults.update(overrides)
    return OneTimeCode.issue(**defaults)


class TestGenerateCode:
    def test_six_digits(self):
        for _ in range(50):
            assert re.fullmatch(r"\d{6}", generate_code())

    def test_leading_zeros_preserved(self, monkeypatch):
        monkeypatch.setattr("storefront.verification.code.secrets.randbelow", lambda _: 42)
        assert generate_code() == "000042"


class TestIssue:
    def test_expires_ten_minutes_after_issue(self):
        otp = _issue()
        assert otp.expires_at == ISSUED_AT + timedelta(minutes=10)
        assert otp.used is False

    def test_issued_event_never_carries_the_code(self):
        otp = _issue()
        event = otp._events[0]
        assert isinstance(event, CodeIssued)
        assert "code" not in event.to_dict()
        assert event.purpose == PURPOSE


class TestMatches:
    def test_matches_own_code_before_expiry(self):
        otp = _issue()
        assert otp.matches("user-001", PURPOSE, otp.code, ISSUED_AT + timedelta(minutes=9)) is True

    def test_wrong_code(self):
        otp = _issue()
        wrong = "000000" if otp.code != "000000" else "111111"
        assert otp.matches("user-001", PURPOSE, wrong, ISSUED_AT) is False

    def test_wrong_user(self):
        otp = _issue()
        assert otp.matches("user-002", PURPOSE, otp.code, ISSUED_AT) is False

    def test_wrong_purpose(self):
        otp = _issue()
        assert otp.matches("user-001", CodePurpose.CUSTOM_ORDER.value, otp.code, ISSUED_AT) is False

    def test_expired_at_exactly_ten_minutes(self):
        otp = _issue()
        assert otp.matches("user-001", PURPOSE, otp.code, ISSUED_AT + timedelta(minutes=10)) is False

    def test_used_code_no_longer_matches(self):
        otp = _issue()
        otp.consume(ISSUED_AT)
        assert otp.matches("user-001", PURPOSE, otp.code, ISSUED_AT) is False


class TestConsume:
    def test_marks_used_and_raises_event(self):
        otp = _issue()
        otp._events.clear()
        otp.consume(ISSUED_AT + timedelta(minutes=1))
        assert otp.used is True
        assert otp.used_at == ISSUED_AT + timedelta(minutes=1)
        assert isinstance(otp._events[0], CodeConsumed)

    def test_cannot_consume_twice(self):
        otp = _issue()
        otp.consume(ISSUED_AT)
        with pytest.raises(ValidationError):
            otp.consume(ISSUED_AT)
