"""PendingRegistration aggregate — a sign-up waiting for its emailed code.

The record is keyed by a server-issued token that the client sends back with
the code, so nothing about the sign-up lives in a session. It expires on the
same schedule as a one-time code and is consumed once an account is created.
"""

import secrets
from datetime import timedelta

from protean.fields import Boolean, DateTime, String

from storefront.domain import storefront
from storefront.shared.clock import as_utc, utcnow
from storefront.verification.code import generate_code


@storefront.aggregate
class PendingRegistration:
    token: String(required=True, max_length=64, unique=True)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)
    code: String(required=True, max_length=6)
    expires_at: DateTime(required=True)
    consumed: Boolean(default=False)
    created_at: DateTime()

    @classmethod
    def start(cls, email, password_hash, ttl: timedelta, now=None):
        now = now or utcnow()
        return cls(
            token=secrets.token_urlsafe(32),
            email=email,
            password_hash=password_hash,
            code=generate_code(),
            expires_at=now + ttl,
            consumed=False,
            created_at=now,
        )

    def accepts(self, code, as_of=None) -> bool:
        as_of = as_utc(as_of or utcnow())
        return (
            not self.consumed
            and as_of < as_utc(self.expires_at)
            and secrets.compare_digest(self.code, str(code or ""))
        )

    def consume(self):
        self.consumed = True


@storefront.repository(part_of=PendingRegistration)
class PendingRegistrationRepository:
    def find_by_token(self, token: str) -> PendingRegistration | None:
        if not token:
            return None
        records = self._dao.query.filter(token=token).all().items
        return records[0] if records else None
