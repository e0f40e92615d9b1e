"""User aggregate — a verified customer (or admin) account."""

import secrets
from datetime import timedelta

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text

from storefront.domain import storefront
from storefront.identity.events import PasswordChanged, PasswordResetRequested, ProfileUpdated, UserRegistered
from storefront.identity.passwords import hash_password, verify_password
from storefront.shared.clock import as_utc, utcnow

MIN_PASSWORD_LENGTH = 6

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_password_strength(password: str | None):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})


@storefront.aggregate
class User:
    email: String(required=True, max_length=254, unique=True)
    username: String(max_length=150)
    password_hash: String(required=True, max_length=255)
    is_admin: Boolean(default=False)
    is_verified: Boolean(default=False)
    phone: String(max_length=30)
    address: Text()
    reset_token: String(max_length=64)
    reset_token_expires_at: DateTime()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(cls, email, password_hash, username=None, is_admin=False):
        """Create an account whose email has already been proven."""
        email = normalize_email(email)
        now = utcnow()
        user = cls(
            email=email,
            username=username or email.split("@")[0],
            password_hash=password_hash,
            is_admin=is_admin,
            is_verified=True,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                username=user.username,
                is_admin=user.is_admin,
                registered_at=now,
            )
        )
        return user

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    def update_profile(self, username=_UNSET, phone=_UNSET, address=_UNSET):
        if username is not _UNSET:
            self.username = username
        if phone is not _UNSET:
            self.phone = phone
        if address is not _UNSET:
            self.address = address
        self.updated_at = utcnow()

        self.raise_(ProfileUpdated(user_id=self.id, username=self.username))

    # -------------------------------------------------------------------
    # Password reset
    # -------------------------------------------------------------------
    def start_password_reset(self, ttl: timedelta) -> str:
        token = secrets.token_hex(20)
        self.reset_token = token
        self.reset_token_expires_at = utcnow() + ttl

        self.raise_(PasswordResetRequested(user_id=self.id, expires_at=self.reset_token_expires_at))
        return token

    def reset_token_is_live(self, as_of=None) -> bool:
        if not self.reset_token or self.reset_token_expires_at is None:
            return False
        return as_utc(as_of or utcnow()) < as_utc(self.reset_token_expires_at)

    def change_password(self, new_password: str):
        check_password_strength(new_password)
        now = utcnow()
        self.password_hash = hash_password(new_password)
        self.reset_token = None
        self.reset_token_expires_at = None
        self.updated_at = now

        self.raise_(PasswordChanged(user_id=self.id, changed_at=now))


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        users = self._dao.query.filter(email=normalize_email(email)).all().items
        return users[0] if users else None

    def find_by_reset_token(self, token: str) -> User | None:
        if not token:
            return None
        users = self._dao.query.filter(reset_token=token).all().items
        return users[0] if users else None
