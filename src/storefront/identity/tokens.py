"""Signed access tokens (HS256 JWT) carrying the user id, email and admin flag."""

import os
from datetime import UTC, datetime, timedelta

import jwt

JWT_SECRET = os.environ.get("STOREFRONT_JWT_SECRET", "storefront-dev-secret")
JWT_ALGORITHM = "HS256"
TOKEN_TTL_HOURS = int(os.environ.get("STOREFRONT_TOKEN_TTL_HOURS", "24"))


class InvalidToken(Exception):
    pass


def create_access_token(user_id: str, email: str, is_admin: bool = False, now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    payload = {
        "id": str(user_id),
        "email": email,
        "is_admin": bool(is_admin),
        "iat": now,
        "exp": now + timedelta(hours=TOKEN_TTL_HOURS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise InvalidToken("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidToken("Invalid token") from exc
