"""One-time code aggregate — a short-lived numeric credential bound to a user and a purpose.

Codes are never deleted. Once consumed they stay in storage with `used` set,
so a replayed code finds nothing to match.
"""

import secrets
from datetime import timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront
from storefront.shared.clock import as_utc, utcnow
from storefront.verification.events import CodeConsumed, CodeIssued

CODE_LENGTH = 6


class CodePurpose(Enum):
    ORDER_PLACEMENT = "order_placement"
    CUSTOM_ORDER = "custom_order"


def generate_code() -> str:
    """Uniform random numeric code, zero-padded so leading zeros survive."""
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


@storefront.aggregate
class OneTimeCode:
    user_id = Identifier(required=True)
    code = String(required=True, max_length=CODE_LENGTH, min_length=CODE_LENGTH)
    purpose = String(required=True, choices=CodePurpose)
    expires_at = DateTime(required=True)
    used = Boolean(default=False)
    created_at = DateTime()
    used_at = DateTime()

    @classmethod
    def issue(cls, user_id, purpose, ttl: timedelta, now=None):
        now = now or utcnow()
        otp = cls(
            user_id=str(user_id),
            code=generate_code(),
            purpose=purpose,
            expires_at=now + ttl,
            used=False,
            created_at=now,
        )
        otp.raise_(
            CodeIssued(
                code_id=str(otp.id),
                user_id=str(user_id),
                purpose=purpose,
                expires_at=otp.expires_at,
            )
        )
        return otp

    def is_live(self, as_of) -> bool:
        return not self.used and as_utc(as_of) < as_utc(self.expires_at)

    def matches(self, user_id, purpose, code, as_of) -> bool:
        return (
            self.is_live(as_of)
            and str(self.user_id) == str(user_id)
            and self.purpose == purpose
            and secrets.compare_digest(self.code, str(code))
        )

    def consume(self, as_of=None):
        if self.used:
            raise ValidationError({"code": ["Code has already been used"]})

        now = as_of or utcnow()
        self.used = True
        self.used_at = now

        self.raise_(
            CodeConsumed(
                code_id=str(self.id),
                user_id=str(self.user_id),
                purpose=self.purpose,
                consumed_at=now,
            )
        )


@storefront.repository(part_of=OneTimeCode)
class OneTimeCodeRepository:
    def unused_for(self, user_id, purpose, code) -> list[OneTimeCode]:
        """Unused codes with this value for this user and purpose, newest first."""
        candidates = self._dao.query.filter(
            user_id=str(user_id),
            purpose=purpose,
            code=str(code),
            used=False,
        ).all().items
        return sorted(candidates, key=lambda c: as_utc(c.created_at), reverse=True)
