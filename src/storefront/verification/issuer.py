"""Issuing and verifying one-time codes.

`issue_code` and `verify_code` work on the current unit of work, so they can
be called from inside other handlers. `IssueCode` and `VerifyCode` wrap them
as commands for callers that need the result committed on its own, which is
how checkout makes sure a verified code stays consumed even when placing the
order fails afterwards.
"""

import os
from datetime import timedelta

from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from storefront.channel import get_channel
from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.utils.logging import get_logger
from storefront.verification.code import OneTimeCode

logger = get_logger(__name__)

OTP_TTL_MINUTES = int(os.environ.get("STOREFRONT_OTP_TTL_MINUTES", "10"))


def code_ttl() -> timedelta:
    return timedelta(minutes=OTP_TTL_MINUTES)


def issue_code(user_id, purpose, recipient, now=None) -> OneTimeCode:
    """Persist a fresh code and hand it to the delivery channel.

    Every call creates a new record; earlier codes for the same purpose stay
    valid until they expire or are used.
    """
    otp = OneTimeCode.issue(user_id=user_id, purpose=purpose, ttl=code_ttl(), now=now)
    current_domain.repository_for(OneTimeCode).add(otp)

    receipt = get_channel().send_code(recipient, otp.code, purpose)
    if receipt.get("status") != "sent":
        logger.warning(
            "code_delivery_failed",
            user_id=str(user_id),
            purpose=purpose,
            error=receipt.get("error"),
        )
    else:
        logger.info("code_issued", user_id=str(user_id), purpose=purpose, code_id=str(otp.id))
    return otp


def verify_code(user_id, purpose, code, as_of=None) -> bool:
    """Consume the most recent live code matching user, purpose and value.

    Returns False for every kind of mismatch without saying which one.
    """
    if not code:
        return False

    as_of = as_of or utcnow()
    repo = current_domain.repository_for(OneTimeCode)
    match = next(
        (c for c in repo.unused_for(user_id, purpose, code) if c.matches(user_id, purpose, code, as_of)),
        None,
    )
    if match is None:
        logger.info("code_rejected", user_id=str(user_id), purpose=purpose)
        return False

    match.consume(as_of)
    repo.add(match)
    return True


@storefront.command(part_of="OneTimeCode")
class IssueCode:
    user_id = Identifier(required=True)
    purpose = String(required=True, max_length=50)
    recipient = String(required=True, max_length=254)


@storefront.command(part_of="OneTimeCode")
class VerifyCode:
    user_id = Identifier(required=True)
    purpose = String(required=True, max_length=50)
    code = String(max_length=64)
    as_of = DateTime()


@storefront.command_handler(part_of=OneTimeCode)
class OneTimeCodeHandler:
    @handle(IssueCode)
    def issue(self, command):
        otp = issue_code(command.user_id, command.purpose, command.recipient)
        return str(otp.id)

    @handle(VerifyCode)
    def verify(self, command):
        return verify_code(command.user_id, command.purpose, command.code, as_of=command.as_of)
