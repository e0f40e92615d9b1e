"""Password reset — commands and handler.

Requesting a reset never reveals whether the email belongs to an account.
"""

import os
from datetime import timedelta

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.channel import get_channel
from storefront.domain import storefront
from storefront.identity.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

RESET_TTL_MINUTES = int(os.environ.get("STOREFRONT_PASSWORD_RESET_TTL_MINUTES", "60"))
BASE_URL = os.environ.get("STOREFRONT_BASE_URL", "http://localhost:3000")


def reset_link(token: str) -> str:
    return f"{BASE_URL.rstrip('/')}/reset-password/{token}"


@storefront.command(part_of="User")
class RequestPasswordReset:
    email: String(required=True, max_length=254)


@storefront.command(part_of="User")
class ResetPassword:
    token: String(required=True, max_length=64)
    new_password: String(required=True, max_length=128)


@storefront.command_handler(part_of=User)
class PasswordResetHandler:
    @handle(RequestPasswordReset)
    def request_password_reset(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            logger.info("password_reset_unknown_email")
            return

        token = user.start_password_reset(timedelta(minutes=RESET_TTL_MINUTES))
        repo.add(user)

        get_channel().send_message(
            user.email,
            "Reset your password",
            f"Use this link to choose a new password: {reset_link(token)}",
        )
        logger.info("password_reset_requested", user_id=str(user.id))

    @handle(ResetPassword)
    def reset_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_reset_token(command.token)
        if user is None or not user.reset_token_is_live():
            raise ValidationError({"token": ["Invalid or expired password reset token"]})

        user.change_password(command.new_password)
        repo.add(user)
        logger.info("password_reset_completed", user_id=str(user.id))
