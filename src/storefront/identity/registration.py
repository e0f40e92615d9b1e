"""Two-step registration — commands and handler.

`StartRegistration` stores a PendingRegistration and emails its code;
`CompleteRegistration` turns it into a verified User once the code matches.
"""

from protean import handle
from protean.fields import DateTime, String
from protean.utils.globals import current_domain

from storefront.channel import get_channel
from storefront.domain import storefront
from storefront.identity.passwords import hash_password
from storefront.identity.pending import PendingRegistration
from storefront.identity.user import User, check_password_strength, normalize_email
from storefront.shared.errors import EmailAlreadyRegistered, InvalidOtp
from storefront.utils.logging import get_logger
from storefront.verification.issuer import code_ttl

logger = get_logger(__name__)

REGISTRATION_PURPOSE = "registration"


@storefront.command(part_of="PendingRegistration")
class StartRegistration:
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)


@storefront.command(part_of="PendingRegistration")
class CompleteRegistration:
    token: String(required=True, max_length=64)
    code: String(required=True, max_length=64)
    as_of: DateTime()


@storefront.command_handler(part_of=PendingRegistration)
class RegistrationHandler:
    @handle(StartRegistration)
    def start_registration(self, command):
        email = normalize_email(command.email)
        check_password_strength(command.password)
        if current_domain.repository_for(User).find_by_email(email) is not None:
            raise EmailAlreadyRegistered()

        pending = PendingRegistration.start(
            email=email,
            password_hash=hash_password(command.password),
            ttl=code_ttl(),
        )
        current_domain.repository_for(PendingRegistration).add(pending)

        receipt = get_channel().send_code(email, pending.code, REGISTRATION_PURPOSE)
        if receipt.get("status") != "sent":
            logger.warning("registration_code_delivery_failed", email=email, error=receipt.get("error"))

        logger.info("registration_started", email=email)
        return pending.token

    @handle(CompleteRegistration)
    def complete_registration(self, command):
        pending_repo = current_domain.repository_for(PendingRegistration)
        pending = pending_repo.find_by_token(command.token)
        if pending is None or not pending.accepts(command.code, as_of=command.as_of):
            raise InvalidOtp()

        users = current_domain.repository_for(User)
        if users.find_by_email(pending.email) is not None:
            raise EmailAlreadyRegistered()

        user = User.register(email=pending.email, password_hash=pending.password_hash)
        pending.consume()

        users.add(user)
        pending_repo.add(pending)

        logger.info("user_registered", user_id=str(user.id))
        return str(user.id)
