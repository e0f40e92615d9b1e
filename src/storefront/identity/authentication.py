"""Login — checks credentials and issues an access token."""

from protean.utils.globals import current_domain

from storefront.identity.tokens import create_access_token
from storefront.identity.user import User
from storefront.shared.errors import InvalidCredentials
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def authenticate(email: str, password: str) -> tuple[str, User]:
    """Return `(token, user)` or raise InvalidCredentials, whichever part was wrong."""
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None or not user.check_password(password):
        logger.info("login_rejected")
        raise InvalidCredentials()

    token = create_access_token(user.id, user.email, is_admin=user.is_admin)
    logger.info("login_succeeded", user_id=str(user.id))
    return token, user
