"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A visitor proved ownership of their email and became a customer."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True, max_length=254)
    username: String(max_length=150)
    is_admin: Boolean(default=False)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    username: String(max_length=150)


@storefront.event(part_of="User")
class PasswordResetRequested:
    """Never carries the token."""

    __version__ = 1

    user_id: Identifier(required=True)
    expires_at: DateTime(required=True)


@storefront.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    changed_at: DateTime(required=True)
