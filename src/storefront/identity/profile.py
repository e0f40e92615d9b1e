"""Profile update — command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    username: String(max_length=150)
    phone: String(max_length=30)
    address: Text()


@storefront.command_handler(part_of=User)
class UpdateProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        changes = {
            field: getattr(command, field)
            for field in ("username", "phone", "address")
            if getattr(command, field) is not None
        }
        user.update_profile(**changes)
        repo.add(user)
