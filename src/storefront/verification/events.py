"""Domain events for the OneTimeCode aggregate. The code value itself is never published."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="OneTimeCode")
class CodeIssued:
    __version__ = 1

    code_id = Identifier(required=True)
    user_id = Identifier(required=True)
    purpose = String(required=True, max_length=50)
    expires_at = DateTime(required=True)


@storefront.event(part_of="OneTimeCode")
class CodeConsumed:
    __version__ = 1

    code_id = Identifier(required=True)
    user_id = Identifier(required=True)
    purpose = String(required=True, max_length=50)
    consumed_at = DateTime(required=True)
