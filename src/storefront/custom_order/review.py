"""Admin review of custom orders — command, handler and scoped reads."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.custom_order.custom_order import CustomOrder
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="CustomOrder")
class UpdateCustomOrderStatus:
    custom_order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    admin_notes = Text()
    approved_price = Float(min_value=0.0)
    validation_notes = Text()
    changed_by = Identifier(required=True)


@storefront.command_handler(part_of=CustomOrder)
class CustomOrderReviewHandler:
    @handle(UpdateCustomOrderStatus)
    def update_custom_order_status(self, command):
        repo = current_domain.repository_for(CustomOrder)
        custom_order = repo.get(command.custom_order_id)
        custom_order.update_status(
            command.status,
            changed_by=command.changed_by,
            admin_notes=command.admin_notes,
            approved_price=command.approved_price,
            validation_notes=command.validation_notes,
        )
        repo.add(custom_order)
        logger.info("custom_order_status_updated", custom_order_id=str(custom_order.id), status=custom_order.status)


def custom_orders_for_user(user_id) -> list[CustomOrder]:
    return current_domain.repository_for(CustomOrder).find_by_user(user_id)


def custom_order_for_user(user_id, custom_order_id) -> CustomOrder:
    custom_order = current_domain.repository_for(CustomOrder).get(custom_order_id)
    if str(custom_order.user_id) != str(user_id):
        raise ObjectNotFoundError(f"Custom order {custom_order_id} not found")
    return custom_order
