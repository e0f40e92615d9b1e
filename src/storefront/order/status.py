"""Admin status updates — command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class AppendOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    note = Text()
    changed_by = Identifier()


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(AppendOrderStatus)
    def append_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.append_status(command.status, note=command.note, changed_by=command.changed_by)
        repo.add(order)
        logger.info("order_status_appended", order_id=str(order.id), status=order.status)
