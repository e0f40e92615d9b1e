"""Console delivery adapter — writes codes and notices to the log instead of sending them."""

from uuid import uuid4

import structlog

from storefront.channel.port import CodeDeliveryPort

logger = structlog.get_logger(__name__)


class ConsoleDelivery(CodeDeliveryPort):
    def send_code(self, recipient: str, code: str, purpose: str) -> dict:
        message_id = f"console-{uuid4().hex[:12]}"
        logger.info("code_delivered", recipient=recipient, purpose=purpose, code=code, message_id=message_id)
        return {"message_id": message_id, "status": "sent"}

    def send_message(self, recipient: str, subject: str, body: str) -> dict:
        message_id = f"console-{uuid4().hex[:12]}"
        logger.info("message_delivered", recipient=recipient, subject=subject, body=body, message_id=message_id)
        return {"message_id": message_id, "status": "sent"}
