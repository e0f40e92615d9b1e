"""Fake delivery adapter — records codes and notices in memory for test assertions."""

from uuid import uuid4

from storefront.channel.port import CodeDeliveryPort


class FakeDelivery(CodeDeliveryPort):
    def __init__(self):
        self.sent_codes: list[dict] = []
        self.sent_messages: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _failed(self) -> dict:
        return {"message_id": None, "status": "failed", "error": self.failure_reason}

    def send_code(self, recipient: str, code: str, purpose: str) -> dict:
        if not self.should_succeed:
            return self._failed()

        message_id = f"code-{uuid4().hex[:12]}"
        self.sent_codes.append({"message_id": message_id, "to": recipient, "code": code, "purpose": purpose})
        return {"message_id": message_id, "status": "sent"}

    def send_message(self, recipient: str, subject: str, body: str) -> dict:
        if not self.should_succeed:
            return self._failed()

        message_id = f"msg-{uuid4().hex[:12]}"
        self.sent_messages.append({"message_id": message_id, "to": recipient, "subject": subject, "body": body})
        return {"message_id": message_id, "status": "sent"}

    def last_code(self, recipient: str | None = None, purpose: str | None = None) -> str | None:
        """Most recent code sent, optionally narrowed to a recipient and purpose."""
        for record in reversed(self.sent_codes):
            if recipient is not None and record["to"] != recipient:
                continue
            if purpose is not None and record["purpose"] != purpose:
                continue
            return record["code"]
        return None

    def reset(self):
        self.sent_codes.clear()
        self.sent_messages.clear()
        self.should_succeed = True
        self.failure_reason = "Delivery failed"
