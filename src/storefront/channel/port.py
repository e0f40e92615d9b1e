"""Code delivery port — abstract interface for out-of-band messages to a user."""

from abc import ABC, abstractmethod


class CodeDeliveryPort(ABC):
    """Carries one-time codes and account notices to a user's contact channel."""

    @abstractmethod
    def send_code(self, recipient: str, code: str, purpose: str) -> dict:
        """Deliver a one-time code.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...

    @abstractmethod
    def send_message(self, recipient: str, subject: str, body: str) -> dict:
        """Deliver a free-form notice (password reset link, order confirmation)."""
        ...
