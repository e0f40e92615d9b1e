"""Delivery channel registry.

The console adapter is the default; tests swap in `FakeDelivery` through
`set_channel()`. `STOREFRONT_DELIVERY_CHANNEL` picks the adapter on first use.
"""

import os

from storefront.channel.port import CodeDeliveryPort

_current_channel: CodeDeliveryPort | None = None


def get_channel() -> CodeDeliveryPort:
    global _current_channel
    if _current_channel is None:
        adapter = os.environ.get("STOREFRONT_DELIVERY_CHANNEL", "console")
        if adapter == "console":
            from storefront.channel.console import ConsoleDelivery

            _current_channel = ConsoleDelivery()
        elif adapter == "fake":
            from storefront.channel.fake import FakeDelivery

            _current_channel = FakeDelivery()
        else:
            raise ValueError(f"Unknown delivery channel: {adapter}")
    return _current_channel


def set_channel(channel: CodeDeliveryPort) -> None:
    global _current_channel
    _current_channel = channel


def reset_channel() -> None:
    global _current_channel
    _current_channel = None
