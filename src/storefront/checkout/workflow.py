"""Checkout workflow: request a code, then verify it and place the order.

    Idle ──request_checkout_otp──▶ OtpRequested ──place_order──▶ OrderPlaced
      ▲                                 │
      └──── any failure ◀───────────────┘

A verified code is committed as used before the order is attempted, so a
failed placement always needs a fresh code. Calls for the same user run one
at a time, and the stock check plus withdrawal runs under a process-wide lock
so two customers cannot both buy the last unit.
"""

import json
import threading
from contextlib import contextmanager

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.checkout.placement import PlaceOrder, RequestCheckoutCode
from storefront.order.order import ShippingAddress
from storefront.shared.errors import InternalError, InvalidOtp, StorefrontError
from storefront.shared.locks import KeyedLock
from storefront.shared.numbering import process_numbered
from storefront.utils.logging import get_logger
from storefront.verification.code import CodePurpose
from storefront.verification.issuer import VerifyCode

logger = get_logger(__name__)

_checkout_locks = KeyedLock()
_inventory_lock = threading.Lock()

_PASSTHROUGH = (StorefrontError, ValidationError, ObjectNotFoundError)


@contextmanager
def _internal_errors_hidden(operation: str, user_id):
    """Let domain errors through; log anything else and replace it with InternalError."""
    try:
        yield
    except _PASSTHROUGH:
        raise
    except Exception as exc:
        logger.exception("checkout_failed", operation=operation, user_id=str(user_id))
        raise InternalError() from exc


def request_checkout_otp(user_id) -> None:
    """Send a checkout code to the user, provided their cart has something in it."""
    with _internal_errors_hidden("request_checkout_otp", user_id):
        current_domain.process(RequestCheckoutCode(user_id=str(user_id)), asynchronous=False)
    logger.info("checkout_otp_requested", user_id=str(user_id))


def place_order(user_id, submitted_otp, shipping_info: dict, as_of=None) -> str:
    """Turn the user's cart into an order and return the new order id."""
    address = ShippingAddress(**shipping_info)

    with _checkout_locks.hold(user_id), _internal_errors_hidden("place_order", user_id):
        verified = current_domain.process(
            VerifyCode(
                user_id=str(user_id),
                purpose=CodePurpose.ORDER_PLACEMENT.value,
                code=submitted_otp,
                as_of=as_of,
            ),
            asynchronous=False,
        )
        if not verified:
            raise InvalidOtp()

        with _inventory_lock:
            return process_numbered(
                PlaceOrder,
                user_id=str(user_id),
                shipping_address=json.dumps(address.to_dict()),
            )
