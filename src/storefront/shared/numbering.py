"""Human-readable order numbers: `<PREFIX>-<6 timestamp digits>-<4 random digits>`."""

import secrets
import time
from collections.abc import Callable

from protean.exceptions import TransactionError, ValidationError
from protean.utils.globals import current_domain
from sqlalchemy.exc import IntegrityError

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MAX_ATTEMPTS = 5


def generate_number(prefix: str, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    timestamp = str(now_ms)[-6:]
    suffix = f"{secrets.randbelow(10_000):04d}"
    return f"{prefix}-{timestamp}-{suffix}"


def allocate_number(prefix: str, is_taken: Callable[[str], bool]) -> str:
    """Generate a number that `is_taken` does not know about yet.

    Only the random suffix changes between attempts; the timestamp part is
    fixed for the whole allocation.
    """
    now_ms = time.time_ns() // 1_000_000
    for _ in range(MAX_ATTEMPTS):
        candidate = generate_number(prefix, now_ms)
        if not is_taken(candidate):
            return candidate
    raise RuntimeError(f"Could not allocate a unique {prefix} number after {MAX_ATTEMPTS} attempts")


def number_rejected(exc: Exception, field: str) -> bool:
    """True when the store refused a write because `field` already holds that value.

    The in-process uniqueness check reports a ValidationError keyed by field;
    a database constraint surfaces at commit as an IntegrityError wrapped in
    a TransactionError.
    """
    if isinstance(exc, ValidationError):
        return isinstance(exc.messages, dict) and field in exc.messages
    if isinstance(exc, TransactionError):
        return isinstance(exc.__cause__, IntegrityError) and field in str(exc.__cause__)
    return False


def process_numbered(command_cls, field: str = "order_number", **fields):
    """Process a command whose handler allocates a unique number.

    Each attempt runs in its own unit of work with a freshly built command, so
    a rejected number rolls the whole attempt back before the next one.
    """
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            return current_domain.process(command_cls(**fields), asynchronous=False)
        except (ValidationError, TransactionError) as exc:
            if not number_rejected(exc, field):
                raise
            logger.warning("number_collision", command=command_cls.__name__, field=field, attempt=attempt)
    raise RuntimeError(f"Could not store a unique {field} after {MAX_ATTEMPTS} attempts")
