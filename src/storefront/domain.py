"""Storefront bounded context — catalogue, cart, checkout, accounts and custom orders.

A single domain backs the whole gallery storefront. Checkout touches the
catalogue, the cart, the one-time-code issuer and the order ledger inside one
process, so they share one domain and one database.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
