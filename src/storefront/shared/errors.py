"""Storefront error taxonomy.

Plain field validation stays with Protean (`ValidationError`, mapped to
InvalidArgument) and missing records with `ObjectNotFoundError` (NotFound).
The errors below carry a stable `code` and an HTTP status so the API layer
can render them without inspecting messages.
"""


class StorefrontError(Exception):
    code = "storefront_error"
    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, **self.details}


class EmptyCart(StorefrontError):
    code = "empty_cart"
    default_message = "Your cart is empty"


class InvalidOtp(StorefrontError):
    """Any OTP failure. Never says which check failed."""

    code = "invalid_otp"
    default_message = "Invalid or expired OTP"

    def __init__(self):
        super().__init__()


class InsufficientStock(StorefrontError):
    code = "insufficient_stock"
    status_code = 409

    def __init__(self, product_id: str, title: str | None = None):
        label = f'"{title}"' if title else str(product_id)
        super().__init__(
            f"Product {label} is unavailable or has insufficient stock",
            product_id=str(product_id),
        )
        self.product_id = str(product_id)


class ProductUnavailable(StorefrontError):
    code = "unavailable"
    default_message = "Product is unavailable or insufficient stock"


class EmailAlreadyRegistered(StorefrontError):
    code = "email_taken"
    status_code = 409
    default_message = "Email already registered"


class InvalidCredentials(StorefrontError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid credentials"


class InternalError(StorefrontError):
    """Opaque wrapper for storage or infrastructure failures. Details go to the log only."""

    code = "internal_error"
    status_code = 500
    default_message = "Something went wrong, please try again"

    def __init__(self):
        super().__init__()
