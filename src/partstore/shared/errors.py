"""Application errors that have no Protean counterpart.

Input and invariant violations use ``protean.exceptions.ValidationError`` and
missing records use ``ObjectNotFoundError``; the classes below cover the rest
of the taxonomy the HTTP layer translates into status codes.
"""


class PartStoreError(Exception):
    status_code = 500

    def __init__(self, message: str, errors: dict | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class AuthenticationError(PartStoreError):
    status_code = 401


class AuthorizationError(PartStoreError):
    status_code = 403


class ConflictError(PartStoreError):
    status_code = 409


class InsufficientStockError(ConflictError):
    """Requested quantity exceeds live stock."""

    status_code = 400

    def __init__(self, product_name: str, available: int, message: str | None = None):
        super().__init__(
            message or f"Insufficient stock for {product_name}. Only {available} available",
            errors={"stock": [f"{product_name}: {available} available"]},
        )
        self.product_name = product_name
        self.available = available


class PaymentVerificationError(PartStoreError):
    status_code = 400


class PaymentGatewayError(PartStoreError):
    """The gateway could not be reached or refused the request."""

    status_code = 502
