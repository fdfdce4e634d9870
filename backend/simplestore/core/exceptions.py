"""
Custom exceptions for the application.

Services and repositories raise these; the error handlers registered in
``simplestore.core.api_utils`` turn them into JSON responses.
"""


class SimpleStoreError(Exception):
    """Base class for domain errors carrying an HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SimpleStoreError):
    """Raised when a requested record does not exist."""

    status_code = 404


class ConflictError(SimpleStoreError):
    """Raised when an operation conflicts with existing data
    (duplicate code, record still referenced, ...)."""

    status_code = 409


class InsufficientStockError(ConflictError):
    """Raised when a stock movement would drive a product below zero."""

    def __init__(self, product_code: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for product {product_code}: "
            f"available {available}, requested {requested}"
        )
        self.product_code = product_code
        self.available = available
        self.requested = requested


class OrderNumberExhaustedError(ConflictError):
    """Raised when no unique order number could be allocated after retries."""
