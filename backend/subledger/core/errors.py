"""
Subscription store errors.

Every failure the store reports is one of these. The API renders them with
their status code and error code; nothing is retried internally.
"""
from typing import Any


class SubscriptionError(Exception):
    """
    Base error for store operations.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable code for API responses
        status_code: HTTP status code for this error type
    """

    error_code = "SUBSCRIPTION_ERROR"
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {"detail": self.message, "error_code": self.error_code}


class InvalidPayload(SubscriptionError):
    """Creation arguments out of range."""

    error_code = "INVALID_PAYLOAD"


class InvalidInput(SubscriptionError):
    """Bad argument to an operation on an existing record."""

    error_code = "INVALID_INPUT"


class NotFound(SubscriptionError):
    error_code = "NOT_FOUND"
    status_code = 404


class Unauthorized(SubscriptionError):
    """Caller identity failed the operation's subscriber or owner check."""

    error_code = "UNAUTHORIZED"
    status_code = 403


class StorageFailure(SubscriptionError):
    """The backing store rejected an operation (capacity, collision, driver error)."""

    error_code = "STORAGE_FAILURE"
    status_code = 503
