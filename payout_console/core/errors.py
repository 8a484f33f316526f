"""
Domain-specific exceptions for the Payout Operations Console.

These exceptions represent business logic violations. Each carries a stable,
machine-readable code and is mapped to an HTTP status code in the API layer.
"""

from typing import Any


class PayoutConsoleError(Exception):
    """Base exception for all payout console domain errors."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(PayoutConsoleError):
    """
    Raised when input data fails validation.

    Examples:
    - Malformed request body
    - Required field missing

    HTTP Status: 400 Bad Request
    """

    code = "VALIDATION_ERROR"


class NotFoundError(PayoutConsoleError):
    """
    Raised when a requested resource does not exist.

    HTTP Status: 404 Not Found
    """

    code = "NOT_FOUND"


class ConflictError(PayoutConsoleError):
    """
    Raised when an operation conflicts with the current state of a record.

    HTTP Status: 409 Conflict
    """

    code = "CONFLICT"


class PayoutNotFoundError(NotFoundError):
    """Raised when no payout matches the requested id."""

    code = "PAYOUT_NOT_FOUND"


class InvalidDecisionError(ValidationError):
    """
    Raised when a decision payload breaks the decision rules.

    Examples:
    - Decision type outside approved/rejected/held
    - Rejection without a reason
    """

    code = "INVALID_DECISION"


class MissingDecidedByError(ValidationError):
    """Raised when a decision does not name who made it."""

    code = "MISSING_DECIDED_BY"


class PayoutAlreadyPaidError(ConflictError):
    """
    Raised when a decision targets a payout that has already been paid.

    Paid is terminal. The public API reports this as 400, not 409.
    """

    code = "PAYOUT_ALREADY_PAID"


ERROR_STATUS_MAP = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    PayoutNotFoundError: 404,
    InvalidDecisionError: 400,
    MissingDecidedByError: 400,
    PayoutAlreadyPaidError: 400,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code of the nearest mapped class in the exception's MRO
        (defaults to 500 for unknown errors)
    """
    for error_type in type(error).__mro__:
        if error_type in ERROR_STATUS_MAP:
            return ERROR_STATUS_MAP[error_type]
    return 500


def get_error_code(error: Exception) -> str:
    """Get the machine-readable error code for a given exception."""
    if isinstance(error, PayoutConsoleError):
        return error.code
    return PayoutConsoleError.code
