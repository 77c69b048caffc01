"""Service-layer exceptions.

Raised by the company/job services and translated into HTTP responses by the
handlers registered in ``main.py``. None of them are retried.
"""


class JoblyError(Exception):
    """Base exception for all service errors."""

    status: int = 500

    def __init__(self, message: str, details: dict | None = None):
        """Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(JoblyError):
    """Malformed or empty input: no update data, bad filter, inverted bounds."""

    status = 400


class NotFoundError(JoblyError):
    """Identifier or exact-match lookup matched zero rows."""

    status = 404


class ConflictError(JoblyError):
    """Uniqueness violation on create."""

    status = 400
