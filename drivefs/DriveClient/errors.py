"""
DriveClient errors.

Failures surfaced by the Request Gateway.
"""

from typing import Optional


class DriveError(Exception):
    """Base class for all drivefs errors."""
    pass


class ApiError(DriveError):
    """Raised when the remote store reports a non-retryable failure."""

    def __init__(self, status: int, message: str, reason: Optional[str] = None):
        super().__init__(f"Drive API error {status}: {message}")
        self.status = status
        self.message = message
        self.reason = reason


class RetryExhausted(DriveError):
    """Raised when a rate-limited request is still throttled at the retry ceiling."""

    def __init__(self, attempts: int, request: str = ""):
        super().__init__(
            f"Maximum number of API retries reached ({attempts}) for {request}".rstrip()
        )
        self.attempts = attempts
        self.request = request
