"""
Request Gateway.

Executes prepared requests once authorization is ready, classifies the
outcome, and retries rate-limited calls with exponential backoff. This is
the only retry point in drivefs.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from drivefs.shared.gate import GateLogger
from drivefs.DriveClient.auth import AuthorizationSignal
from drivefs.DriveClient.errors import ApiError, RetryExhausted
from drivefs.DriveClient.models import ApiResponse, RequestDescriptor
from drivefs.DriveClient.transport import Transport

_log = GateLogger.get("DriveClient.Gateway")

# Exponential backoff
MAX_API_REQUESTS = 7
BACKOFF_FACTOR = 2.0
INITIAL_DELAY = 250  # ms

FORBIDDEN_ERROR = 403
RATE_LIMIT_REASONS = ("rateLimitExceeded", "userRateLimitExceeded")


def make_error(response: ApiResponse) -> ApiError:
    """Build an ApiError from a failed or unexpected response."""
    if response.is_error():
        return ApiError(response.error_code, response.error_message, response.error_reason)
    return ApiError(response.status, f"Unexpected response status {response.status}")


class RequestGateway:
    """
    Executes RequestDescriptors against a Transport.

    Handles:
    - Waiting on the authorization-ready signal
    - Success-code checking and result/body fallback
    - Backoff on rate limiting, up to a fixed attempt ceiling
    """

    def __init__(
        self,
        transport: Transport,
        authorization: Optional[AuthorizationSignal] = None,
        max_requests: int = MAX_API_REQUESTS,
        initial_delay: float = INITIAL_DELAY,
        backoff_factor: float = BACKOFF_FACTOR,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        """
        Initialize the gateway.

        Args:
            transport: Remote call primitive
            authorization: Signal awaited before every call (a fresh,
                unauthorized signal when omitted)
            max_requests: Attempt ceiling for rate-limited requests
            initial_delay: First retry delay in milliseconds
            backoff_factor: Delay multiplier per attempt
            sleep: Coroutine used to wait between attempts (seconds)
        """
        self.transport = transport
        self.authorization = authorization or AuthorizationSignal()
        self.max_requests = max_requests
        self.initial_delay = initial_delay
        self.backoff_factor = backoff_factor
        self._sleep = sleep or asyncio.sleep

    def retry_delay(self, attempt: int) -> float:
        """Delay in milliseconds before retrying after `attempt`."""
        return self.initial_delay * self.backoff_factor ** attempt

    @staticmethod
    def is_rate_limited(response: ApiResponse) -> bool:
        return (
            response.status == FORBIDDEN_ERROR
            and response.error_reason in RATE_LIMIT_REASONS
        )

    async def execute(
        self,
        request: RequestDescriptor,
        expected_status: int = 200,
        attempt: int = 0,
    ) -> Any:
        """
        Execute a request and return its settled payload.

        Args:
            request: The request to send
            expected_status: Status code that counts as success
            attempt: Number of attempts already made

        Returns:
            The response result, or the raw body when there is no result

        Raises:
            ApiError: Non-retryable failure or unexpected success status
            RetryExhausted: Still rate limited at the attempt ceiling
        """
        while True:
            if attempt >= self.max_requests:
                _log.error(f"Giving up on {request.describe()} after {attempt} attempts")
                raise RetryExhausted(attempt, request.describe())

            await self.authorization.wait()
            response = await self.transport.send(request)

            if not response.is_error():
                if response.status != expected_status:
                    _log.error(
                        f"Drive API error: {request.describe()} returned "
                        f"{response.status}, expected {expected_status}"
                    )
                    raise make_error(response)
                # Some responses carry their data in the body slot only.
                if response.result is None:
                    return response.body
                return response.result

            if self.is_rate_limited(response):
                delay = self.retry_delay(attempt)
                _log.info(f"Throttling {request.describe()}: retry in {delay:.0f}ms")
                await self._sleep(delay / 1000.0)
                attempt += 1
                continue

            _log.error(
                f"Drive API error: {request.describe()} failed with "
                f"{response.error_code}: {response.error_message}"
            )
            raise make_error(response)


__all__ = [
    "RequestGateway",
    "make_error",
    "MAX_API_REQUESTS",
    "BACKOFF_FACTOR",
    "INITIAL_DELAY",
]
