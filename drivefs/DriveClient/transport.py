"""
DriveClient Transport Layer.

The remote call primitive: performs exactly one HTTP call and folds the
outcome into an ApiResponse envelope. Retry and classification live in the
gateway, never here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from drivefs.shared.gate import GateLogger
from drivefs.DriveClient.models import ApiResponse, RequestDescriptor

_log = GateLogger.get("DriveClient.Transport")

DEFAULT_API_URL = "https://www.googleapis.com"
DEFAULT_TIMEOUT = 30.0


class Transport(ABC):
    """Abstract remote call primitive."""

    @abstractmethod
    async def send(self, request: RequestDescriptor) -> ApiResponse:
        """
        Perform one remote call.

        Args:
            request: The request to send

        Returns:
            ApiResponse carrying either a result/body or an error envelope
        """
        pass

    async def close(self) -> None:
        """Release any held connections."""
        pass


class HttpxTransport(Transport):
    """
    Transport over httpx.AsyncClient with a bearer token.

    Network-level failures are reported as an error envelope with status 0
    so the gateway can classify them like any other failure.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        access_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize transport.

        Args:
            base_url: Root URL of the Drive REST API
            access_token: OAuth bearer token (may be set later)
            timeout: Request timeout in seconds
            client: Pre-built AsyncClient (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._access_token = access_token
        self._client = client

    def set_access_token(self, token: Optional[str]) -> None:
        """Swap the bearer token, e.g. after an external refresh."""
        self._access_token = token

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def _get_headers(self, request: RequestDescriptor) -> Dict[str, str]:
        headers = {}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        headers.update(request.headers)
        return headers

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def send(self, request: RequestDescriptor) -> ApiResponse:
        kwargs: Dict[str, Any] = {
            "params": request.params or None,
            "headers": self._get_headers(request),
        }
        if isinstance(request.body, (dict, list)):
            kwargs["json"] = request.body
        elif request.body is not None:
            kwargs["content"] = request.body

        _log.debug(f"Sending {request.describe()}")

        try:
            response = await self._get_client().request(
                request.method, self._url(request.path), **kwargs
            )
        except httpx.HTTPError as e:
            _log.warning(f"{request.describe()} failed in transport: {e}")
            return ApiResponse(
                status=0,
                error={"code": 0, "message": str(e), "errors": []},
            )

        return parse_response(response)


def _is_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return "json" in content_type.split(";")[0]


def parse_response(response: httpx.Response) -> ApiResponse:
    """
    Fold an httpx response into an ApiResponse.

    JSON payloads go to `result`; anything else goes to `body`, as text for
    text/* content types and as raw bytes otherwise.
    """
    payload = None
    if response.content and _is_json(response):
        try:
            payload = response.json()
        except ValueError:
            payload = None

    if response.status_code >= 400:
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            error = payload["error"]
        else:
            error = {
                "code": response.status_code,
                "message": response.text or response.reason_phrase,
                "errors": [],
            }
        return ApiResponse(status=response.status_code, result=payload, error=error)

    if payload is not None:
        return ApiResponse(status=response.status_code, result=payload)

    content_type = response.headers.get("content-type", "")
    body = response.text if content_type.startswith("text/") else response.content
    return ApiResponse(status=response.status_code, body=body)


__all__ = ["Transport", "HttpxTransport", "parse_response", "DEFAULT_API_URL"]
