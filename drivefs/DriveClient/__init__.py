"""
DriveClient - remote side of drivefs.

Wraps the Drive v3 REST API behind a single retrying gateway.

Components:
    - AuthorizationSignal - awaited before any request is issued
    - Transport / HttpxTransport - performs one remote call
    - RequestGateway - classifies outcomes and retries rate-limited calls
    - drive_api - builders for every request drivefs issues
"""

from __future__ import annotations

from drivefs.DriveClient import drive_api
from drivefs.DriveClient.auth import AuthorizationSignal
from drivefs.DriveClient.errors import ApiError, DriveError, RetryExhausted
from drivefs.DriveClient.gateway import (
    BACKOFF_FACTOR,
    INITIAL_DELAY,
    MAX_API_REQUESTS,
    RequestGateway,
)
from drivefs.DriveClient.models import (
    FOLDER_MIMETYPE,
    RESOURCE_FIELDS,
    ROOT_ID,
    ApiResponse,
    RequestDescriptor,
    Resource,
    ResourceStub,
)
from drivefs.DriveClient.transport import HttpxTransport, Transport

__all__ = [
    "drive_api",
    "AuthorizationSignal",
    "ApiError",
    "DriveError",
    "RetryExhausted",
    "RequestGateway",
    "MAX_API_REQUESTS",
    "BACKOFF_FACTOR",
    "INITIAL_DELAY",
    "FOLDER_MIMETYPE",
    "RESOURCE_FIELDS",
    "ROOT_ID",
    "ApiResponse",
    "RequestDescriptor",
    "Resource",
    "ResourceStub",
    "HttpxTransport",
    "Transport",
]
