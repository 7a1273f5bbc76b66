"""
ContentsGate - path-addressed filesystem over Google Drive.

Gate Interface:
    - initialize() - Build the shared DriveContents from configuration
    - is_initialized() - Check if initialized
    - get_health_status() - Get detailed health info
    - get_dependencies() - List dependencies
    - get_contents() - The shared DriveContents instance

Usage:
    from drivefs import ContentsGate

    ContentsGate.initialize()
    contents = ContentsGate.get_contents()

    model = await contents.get_content_model("notebooks/analysis.ipynb", include_content=True)
    await contents.move_entry("notebooks/analysis.ipynb", "archive/analysis.ipynb")
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from drivefs.shared.gate import GateErrorHandler, GateLogger, build_health_status

from .contents import DriveContents
from .errors import (
    AmbiguousMatch,
    ContentsError,
    DeleteFailed,
    DestinationExists,
    DownloadFailed,
    InvalidContentType,
    NotAFolder,
    NotFound,
)
from .mapper import ContentMapper
from .models import Checkpoint, ContentFormat, ContentModel, ContentType
from .operations import DriveOperations
from .resolver import PathResolver
from .upload import UploadEncoder

_log = GateLogger.get("ContentsGate")

# Module state
_contents: Optional[DriveContents] = None
_initialized = False


def initialize(contents: Optional[DriveContents] = None) -> bool:
    """
    Initialize the ContentsGate.

    Args:
        contents: Pre-built instance; built from drivefs.Config when omitted

    Returns:
        True if initialized successfully
    """
    global _contents, _initialized

    if _initialized and contents is None:
        return True

    try:
        _contents = contents or DriveContents.from_config()
    except Exception as e:
        return GateErrorHandler.handle("ContentsGate", "initialize", e, default_return=False)

    _initialized = True
    _log.info("ContentsGate initialized")
    return True


def is_initialized() -> bool:
    """Check if the gate is initialized."""
    return _initialized


def get_contents() -> DriveContents:
    """Get the shared DriveContents, initializing if needed."""
    if _contents is None and not initialize():
        raise RuntimeError("ContentsGate initialization failed. Check drivefs configuration.")
    return _contents


def get_dependencies() -> List[str]:
    """Get list of external dependencies."""
    return ["drive-api", "httpx"]


def is_healthy() -> bool:
    """Check if the gate is healthy."""
    return _initialized and _contents is not None and _contents.authorization.is_authorized


def get_health_status() -> Dict[str, Any]:
    """Get detailed health status."""
    authorized = bool(_contents and _contents.authorization.is_authorized)
    details: Dict[str, Any] = {}
    if _contents is not None:
        details["max_requests"] = _contents.gateway.max_requests
        details["transport"] = type(_contents.gateway.transport).__name__

    return build_health_status(
        gate_name="ContentsGate",
        initialized=_initialized,
        dependencies=get_dependencies(),
        checks={"authorized": authorized},
        details=details,
    )


def _reset() -> None:
    """Forget the shared instance (used by tests)."""
    global _contents, _initialized
    _contents = None
    _initialized = False


__all__ = [
    # Lifecycle
    "initialize",
    "is_initialized",
    "is_healthy",
    "get_health_status",
    "get_dependencies",
    "get_contents",
    # Components
    "DriveContents",
    "DriveOperations",
    "PathResolver",
    "ContentMapper",
    "UploadEncoder",
    # Models
    "ContentModel",
    "ContentType",
    "ContentFormat",
    "Checkpoint",
    # Errors
    "ContentsError",
    "NotFound",
    "AmbiguousMatch",
    "NotAFolder",
    "DestinationExists",
    "InvalidContentType",
    "DownloadFailed",
    "DeleteFailed",
]
