"""
Shared utilities for drivefs.

Provides access to common functionality used across Gate implementations.
"""

from drivefs.shared.gate import (
    GateLogger,
    GateErrorHandler,
    build_health_status,
    describe_error,
    get_logger,
)

__all__ = [
    "GateLogger",
    "GateErrorHandler",
    "build_health_status",
    "describe_error",
    "get_logger",
]
