"""
Shared Gate utilities for drivefs.

- GateLogger: one logger per gate component, all below "drivefs"
- GateErrorHandler: logs failures at gate boundaries, with the Drive
  status/reason when the failure carries one
- build_health_status: the dict every gate's get_health_status() returns
"""

from __future__ import annotations

import logging
import os
from functools import wraps
from typing import Any, Callable, Dict, List, Optional


ROOT_LOGGER_NAME = "drivefs"
LOG_LEVEL_ENV = "DRIVEFS_LOG_LEVEL"
LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"


# =============================================================================
# GateLogger
# =============================================================================


class GateLogger:
    """
    Loggers for gate components, e.g. "drivefs.DriveClient.Gateway".

    The "drivefs" root gets a stream handler the first time any logger is
    requested, unless the host application already attached one. Its level
    comes from DRIVEFS_LOG_LEVEL (INFO when unset or unknown).
    """

    _loggers: Dict[str, logging.Logger] = {}
    _configured = False

    @staticmethod
    def level_from_env() -> int:
        """Resolve DRIVEFS_LOG_LEVEL to a logging level."""
        name = os.environ.get(LOG_LEVEL_ENV, "INFO").strip().upper()
        level = logging.getLevelName(name)
        return level if isinstance(level, int) else logging.INFO

    @classmethod
    def _ensure_configured(cls):
        if cls._configured:
            return

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        if not root_logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root_logger.addHandler(handler)
            root_logger.setLevel(cls.level_from_env())

        cls._configured = True

    @classmethod
    def get(cls, gate_name: str) -> logging.Logger:
        """
        Get the logger for a gate component.

        Args:
            gate_name: Dotted component name (e.g., "ContentsGate.Resolver")
        """
        cls._ensure_configured()

        logger_name = f"{ROOT_LOGGER_NAME}.{gate_name}"
        if logger_name not in cls._loggers:
            cls._loggers[logger_name] = logging.getLogger(logger_name)

        return cls._loggers[logger_name]

    @classmethod
    def set_level(cls, level: int, gate_name: Optional[str] = None):
        """Set the level of one component, or of all of drivefs."""
        if gate_name:
            cls.get(gate_name).setLevel(level)
        else:
            logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


# =============================================================================
# GateErrorHandler
# =============================================================================


def describe_error(exception: BaseException) -> str:
    """
    One-line description of a failure.

    Drive API errors carry a status and a structured reason; both are
    prefixed so throttling and permission failures stand out in the log.
    """
    status = getattr(exception, "status", None)
    reason = getattr(exception, "reason", None)
    if status is None:
        return str(exception)
    tag = f"{status}/{reason}" if reason else str(status)
    return f"[{tag}] {exception}"


class GateErrorHandler:
    """
    Logging for failures that reach a gate boundary.

    Components raise their own domain errors; this class only decides how
    the failure is reported where it leaves the gate.
    """

    @staticmethod
    def handle(
        gate_name: str,
        operation: str,
        exception: Exception,
        default_return: Any = None,
        log_level: int = logging.ERROR,
    ) -> Any:
        """
        Log a failed operation and return `default_return` in its place.

        Args:
            gate_name: Gate reporting the failure
            operation: Operation that failed
            exception: The failure
            default_return: Value handed back to the caller
            log_level: Level to log at
        """
        GateLogger.get(gate_name).log(log_level, f"{operation} failed: {describe_error(exception)}")
        return default_return

    @staticmethod
    def wrap_async(
        gate_name: str,
        operation: str,
        log_level: int = logging.ERROR,
    ):
        """Decorate a coroutine so failures are logged and then re-raised."""
        def decorator(func: Callable) -> Callable:
            @wraps(func)
            async def wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    GateErrorHandler.handle(gate_name, operation, e, log_level=log_level)
                    raise
            return wrapper
        return decorator


# =============================================================================
# Health status
# =============================================================================


def build_health_status(
    gate_name: str,
    initialized: bool,
    dependencies: List[str],
    checks: Dict[str, bool],
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the health dict for a gate.

    A gate is healthy when it is initialized and every check passed.
    """
    return {
        "gate": gate_name,
        "healthy": initialized and all(checks.values()),
        "initialized": initialized,
        "dependencies": dependencies,
        "checks": checks,
        "details": details or {},
    }


def get_logger(gate_name: str) -> logging.Logger:
    """Shortcut for GateLogger.get()."""
    return GateLogger.get(gate_name)
