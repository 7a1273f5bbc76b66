"""
Tests for shared Gate utilities.
"""

import logging

import pytest

from drivefs.DriveClient.errors import ApiError
from drivefs.shared.gate import (
    GateErrorHandler,
    GateLogger,
    build_health_status,
    describe_error,
    get_logger,
)


class TestGateLogger:
    """Tests for GateLogger."""

    def test_get_returns_logger(self):
        """Should return a logger below the drivefs root."""
        logger = GateLogger.get("TestGate")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "drivefs.TestGate"

    def test_get_same_logger_for_same_name(self):
        """Should return same logger for same gate name."""
        assert GateLogger.get("SameGate") is GateLogger.get("SameGate")

    def test_set_level_specific_gate(self):
        """Should set level for specific gate."""
        logger = GateLogger.get("LevelTestGate")
        GateLogger.set_level(logging.DEBUG, "LevelTestGate")

        assert logger.level == logging.DEBUG

    def test_get_logger_shortcut(self):
        """get_logger() should be equivalent to GateLogger.get()."""
        assert GateLogger.get("ShortcutGate") is get_logger("ShortcutGate")


class TestGateErrorHandler:
    """Tests for GateErrorHandler."""

    def test_handle_logs_error(self, caplog):
        """handle() should log the error and return the fallback."""
        with caplog.at_level(logging.ERROR):
            result = GateErrorHandler.handle(
                gate_name="TestGate",
                operation="test_op",
                exception=ValueError("test error"),
                default_return="default",
            )

        assert result == "default"
        assert "test_op failed" in caplog.text
        assert "test error" in caplog.text

    @pytest.mark.asyncio
    async def test_wrap_async_logs_and_reraises(self, caplog):
        """wrap_async() should log the failure and let it propagate."""
        @GateErrorHandler.wrap_async("TestGate", "async_op")
        async def failing():
            raise ValueError("async failure")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError):
                await failing()

        assert "async_op failed: async failure" in caplog.text

    @pytest.mark.asyncio
    async def test_wrap_async_passes_through_success(self):
        @GateErrorHandler.wrap_async("TestGate", "async_op")
        async def succeeding():
            return "success"

        assert await succeeding() == "success"


class TestBuildHealthStatus:
    """Tests for build_health_status()."""

    def test_healthy(self):
        status = build_health_status(
            gate_name="TestGate",
            initialized=True,
            dependencies=["httpx"],
            checks={"authorized": True},
        )

        assert status["healthy"] is True
        assert status["gate"] == "TestGate"
        assert status["details"] == {}

    def test_failed_check(self):
        status = build_health_status(
            gate_name="TestGate",
            initialized=True,
            dependencies=[],
            checks={"authorized": False},
        )

        assert status["healthy"] is False

    def test_not_initialized(self):
        status = build_health_status("TestGate", False, [], {})

        assert status["healthy"] is False


class TestDriveErrorLogging:
    """Drive status and reason are surfaced in gate error logs."""

    def test_describe_api_error(self):
        error = ApiError(403, "Rate Limit Exceeded", "rateLimitExceeded")

        assert describe_error(error) == "[403/rateLimitExceeded] Drive API error 403: Rate Limit Exceeded"

    def test_describe_status_without_reason(self):
        assert describe_error(ApiError(500, "boom")).startswith("[500] ")

    def test_describe_plain_exception(self):
        assert describe_error(ValueError("plain")) == "plain"

    def test_handle_includes_status(self, caplog):
        with caplog.at_level(logging.ERROR):
            GateErrorHandler.handle("TestGate", "resolve", ApiError(404, "File not found", "notFound"))

        assert "resolve failed: [404/notFound]" in caplog.text


class TestLogLevelFromEnv:
    """Tests for DRIVEFS_LOG_LEVEL."""

    def test_named_level(self, monkeypatch):
        monkeypatch.setenv("DRIVEFS_LOG_LEVEL", "debug")

        assert GateLogger.level_from_env() == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("DRIVEFS_LOG_LEVEL", "chatty")

        assert GateLogger.level_from_env() == logging.INFO

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("DRIVEFS_LOG_LEVEL", raising=False)

        assert GateLogger.level_from_env() == logging.INFO
