"""
Authorization-ready signal.

Sign-in and token refresh happen elsewhere; the gateway only needs to know
when requests may start flowing.
"""

from __future__ import annotations

import asyncio

from drivefs.shared.gate import GateLogger

_log = GateLogger.get("DriveClient.Auth")


class AuthorizationSignal:
    """
    One-shot gate that settles once authorization succeeds.

    Each gateway owns (or is handed) its own signal, so independent clients
    never share authorization state.
    """

    def __init__(self, authorized: bool = False):
        self._event = asyncio.Event()
        if authorized:
            self._event.set()

    @property
    def is_authorized(self) -> bool:
        return self._event.is_set()

    def authorize(self) -> None:
        """Release every request waiting on this signal."""
        if not self._event.is_set():
            _log.info("Authorized; releasing pending requests")
        self._event.set()

    async def wait(self) -> None:
        """Suspend until authorization has been granted."""
        await self._event.wait()


__all__ = ["AuthorizationSignal"]
