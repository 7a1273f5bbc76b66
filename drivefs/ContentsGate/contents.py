"""
DriveContents - the path-addressed surface handed to the host.
"""

from __future__ import annotations

from typing import List, Optional

from drivefs import Config
from drivefs.shared.gate import GateErrorHandler, GateLogger
from drivefs.DriveClient.auth import AuthorizationSignal
from drivefs.DriveClient.gateway import RequestGateway
from drivefs.DriveClient.models import Resource
from drivefs.DriveClient.transport import HttpxTransport, Transport

from .mapper import ContentMapper
from .models import Checkpoint, ContentModel
from .operations import DriveOperations
from .resolver import PathResolver
from .upload import UploadEncoder

_log = GateLogger.get("ContentsGate.Contents")


class DriveContents:
    """
    Filesystem view of a Drive account.

    Every path-based call re-resolves its path from the root; nothing is
    cached between calls.
    """

    def __init__(self, gateway: RequestGateway):
        """
        Initialize the contents surface.

        Args:
            gateway: Request gateway all remote calls go through
        """
        self.gateway = gateway
        self.resolver = PathResolver(gateway)
        self.mapper = ContentMapper(gateway)
        self.encoder = UploadEncoder(gateway, self.resolver, self.mapper)
        self.operations = DriveOperations(gateway, self.resolver, self.mapper, self.encoder)

    @classmethod
    def from_config(
        cls,
        authorization: Optional[AuthorizationSignal] = None,
        transport: Optional[Transport] = None,
    ) -> "DriveContents":
        """
        Build an instance from drivefs.Config.

        When an access token is configured and no signal is supplied, the
        instance starts out authorized.
        """
        token = Config.get("DRIVE_ACCESS_TOKEN")
        if transport is None:
            transport = HttpxTransport(
                base_url=Config.get("DRIVE_API_URL"),
                access_token=token,
                timeout=Config.get("DRIVE_TIMEOUT"),
            )
        if authorization is None:
            authorization = AuthorizationSignal(authorized=bool(token))

        gateway = RequestGateway(
            transport,
            authorization,
            max_requests=Config.get("DRIVE_MAX_API_REQUESTS"),
            initial_delay=Config.get("DRIVE_INITIAL_DELAY_MS"),
            backoff_factor=Config.get("DRIVE_BACKOFF_FACTOR"),
        )
        return cls(gateway)

    @property
    def authorization(self) -> AuthorizationSignal:
        return self.gateway.authorization

    async def close(self) -> None:
        """Close the underlying transport."""
        _log.debug("Closing transport")
        await self.gateway.transport.close()

    async def get_content_model(self, path: str, include_content: bool = False) -> ContentModel:
        return await self.operations.get_content_model(path, include_content)

    @GateErrorHandler.wrap_async("ContentsGate", "put_content_model")
    async def put_content_model(
        self,
        path: str,
        model: ContentModel,
        is_update: bool = False,
    ) -> ContentModel:
        return await self.encoder.upload(path, model, is_update)

    @GateErrorHandler.wrap_async("ContentsGate", "delete_entry")
    async def delete_entry(self, path: str) -> None:
        await self.operations.delete(path)

    @GateErrorHandler.wrap_async("ContentsGate", "move_entry")
    async def move_entry(self, old_path: str, new_path: str) -> ContentModel:
        return await self.operations.move(old_path, new_path)

    async def list_directory(self, path: str, query: str = "") -> List[Resource]:
        return await self.operations.list_directory(path, query)

    async def get_download_url(self, path: str) -> Optional[str]:
        return await self.operations.get_download_url(path)

    async def list_revisions(self, path: str) -> List[Checkpoint]:
        return await self.operations.list_revisions(path)

    async def pin_revision(self, path: str, revision_id: Optional[str] = None) -> Checkpoint:
        return await self.operations.pin_revision(path, revision_id)

    async def unpin_revision(self, path: str, revision_id: str) -> None:
        await self.operations.unpin_revision(path, revision_id)

    @GateErrorHandler.wrap_async("ContentsGate", "revert_to_revision")
    async def revert_to_revision(self, path: str, revision_id: str) -> ContentModel:
        return await self.operations.revert_to_revision(path, revision_id)

    async def grant_edit_permission(self, resource_id: str, principal: str) -> None:
        await self.operations.grant_edit_permission(resource_id, principal)


__all__ = ["DriveContents"]
