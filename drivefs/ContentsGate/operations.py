"""
ContentsGate directory and revision operations.

Listing, move/rename, delete, permissions and the revision lifecycle,
all built on the resolver, mapper and upload encoder.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from drivefs.shared.gate import GateLogger
from drivefs.DriveClient import drive_api
from drivefs.DriveClient.errors import DriveError
from drivefs.DriveClient.gateway import RequestGateway
from drivefs.DriveClient.models import Resource

from .errors import DeleteFailed, DestinationExists, NotAFolder
from .mapper import ContentMapper
from .models import Checkpoint, ContentModel
from .paths import basename, normalize_path, parent_path
from .resolver import PathResolver
from .search import list_children, name_query
from .upload import UploadEncoder

_log = GateLogger.get("ContentsGate.Operations")


class DriveOperations:
    """Path-based operations over a Drive account."""

    def __init__(
        self,
        gateway: RequestGateway,
        resolver: PathResolver,
        mapper: ContentMapper,
        encoder: UploadEncoder,
    ):
        self.gateway = gateway
        self.resolver = resolver
        self.mapper = mapper
        self.encoder = encoder

    # ==================== Contents ====================

    async def get_content_model(self, path: str, include_content: bool = False) -> ContentModel:
        """Resolve a path and map it to a ContentModel."""
        resource = await self.resolver.resolve(path)
        return await self.mapper.from_resource(resource, path, include_content)

    async def get_download_url(self, path: str) -> Optional[str]:
        """Direct download link for the file at `path`."""
        resource = await self.resolver.resolve(path)
        return resource.web_content_link

    # ==================== Directories ====================

    async def list_directory(self, path: str, query: str = "") -> List[Resource]:
        """
        Search a directory.

        Args:
            path: Path of the directory
            query: Drive v3 query string narrowing the results; empty lists
                the whole directory

        Returns:
            Resources in the directory matching the query

        Raises:
            NotAFolder: The path does not name a folder
        """
        resource = await self.resolver.resolve(path)
        if not resource.is_folder:
            raise NotAFolder(path)
        return await list_children(self.gateway, resource.id, query)

    async def move(self, old_path: str, new_path: str) -> ContentModel:
        """
        Move (and/or rename) an entry.

        The collision check and the relink are separate remote calls, so a
        concurrent writer can still slip in between them.

        Raises:
            DestinationExists: Something named like the target already
                lives in the destination folder
        """
        if normalize_path(old_path) == normalize_path(new_path):
            return await self.get_content_model(old_path)

        new_folder_path = parent_path(new_path)
        new_name = basename(new_path)

        resource, new_folder, collisions = await asyncio.gather(
            self.resolver.resolve(old_path),
            self.resolver.resolve(new_folder_path),
            self.list_directory(new_folder_path, name_query(new_name)),
        )

        if collisions:
            _log.warning(f"Refusing to move {old_path} onto existing {new_path}")
            raise DestinationExists(new_path)

        await self.gateway.execute(
            drive_api.relink_file(resource.id, new_folder.id, resource.parent_id, new_name)
        )
        _log.info(f"Moved {old_path} to {new_path}")
        return await self.get_content_model(new_path)

    async def delete(self, path: str) -> None:
        """
        Delete the entry at `path`.

        Raises:
            DeleteFailed: Resolution or deletion failed
        """
        try:
            resource = await self.resolver.resolve(path)
            await self.gateway.execute(drive_api.delete_file(resource.id), expected_status=204)
        except DriveError as e:
            _log.error(f"Unable to delete file: {path}: {e}")
            raise DeleteFailed(path) from e
        _log.info(f"Deleted {path}")

    async def grant_edit_permission(self, resource_id: str, email_address: str) -> None:
        """Give a Drive user edit access to a resource."""
        await self.gateway.execute(drive_api.create_permission(resource_id, email_address))
        _log.info(f"Created permissions for {email_address}")

    # ==================== Revisions ====================

    async def list_revisions(self, path: str) -> List[Checkpoint]:
        """Pinned revisions of the file at `path`."""
        resource = await self.resolver.resolve(path)
        result = await self.gateway.execute(drive_api.list_revisions(resource.id))
        revisions = (result or {}).get("revisions") or []
        return [
            Checkpoint.from_revision(revision)
            for revision in revisions
            if revision.get("keepForever")
        ]

    async def pin_revision(self, path: str, revision_id: Optional[str] = None) -> Checkpoint:
        """
        Keep a revision forever; without this it is eventually cleaned up.

        Args:
            path: Path of the file
            revision_id: Revision to pin (the head revision by default)
        """
        resource = await self.resolver.resolve(path)
        target = revision_id or resource.head_revision_id
        revision = await self.gateway.execute(
            drive_api.update_revision(resource.id, target, keep_forever=True)
        )
        return Checkpoint.from_revision(revision)

    async def unpin_revision(self, path: str, revision_id: str) -> None:
        """Let a revision be garbage collected by the remote store."""
        resource = await self.resolver.resolve(path)
        await self.gateway.execute(
            drive_api.update_revision(resource.id, revision_id, keep_forever=False)
        )

    async def revert_to_revision(self, path: str, revision_id: str) -> ContentModel:
        """
        Write the content of a historical revision back as the head revision.

        The reverted content is interpreted with the current resource's type
        rules and uploaded in update mode, so the resource id is unchanged.
        """
        resource = await self.resolver.resolve(path)
        content = await self.gateway.execute(
            drive_api.download_revision(resource.id, revision_id)
        )
        model = self.mapper.model_for_content(resource, path, content)
        reverted = await self.encoder.upload(path, model, is_update=True)
        _log.info(f"Reverted {path} to revision {revision_id}")
        return reverted


__all__ = ["DriveOperations"]
