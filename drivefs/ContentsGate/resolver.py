"""
Path Resolver.

Walks a slash-delimited path through the Drive parent/child graph, one
scoped lookup per component. Nothing is cached; every call starts from
the root.
"""

from __future__ import annotations

from drivefs.shared.gate import GateLogger
from drivefs.DriveClient import drive_api
from drivefs.DriveClient.gateway import RequestGateway
from drivefs.DriveClient.models import ROOT_ID, Resource

from .errors import AmbiguousMatch, NotAFolder, NotFound
from .paths import parent_path, split_path
from .search import children_query, name_query

_log = GateLogger.get("ContentsGate.Resolver")


class PathResolver:
    """Resolves paths to Drive files resources."""

    def __init__(self, gateway: RequestGateway):
        self.gateway = gateway

    async def resolve(self, path: str) -> Resource:
        """
        Get the files resource corresponding to a path.

        The path is always treated as absolute, whatever its leading,
        trailing or consecutive slashes.

        Args:
            path: Path of the file or folder

        Returns:
            The resource at that path

        Raises:
            NotFound: A component has no match in its parent folder
            AmbiguousMatch: A component matches several siblings
            NotAFolder: A non-terminal component is not a folder
        """
        components = split_path(path)

        if not components:
            result = await self.gateway.execute(drive_api.get_file(ROOT_ID))
            return Resource.from_dict(result)

        # Each lookup is scoped by the previous step's id, so steps run in order.
        current_id = ROOT_ID
        resource = None
        for index, component in enumerate(components):
            resource = await self._resolve_child(path, component, current_id)
            is_terminal = index == len(components) - 1
            if not is_terminal and not resource.is_folder:
                raise NotAFolder("/".join(components[: index + 1]))
            current_id = resource.id

        return resource

    async def resolve_folder(self, path: str) -> Resource:
        """Resolve a path that must name a folder."""
        resource = await self.resolve(path)
        if not resource.is_folder:
            raise NotAFolder(path)
        return resource

    async def resolve_parent(self, path: str) -> Resource:
        """Resolve the folder enclosing `path`."""
        return await self.resolve_folder(parent_path(path))

    async def _resolve_child(self, path: str, component: str, folder_id: str) -> Resource:
        """Find the single non-trashed child named `component` under `folder_id`."""
        query = children_query(folder_id, name_query(component))
        result = await self.gateway.execute(drive_api.list_files(query))
        files = (result or {}).get("files") or []

        if not files:
            _log.debug(f"No match for {component!r} under {folder_id}")
            raise NotFound(path, component)
        if len(files) > 1:
            _log.warning(f"{len(files)} entries named {component!r} under {folder_id}")
            raise AmbiguousMatch(path, component, len(files))

        return Resource.from_dict(files[0])


__all__ = ["PathResolver"]
