"""
Content Model Mapper.

Converts Drive files resources (plus optional downloaded content) into
ContentModels, and ContentModels into metadata-only resource stubs.
"""

from __future__ import annotations

import asyncio
import base64
import json
from typing import Any, List, Optional, Tuple

from drivefs.shared.gate import GateLogger
from drivefs.DriveClient import drive_api
from drivefs.DriveClient.errors import DriveError
from drivefs.DriveClient.gateway import RequestGateway
from drivefs.DriveClient.models import FOLDER_MIMETYPE, Resource, ResourceStub

from .errors import DownloadFailed, InvalidContentType
from .models import (
    BINARY_MIMETYPE,
    NOTEBOOK_MIMETYPE,
    NOTEBOOK_MIMETYPES,
    TEXT_MIMETYPE,
    ContentFormat,
    ContentModel,
    ContentType,
)
from .paths import basename, join_path
from .search import list_children

_log = GateLogger.get("ContentsGate.Mapper")


def infer_file_type(mime_type: str) -> Tuple[str, str, Optional[str]]:
    """
    Infer (type, format, mimetype) for a non-folder resource.

    Notebook-ish mimes become notebooks, text/plain stays text, anything
    else is treated as opaque binary.
    """
    if mime_type in NOTEBOOK_MIMETYPES:
        return ContentType.NOTEBOOK.value, ContentFormat.JSON.value, None
    if mime_type == TEXT_MIMETYPE:
        return ContentType.FILE.value, ContentFormat.TEXT.value, TEXT_MIMETYPE
    return ContentType.FILE.value, ContentFormat.BASE64.value, BINARY_MIMETYPE


def decode_content(content: Any, fmt: str) -> Any:
    """
    Normalize a downloaded payload to the shape its format calls for.

    json -> parsed object, text -> str, base64 -> base64-encoded str.
    """
    if fmt == ContentFormat.JSON:
        if isinstance(content, (bytes, bytearray, str)):
            return json.loads(content) if content else None
        return content

    if fmt == ContentFormat.TEXT:
        if isinstance(content, (bytes, bytearray)):
            return bytes(content).decode("utf-8", errors="replace")
        if isinstance(content, (dict, list)):
            return json.dumps(content)
        return "" if content is None else str(content)

    if isinstance(content, (dict, list)):
        content = json.dumps(content)
    if isinstance(content, str):
        content = content.encode("utf-8")
    return base64.b64encode(content or b"").decode("ascii")


class ContentMapper:
    """Maps between Drive resources and ContentModels."""

    def __init__(self, gateway: RequestGateway):
        self.gateway = gateway

    async def from_resource(
        self,
        resource: Resource,
        path: str,
        include_content: bool = False,
    ) -> ContentModel:
        """
        Construct a ContentModel for a files resource.

        Args:
            resource: The files resource
            path: Path at which the resource lives, including its own name
            include_content: Download file content / list directory children.
                Costs extra round trips, so only use it when required.

        Returns:
            A fresh ContentModel

        Raises:
            DownloadFailed: File content could not be downloaded
        """
        if resource.mime_type == FOLDER_MIMETYPE:
            return await self._directory_model(resource, path, include_content)

        content = None
        if include_content:
            content = await self._download(resource, path)
        return self.model_for_content(resource, path, content)

    def model_for_content(self, resource: Resource, path: str, content: Any) -> ContentModel:
        """
        Build a file/notebook model from a resource and an already-fetched payload.

        The payload is interpreted with the resource's current type rules.
        """
        content_type, fmt, mimetype = infer_file_type(resource.mime_type)
        if content is not None:
            try:
                content = decode_content(content, fmt)
            except ValueError as e:
                raise DownloadFailed(path, f"content is not valid {fmt}") from e

        return ContentModel(
            name=resource.name,
            path=path,
            type=content_type,
            writable=resource.capabilities.can_edit,
            created=resource.created_time,
            last_modified=resource.modified_time,
            mimetype=mimetype,
            content=content,
            format=fmt,
        )

    async def _directory_model(
        self,
        resource: Resource,
        path: str,
        include_content: bool,
    ) -> ContentModel:
        content = None
        if include_content:
            content = await self._list_directory(resource, path)

        return ContentModel(
            name=resource.name,
            path=path,
            type=ContentType.DIRECTORY.value,
            writable=resource.capabilities.can_edit,
            created=resource.created_time,
            last_modified=resource.modified_time,
            mimetype=None,
            content=content,
            format=ContentFormat.JSON.value,
        )

    async def _list_directory(self, resource: Resource, path: str) -> List[ContentModel]:
        """Map every child, waiting for all of them before assembling the list."""
        children = await list_children(self.gateway, resource.id)
        models = await asyncio.gather(*[
            self.from_resource(child, join_path(path, child.name), include_content=False)
            for child in children
        ])
        # Directories first, then by name.
        return sorted(models, key=lambda m: (not m.is_directory, m.name.lower(), m.name))

    async def _download(self, resource: Resource, path: str) -> Any:
        try:
            return await self.gateway.execute(drive_api.download_file(resource.id))
        except DriveError as e:
            _log.error(f"Unable to download contents of {path}: {e}")
            raise DownloadFailed(path, str(e)) from e

    def to_resource_stub(self, model: ContentModel) -> ResourceStub:
        """
        Construct a minimal files resource from a ContentModel.

        Only metadata (name and mime type) is carried, never the content.

        Raises:
            InvalidContentType: The model's type has no mime mapping
        """
        if model.type == ContentType.DIRECTORY:
            mime_type = FOLDER_MIMETYPE
        elif model.type == ContentType.NOTEBOOK:
            mime_type = NOTEBOOK_MIMETYPE
        elif model.type == ContentType.FILE:
            if model.format == ContentFormat.TEXT:
                mime_type = TEXT_MIMETYPE
            elif model.format == ContentFormat.BASE64:
                mime_type = BINARY_MIMETYPE
            else:
                mime_type = model.mimetype or BINARY_MIMETYPE
        else:
            raise InvalidContentType(model.path, str(model.type))

        return ResourceStub(name=model.name or basename(model.path), mime_type=mime_type)


__all__ = ["ContentMapper", "infer_file_type", "decode_content"]
