"""
Upload Encoder.

Builds the multipart/related request that creates or updates a resource
and its content in one call.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from drivefs.shared.gate import GateLogger
from drivefs.DriveClient import drive_api
from drivefs.DriveClient.gateway import RequestGateway
from drivefs.DriveClient.models import FOLDER_MIMETYPE, RequestDescriptor, Resource

from .errors import DestinationExists
from .mapper import ContentMapper
from .models import BINARY_MIMETYPE, NOTEBOOK_MIMETYPE, ContentFormat, ContentModel, ContentType
from .paths import basename
from .resolver import PathResolver
from .search import list_children, name_query

_log = GateLogger.get("ContentsGate.Upload")

MULTIPART_BOUNDARY = "-------314159265358979323846"


def serialize_content(content: Any) -> str:
    """Strings are written verbatim; anything else as JSON."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return json.dumps(content)


def encode_multipart(
    metadata: dict,
    mime_type: str,
    content: Any,
    content_format: Optional[str] = None,
) -> str:
    """
    Encode a metadata part and a content part as multipart/related.

    Args:
        metadata: Files resource metadata ({} leaves metadata untouched)
        mime_type: Declared type of the content part
        content: Content payload
        content_format: Format of the payload; base64 payloads are decoded
            by the remote store whatever their declared type
    """
    delimiter = f"\r\n--{MULTIPART_BOUNDARY}\r\n"
    close_delim = f"\r\n--{MULTIPART_BOUNDARY}--"

    body = delimiter + "Content-Type: application/json; charset=UTF-8\r\n\r\n"
    body += json.dumps(metadata)
    body += delimiter

    body += f"Content-Type: {mime_type}\r\n"
    if content_format == ContentFormat.BASE64 or mime_type == BINARY_MIMETYPE:
        body += "Content-Transfer-Encoding: base64\r\n"
    body += "\r\n" + serialize_content(content) + close_delim
    return body


class UploadEncoder:
    """Creates and updates resources from ContentModels."""

    def __init__(self, gateway: RequestGateway, resolver: PathResolver, mapper: ContentMapper):
        self.gateway = gateway
        self.resolver = resolver
        self.mapper = mapper

    async def build_upload(
        self,
        path: str,
        model: ContentModel,
        is_update: bool = False,
    ) -> RequestDescriptor:
        """
        Build the create/update request for a ContentModel.

        Args:
            path: Path to upload to
            model: Model to upload
            is_update: Whether the file already exists

        Returns:
            The multipart upload request

        Raises:
            NotAFolder: The enclosing folder of a new file is not a folder
            DestinationExists: A new file's name is taken in its folder
            InvalidContentType: The model's type has no mime mapping
        """
        stub = self.mapper.to_resource_stub(model)

        if is_update:
            resource = await self.resolver.resolve(path)
            file_id = resource.id
            # Metadata is not replaced on update.
            metadata: dict = {}
            default_mime = resource.mime_type
        else:
            folder = await self.resolver.resolve_parent(path)
            # The new resource is named after the path it is created at.
            stub.name = basename(path)
            existing = await list_children(self.gateway, folder.id, name_query(stub.name))
            if existing:
                _log.warning(f"Refusing to create {path}: name already taken")
                raise DestinationExists(path)
            stub.parents = [folder.id]
            file_id = None
            metadata = stub.to_dict()
            default_mime = stub.mime_type

        if model.type == ContentType.NOTEBOOK:
            mime_type = NOTEBOOK_MIMETYPE
        elif model.type == ContentType.DIRECTORY:
            mime_type = FOLDER_MIMETYPE
        else:
            mime_type = model.mimetype or default_mime

        body = encode_multipart(metadata, mime_type, model.content, model.format)
        return drive_api.multipart_upload(body, MULTIPART_BOUNDARY, file_id)

    async def upload(
        self,
        path: str,
        model: ContentModel,
        is_update: bool = False,
    ) -> ContentModel:
        """
        Upload a ContentModel and return the model of what was stored.

        Returns:
            ContentModel for the uploaded resource, content included
        """
        request = await self.build_upload(path, model, is_update)
        result = await self.gateway.execute(request)
        resource = Resource.from_dict(result)
        _log.info(f"Uploaded document to {resource.id}")
        return await self.mapper.from_resource(resource, path, include_content=True)


__all__ = ["UploadEncoder", "MULTIPART_BOUNDARY", "encode_multipart", "serialize_content"]
