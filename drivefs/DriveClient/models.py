"""
DriveClient Models.

Pydantic models for Drive resources, request descriptors and response envelopes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


FOLDER_MIMETYPE = "application/vnd.google-apps.folder"
FILE_MIMETYPE = "application/vnd.google-apps.file"

# Metadata requested for every resource fetch.
RESOURCE_FIELDS = (
    "kind,id,name,mimeType,trashed,headRevisionId,"
    "parents,modifiedTime,createdTime,capabilities,"
    "webContentLink"
)

ROOT_ID = "root"


class ResourceCapabilities(BaseModel):
    """Subset of the capabilities record the mapper relies on."""

    can_edit: bool = Field(default=False, alias="canEdit")

    class Config:
        populate_by_name = True
        extra = "allow"


class Resource(BaseModel):
    """A Drive files resource: the remote metadata record for a file or folder."""

    kind: Optional[str] = None
    id: str
    name: str = ""
    mime_type: str = Field(default="", alias="mimeType")
    trashed: bool = False
    head_revision_id: Optional[str] = Field(default=None, alias="headRevisionId")
    parents: List[str] = Field(default_factory=list)
    created_time: Optional[str] = Field(default=None, alias="createdTime")
    modified_time: Optional[str] = Field(default=None, alias="modifiedTime")
    capabilities: ResourceCapabilities = Field(default_factory=ResourceCapabilities)
    web_content_link: Optional[str] = Field(default=None, alias="webContentLink")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @property
    def is_folder(self) -> bool:
        """Check if the resource carries the folder discriminator."""
        return self.mime_type == FOLDER_MIMETYPE

    @property
    def parent_id(self) -> Optional[str]:
        """The single effective parent, if any."""
        return self.parents[0] if self.parents else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the remote (camelCase) representation."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        """Create from a remote files resource."""
        return cls.model_validate(data)


class ResourceStub(BaseModel):
    """Metadata-only files resource used when creating a resource."""

    name: str
    mime_type: str = Field(alias="mimeType")
    parents: Optional[List[str]] = None

    class Config:
        populate_by_name = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the remote (camelCase) representation."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RequestDescriptor(BaseModel):
    """A fully-formed description of one remote call."""

    method: str = "GET"
    path: str
    params: Dict[str, Any] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Any] = None

    def describe(self) -> str:
        """Short form for log messages."""
        return f"{self.method} {self.path}"


class ApiResponse(BaseModel):
    """
    Envelope yielded by the remote call primitive.

    A successful call carries `result` (parsed JSON) and/or `body` (raw text
    or bytes). A failed call carries `error` shaped like
    {code, message, errors: [{reason}]}.
    """

    status: int
    result: Optional[Any] = None
    body: Optional[Any] = None
    error: Optional[Dict[str, Any]] = None

    def is_error(self) -> bool:
        """Check if response is an error."""
        return self.error is not None

    @property
    def error_code(self) -> int:
        if self.error and self.error.get("code"):
            return int(self.error["code"])
        return self.status

    @property
    def error_message(self) -> str:
        if self.error:
            return str(self.error.get("message") or "Unknown error")
        return ""

    @property
    def error_reason(self) -> Optional[str]:
        """Structured reason of the first error entry."""
        if not self.error:
            return None
        errors = self.error.get("errors") or []
        if errors and isinstance(errors[0], dict):
            return errors[0].get("reason")
        return None


__all__ = [
    "FOLDER_MIMETYPE",
    "FILE_MIMETYPE",
    "RESOURCE_FIELDS",
    "ROOT_ID",
    "ResourceCapabilities",
    "Resource",
    "ResourceStub",
    "RequestDescriptor",
    "ApiResponse",
]
