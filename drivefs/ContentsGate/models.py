"""
ContentsGate Pydantic models.

The filesystem-facing content model and revision checkpoints.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


NOTEBOOK_MIMETYPE = "application/ipynb"
NOTEBOOK_MIMETYPES = (NOTEBOOK_MIMETYPE, "application/json")
TEXT_MIMETYPE = "text/plain"
BINARY_MIMETYPE = "application/octet-stream"


class ContentType(str, Enum):
    """Kind of entry exposed to the host."""
    FILE = "file"
    DIRECTORY = "directory"
    NOTEBOOK = "notebook"


class ContentFormat(str, Enum):
    """Shape of the content payload."""
    TEXT = "text"
    BASE64 = "base64"
    JSON = "json"


class ContentModel(BaseModel):
    """A path-addressed file, notebook or directory, with or without payload."""
    name: str
    path: str
    type: str = Field(description="file, directory or notebook")
    writable: bool = False
    created: Optional[str] = None
    last_modified: Optional[str] = None
    mimetype: Optional[str] = None
    # Directory children, or any JSON value.
    content: Optional[Union[List["ContentModel"], Dict[str, Any], List[Any], str, bool, int, float]] = None
    format: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentModel":
        """Create from dict."""
        return cls.model_validate(data)

    @property
    def is_directory(self) -> bool:
        return self.type == ContentType.DIRECTORY


class Checkpoint(BaseModel):
    """A pinned revision of a file."""
    id: str
    last_modified: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return self.model_dump(mode="json")

    @classmethod
    def from_revision(cls, revision: Dict[str, Any]) -> "Checkpoint":
        """Create from a Drive revisions resource."""
        return cls(id=revision["id"], last_modified=revision.get("modifiedTime"))


ContentModel.model_rebuild()
