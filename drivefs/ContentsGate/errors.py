"""
ContentsGate errors.

Path resolution, mapping and operation failures.
"""

from drivefs.DriveClient.errors import DriveError


class ContentsError(DriveError):
    """Base class for path-level failures."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class NotFound(ContentsError):
    """Raised when a path component has no match in its parent folder."""

    def __init__(self, path: str, component: str):
        super().__init__(path, f"Cannot find the specified file/folder: {component} (in {path!r})")
        self.component = component


class AmbiguousMatch(ContentsError):
    """Raised when a path component matches more than one sibling."""

    def __init__(self, path: str, component: str, count: int):
        super().__init__(path, f"Multiple files/folders ({count}) match: {component} (in {path!r})")
        self.component = component
        self.count = count


class NotAFolder(ContentsError):
    """Raised when a folder was required but something else was found."""

    def __init__(self, path: str):
        super().__init__(path, f"Expected a folder: {path!r}")


class DestinationExists(ContentsError):
    """Raised when a move target collides with an existing sibling."""

    def __init__(self, path: str):
        super().__init__(path, f"Destination already exists: {path!r}")


class InvalidContentType(ContentsError):
    """Raised when a content model carries an unmapped type."""

    def __init__(self, path: str, content_type: str):
        super().__init__(path, f"Invalid contents type {content_type!r} for {path!r}")
        self.content_type = content_type


class DownloadFailed(ContentsError):
    """Raised when the content of a file cannot be downloaded or decoded."""

    def __init__(self, path: str, reason: str = ""):
        message = f"Unable to download contents of {path!r}"
        if reason:
            message += f": {reason}"
        super().__init__(path, message)


class DeleteFailed(ContentsError):
    """Raised when a path cannot be deleted."""

    def __init__(self, path: str):
        super().__init__(path, f"Unable to delete file: {path!r}")
