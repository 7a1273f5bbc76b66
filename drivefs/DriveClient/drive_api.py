"""
Drive v3 request builders.

Each function returns a RequestDescriptor for one remote call; nothing here
talks to the network.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from drivefs.DriveClient.models import RESOURCE_FIELDS, RequestDescriptor

FILES_PATH = "/drive/v3/files"
UPLOAD_PATH = "/upload/drive/v3/files"

REVISION_FIELDS = "revisions(id, modifiedTime, keepForever)"
LIST_PAGE_SIZE = 1000


def quote_query_value(value: str) -> str:
    """Escape a value for use inside a single-quoted Drive query literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def get_file(file_id: str) -> RequestDescriptor:
    """Metadata lookup by id."""
    return RequestDescriptor(
        method="GET",
        path=f"{FILES_PATH}/{file_id}",
        params={"fields": RESOURCE_FIELDS},
    )


def list_files(query: str, page_token: Optional[str] = None) -> RequestDescriptor:
    """Search for files matching a Drive query string."""
    params: Dict[str, Any] = {
        "q": query,
        "fields": f"nextPageToken,files({RESOURCE_FIELDS})",
        "pageSize": LIST_PAGE_SIZE,
    }
    if page_token:
        params["pageToken"] = page_token
    return RequestDescriptor(method="GET", path=FILES_PATH, params=params)


def download_file(file_id: str) -> RequestDescriptor:
    """Direct content download."""
    return RequestDescriptor(
        method="GET",
        path=f"{FILES_PATH}/{file_id}",
        params={"alt": "media"},
    )


def relink_file(
    file_id: str,
    add_parent: str,
    remove_parent: Optional[str],
    name: str,
) -> RequestDescriptor:
    """Move a file to a new parent and rename it in one call."""
    params: Dict[str, Any] = {"addParents": add_parent, "fields": RESOURCE_FIELDS}
    if remove_parent:
        params["removeParents"] = remove_parent
    return RequestDescriptor(
        method="PATCH",
        path=f"{FILES_PATH}/{file_id}",
        params=params,
        body={"name": name},
    )


def delete_file(file_id: str) -> RequestDescriptor:
    return RequestDescriptor(method="DELETE", path=f"{FILES_PATH}/{file_id}")


def list_revisions(file_id: str) -> RequestDescriptor:
    return RequestDescriptor(
        method="GET",
        path=f"{FILES_PATH}/{file_id}/revisions",
        params={"fields": REVISION_FIELDS},
    )


def update_revision(file_id: str, revision_id: str, keep_forever: bool) -> RequestDescriptor:
    """Toggle the keep-forever (pinned) flag of a revision."""
    return RequestDescriptor(
        method="PATCH",
        path=f"{FILES_PATH}/{file_id}/revisions/{revision_id}",
        params={"fields": "id,modifiedTime,keepForever"},
        body={"keepForever": keep_forever},
    )


def download_revision(file_id: str, revision_id: str) -> RequestDescriptor:
    """Content of a historical revision."""
    return RequestDescriptor(
        method="GET",
        path=f"{FILES_PATH}/{file_id}/revisions/{revision_id}",
        params={"alt": "media"},
    )


def create_permission(
    file_id: str,
    email_address: str,
    role: str = "writer",
    send_notification: bool = True,
) -> RequestDescriptor:
    """Grant a user access to a file."""
    return RequestDescriptor(
        method="POST",
        path=f"{FILES_PATH}/{file_id}/permissions",
        params={
            "emailMessage": file_id,
            "sendNotificationEmail": send_notification,
        },
        body={
            "type": "user",
            "role": role,
            "emailAddress": email_address,
        },
    )


def multipart_upload(
    body: str,
    boundary: str,
    file_id: Optional[str] = None,
) -> RequestDescriptor:
    """
    Create (no file_id) or update (file_id) a resource and its content.

    Args:
        body: Encoded multipart/related payload
        boundary: Boundary token used in the payload
        file_id: Target resource for updates
    """
    method = "POST"
    path = UPLOAD_PATH
    if file_id:
        method = "PATCH"
        path = f"{UPLOAD_PATH}/{file_id}"

    return RequestDescriptor(
        method=method,
        path=path,
        params={"uploadType": "multipart", "fields": RESOURCE_FIELDS},
        headers={"Content-Type": f'multipart/related; boundary="{boundary}"'},
        body=body,
    )


__all__ = [
    "FILES_PATH",
    "UPLOAD_PATH",
    "REVISION_FIELDS",
    "quote_query_value",
    "get_file",
    "list_files",
    "download_file",
    "relink_file",
    "delete_file",
    "list_revisions",
    "update_revision",
    "download_revision",
    "create_permission",
    "multipart_upload",
]
