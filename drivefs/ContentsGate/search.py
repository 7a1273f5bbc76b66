"""
Scoped folder listings.

Builds "children of this folder" queries and pages through the results.
Callers pass folder ids, never paths.
"""

from __future__ import annotations

from typing import List

from drivefs.shared.gate import GateLogger
from drivefs.DriveClient import drive_api
from drivefs.DriveClient.gateway import RequestGateway
from drivefs.DriveClient.models import Resource

_log = GateLogger.get("ContentsGate.Search")


def children_query(parent_id: str, query: str = "") -> str:
    """Non-trashed children of `parent_id`, optionally narrowed by `query`."""
    full_query = f"'{drive_api.quote_query_value(parent_id)}' in parents and trashed = false"
    if query:
        full_query += f" and {query}"
    return full_query


def name_query(name: str) -> str:
    return f"name = '{drive_api.quote_query_value(name)}'"


async def list_children(
    gateway: RequestGateway,
    parent_id: str,
    query: str = "",
) -> List[Resource]:
    """
    List the children of a folder.

    Args:
        gateway: Gateway used for the listing calls
        parent_id: Folder id to scope the listing to
        query: Extra Drive query conjoined to the scope

    Returns:
        Resources in the order the remote store returned them
    """
    full_query = children_query(parent_id, query)
    resources: List[Resource] = []
    page_token = None

    while True:
        result = await gateway.execute(drive_api.list_files(full_query, page_token))
        result = result or {}
        resources.extend(Resource.from_dict(f) for f in result.get("files") or [])
        page_token = result.get("nextPageToken")
        if not page_token:
            break

    _log.debug(f"Listed {len(resources)} children of {parent_id}")
    return resources
