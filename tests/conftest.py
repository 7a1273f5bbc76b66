"""
Pytest configuration and fixtures for drivefs tests.
"""

import base64
import copy
import json
import re
import sys
from collections import deque
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from drivefs.DriveClient.auth import AuthorizationSignal
from drivefs.DriveClient.drive_api import FILES_PATH, UPLOAD_PATH
from drivefs.DriveClient.gateway import RequestGateway
from drivefs.DriveClient.models import FOLDER_MIMETYPE, ROOT_ID, ApiResponse, RequestDescriptor
from drivefs.DriveClient.transport import Transport
from drivefs.ContentsGate.contents import DriveContents
from drivefs.ContentsGate.models import TEXT_MIMETYPE
from drivefs.ContentsGate.upload import MULTIPART_BOUNDARY

# Check for pytest-asyncio
try:
    import pytest_asyncio
    HAS_PYTEST_ASYNCIO = True
except ImportError:
    HAS_PYTEST_ASYNCIO = False


def pytest_collection_modifyitems(config, items):
    """Skip async tests if pytest-asyncio is not installed."""
    if HAS_PYTEST_ASYNCIO:
        return

    import asyncio
    skip_asyncio = pytest.mark.skip(
        reason="pytest-asyncio not installed - async tests require pytest-asyncio"
    )
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(skip_asyncio)


# ==================== Response helpers ====================


def ok(result: Any = None, status: int = 200) -> ApiResponse:
    return ApiResponse(status=status, result=copy.deepcopy(result))


def error_response(status: int, reason: Optional[str] = None, message: str = "error") -> ApiResponse:
    errors = [{"reason": reason}] if reason else []
    return ApiResponse(
        status=status,
        error={"code": status, "message": message, "errors": errors},
    )


def rate_limited() -> ApiResponse:
    return error_response(403, "rateLimitExceeded", "Rate Limit Exceeded")


def make_resource(
    file_id: str,
    name: str,
    mime_type: str = TEXT_MIMETYPE,
    parents: Optional[List[str]] = None,
    **extra,
) -> Dict[str, Any]:
    """A files resource in its remote (camelCase) shape."""
    resource = {
        "kind": "drive#file",
        "id": file_id,
        "name": name,
        "mimeType": mime_type,
        "trashed": False,
        "parents": [ROOT_ID] if parents is None else parents,
        "createdTime": "2024-01-01T00:00:00.000Z",
        "modifiedTime": "2024-01-02T00:00:00.000Z",
        "capabilities": {"canEdit": True},
    }
    resource.update(extra)
    return resource


# ==================== Fakes ====================


class FakeTransport(Transport):
    """
    Records every request; answers from a queue first, then from a handler.
    """

    def __init__(self, handler: Optional[Callable[[RequestDescriptor], ApiResponse]] = None):
        self.handler = handler
        self.responses: deque = deque()
        self.requests: List[RequestDescriptor] = []
        self.closed = False

    def queue(self, *responses: ApiResponse) -> None:
        self.responses.extend(responses)

    async def send(self, request: RequestDescriptor) -> ApiResponse:
        self.requests.append(request)
        if self.responses:
            return self.responses.popleft()
        if self.handler is not None:
            return self.handler(request)
        raise AssertionError(f"Unexpected request {request.describe()}")

    async def close(self) -> None:
        self.closed = True

    def requests_with(self, method: str) -> List[RequestDescriptor]:
        return [r for r in self.requests if r.method == method]


_QUOTED = r"'((?:[^'\\]|\\.)*)'"


def _unquote(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


class FakeDrive:
    """In-memory Drive v3 account answering the requests drivefs issues."""

    def __init__(self):
        self.files: Dict[str, Dict[str, Any]] = {
            ROOT_ID: make_resource(ROOT_ID, "My Drive", FOLDER_MIMETYPE, parents=[]),
        }
        self.contents: Dict[str, Any] = {}
        self.revisions: Dict[str, List[Dict[str, Any]]] = {}
        self.permissions: List[Dict[str, Any]] = []
        self.download_error: Optional[ApiResponse] = None
        self._counter = 0

    # ----- setup helpers -----

    def _new_id(self, prefix: str = "id") -> str:
        self._counter += 1
        return f"{prefix}{self._counter}"

    def add_folder(self, name: str, parent: str = ROOT_ID, **extra) -> str:
        file_id = self._new_id()
        self.files[file_id] = make_resource(file_id, name, FOLDER_MIMETYPE, [parent], **extra)
        return file_id

    def add_file(
        self,
        name: str,
        parent: str = ROOT_ID,
        mime_type: str = TEXT_MIMETYPE,
        content: Any = "",
        **extra,
    ) -> str:
        file_id = self._new_id()
        self.files[file_id] = make_resource(
            file_id,
            name,
            mime_type,
            [parent],
            webContentLink=f"https://drive.test/uc?id={file_id}",
            **extra,
        )
        self._store_content(file_id, content)
        return file_id

    def _store_content(self, file_id: str, content: Any) -> None:
        revision_id = self._new_id("rev")
        self.contents[file_id] = content
        self.revisions.setdefault(file_id, []).append({
            "id": revision_id,
            "modifiedTime": f"2024-02-{len(self.revisions.get(file_id, [])) + 1:02d}T00:00:00.000Z",
            "keepForever": False,
            "content": content,
        })
        self.files[file_id]["headRevisionId"] = revision_id

    def revision(self, file_id: str, revision_id: str) -> Dict[str, Any]:
        for revision in self.revisions.get(file_id, []):
            if revision["id"] == revision_id:
                return revision
        raise KeyError(revision_id)

    def children(self, parent_id: str) -> List[Dict[str, Any]]:
        return [
            f for f in self.files.values()
            if parent_id in f["parents"] and not f["trashed"]
        ]

    # ----- request handling -----

    def handle(self, request: RequestDescriptor) -> ApiResponse:
        if request.path.startswith(UPLOAD_PATH):
            return self._upload(request)

        rest = request.path[len(FILES_PATH):].strip("/")
        parts = rest.split("/") if rest else []
        if not parts:
            return self._search(request)

        file_id = parts[0]
        if file_id not in self.files:
            return error_response(404, "notFound", f"File not found: {file_id}")

        if len(parts) == 1:
            if request.method == "GET" and request.params.get("alt") == "media":
                if self.download_error is not None:
                    return self.download_error
                return ApiResponse(status=200, body=self.contents.get(file_id, ""))
            if request.method == "GET":
                return ok(self.files[file_id])
            if request.method == "PATCH":
                return self._relink(file_id, request)
            if request.method == "DELETE":
                del self.files[file_id]
                return ApiResponse(status=204, body=b"")

        if parts[1] == "permissions":
            permission = dict(request.body, fileId=file_id)
            self.permissions.append(permission)
            return ok({"kind": "drive#permission", "id": "perm1", **request.body})

        if parts[1] == "revisions":
            if len(parts) == 2:
                return ok({"revisions": [self._public(r) for r in self.revisions.get(file_id, [])]})
            revision = self.revision(file_id, parts[2])
            if request.method == "PATCH":
                revision["keepForever"] = request.body["keepForever"]
                return ok(self._public(revision))
            return ApiResponse(status=200, body=revision["content"])

        raise AssertionError(f"Unhandled request {request.describe()}")

    @staticmethod
    def _public(revision: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in revision.items() if k != "content"}

    def _search(self, request: RequestDescriptor) -> ApiResponse:
        query = request.params["q"]
        parent_id = _unquote(re.search(_QUOTED + r" in parents", query).group(1))
        files = self.children(parent_id)

        name_match = re.search(r"name = " + _QUOTED, query)
        if name_match:
            name = _unquote(name_match.group(1))
            files = [f for f in files if f["name"] == name]
        return ok({"files": files})

    def _relink(self, file_id: str, request: RequestDescriptor) -> ApiResponse:
        resource = self.files[file_id]
        remove_parent = request.params.get("removeParents")
        if remove_parent:
            resource["parents"] = [p for p in resource["parents"] if p != remove_parent]
        resource["parents"].append(request.params["addParents"])
        resource["name"] = request.body["name"]
        return ok(resource)

    def _upload(self, request: RequestDescriptor) -> ApiResponse:
        parts = request.body.split(f"\r\n--{MULTIPART_BOUNDARY}")
        metadata = json.loads(parts[1].split("\r\n\r\n", 1)[1])
        headers, content = parts[2].split("\r\n\r\n", 1)
        if "Content-Transfer-Encoding: base64" in headers:
            content = base64.b64decode(content)

        if request.method == "PATCH":
            file_id = request.path.rsplit("/", 1)[1]
            self.files[file_id].update(metadata)
        else:
            file_id = self._new_id()
            self.files[file_id] = make_resource(
                file_id, metadata["name"], metadata["mimeType"], metadata["parents"],
            )
        self._store_content(file_id, content)
        return ok(self.files[file_id])


# ==================== Fixtures ====================


@pytest.fixture
def drive() -> FakeDrive:
    """An empty in-memory Drive account."""
    return FakeDrive()


@pytest.fixture
def transport(drive: FakeDrive) -> FakeTransport:
    """Transport answering from the fake Drive account."""
    return FakeTransport(handler=drive.handle)


@pytest.fixture
def sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep so backoff never really waits."""
    return AsyncMock()


@pytest.fixture
def gateway(transport: FakeTransport, sleep: AsyncMock) -> RequestGateway:
    """An authorized gateway over the fake transport."""
    return RequestGateway(transport, AuthorizationSignal(authorized=True), sleep=sleep)


@pytest.fixture
def contents(gateway: RequestGateway) -> DriveContents:
    """DriveContents wired to the fake Drive account."""
    return DriveContents(gateway)


@pytest.fixture(autouse=True)
def reset_module_state():
    """Reset module-level state between tests."""
    yield

    # Reset ContentsGate
    try:
        import drivefs.ContentsGate as contents_gate
        contents_gate._contents = None
        contents_gate._initialized = False
    except (ImportError, AttributeError):
        pass

    # Reset Config
    try:
        import drivefs.Config as config
        config._manager = None
    except (ImportError, AttributeError):
        pass
