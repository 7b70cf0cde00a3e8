"""
Shared pytest fixtures for the dashboard test suite.

Provides:
- An in-memory Orchard content store served through httpx.MockTransport
- Content store clients bound to it
- Mocked MinIO and Redis backends
"""

import copy
import json
import uuid
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from cms_dashboard.schemas.media import MediaFileDescriptor
from cms_dashboard.services.content_store import ContentStoreClient


class FakeOrchard:
    """Minimal stand-in for Orchard's /api/content and /api/graphql endpoints."""

    def __init__(self) -> None:
        self.records: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.failing_ids: set[str] = set()
        self.failing_saves: set[str] = set()
        self.reject_saves = False
        self.fail_graphql = False
        self.fail_transport = False

    # Seeding helpers

    def add_folder(
        self,
        content_item_id: str,
        display_text: str,
        parent_id: str | None = None,
        repository: str | None = "Local",
        **extra: Any,
    ) -> dict:
        record = {
            "ContentItemId": content_item_id,
            "ContentType": "Folder",
            "DisplayText": display_text,
            "Published": True,
            "Owner": "admin",
            "Author": "admin",
            "CreatedUtc": "2024-01-15T10:30:00Z",
            "ModifiedUtc": "2024-01-15T10:30:00Z",
            "ListPart": {},
        }
        if repository is not None:
            record["TaxonomyPart"] = {"Repository": [repository]}
        if parent_id is not None:
            record["ContainedPart"] = {"ListContentItemId": parent_id, "Order": 0}
        record.update(extra)
        self.records[content_item_id] = record
        return record

    def chain(self, length: int, prefix: str = "f") -> list[str]:
        """Seed root -> ... -> leaf and return the ids root first"""
        ids = [f"{prefix}{i}" for i in range(length)]
        for index, content_item_id in enumerate(ids):
            parent = ids[index - 1] if index else None
            self.add_folder(content_item_id, f"Folder {index}", parent_id=parent)
        return ids

    # Transport

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path == "/api/graphql":
            return self._graphql(request)
        if path == "/api/content" and request.method == "POST":
            return self._save(json.loads(request.content))
        if path.startswith("/api/content/"):
            content_item_id = path[len("/api/content/"):]
            if content_item_id in self.failing_ids:
                return httpx.Response(500, json={"error": "boom"})
            if request.method == "GET":
                record = self.records.get(content_item_id)
                if record is None:
                    return httpx.Response(404)
                return httpx.Response(200, json=copy.deepcopy(record))
            if request.method == "DELETE":
                if self.records.pop(content_item_id, None) is None:
                    return httpx.Response(404)
                return httpx.Response(200)
        return httpx.Response(404)

    def _save(self, payload: dict) -> httpx.Response:
        content_item_id = payload.get("ContentItemId") or uuid.uuid4().hex[:26]
        if self.reject_saves or content_item_id in self.failing_saves:
            return httpx.Response(500, json={"error": "save rejected"})
        payload["ContentItemId"] = content_item_id
        self.records[content_item_id] = copy.deepcopy(payload)
        return httpx.Response(200, json=payload)

    def _graphql(self, request: httpx.Request) -> httpx.Response:
        if self.fail_graphql:
            return httpx.Response(500, json={"errors": [{"message": "boom"}]})

        folders = []
        for record in self.records.values():
            if record.get("ContentType") != "Folder":
                continue
            contained = record.get("ContainedPart")
            taxonomy = record.get("TaxonomyPart")
            folders.append({
                "contentItemId": record["ContentItemId"],
                "displayText": record.get("DisplayText"),
                "owner": record.get("Owner"),
                "author": record.get("Author"),
                "createdUtc": record.get("CreatedUtc"),
                "modifiedUtc": record.get("ModifiedUtc"),
                "published": record.get("Published", False),
                "containedPart": {
                    "listContentItemId": contained["ListContentItemId"],
                    "order": contained.get("Order", 0),
                } if contained else None,
                "taxonomyPart": {"repository": taxonomy.get("Repository")} if taxonomy else None,
            })
        return httpx.Response(200, json={"data": {"folder": folders}})

    def calls(self, method: str, path_prefix: str = "/api/content") -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path.startswith(path_prefix)]


@pytest.fixture
def orchard() -> FakeOrchard:
    return FakeOrchard()


@pytest.fixture
async def http_client(orchard: FakeOrchard):
    async with httpx.AsyncClient(transport=orchard.transport) as client:
        yield client


@pytest.fixture
def content_store(http_client: httpx.AsyncClient) -> ContentStoreClient:
    return ContentStoreClient(access_token="test-token", http_client=http_client)


@pytest.fixture
def media_store() -> MagicMock:
    """Media store whose upload returns a descriptor under the requested directory"""
    store = MagicMock()

    async def upload(data: bytes, file_name: str, content_type: str | None = None, path: str | None = None):
        stem, _, ext = file_name.rpartition(".")
        stored = f"{stem}_20240115103000.{ext}" if stem else f"{file_name}_20240115103000"
        full_path = f"{path}/{stored}" if path else stored
        return MediaFileDescriptor(
            path=full_path,
            name=stored,
            size=len(data),
            mime_type=content_type,
            created_utc=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
            url=f"/media/{full_path}",
        )

    store.upload = AsyncMock(side_effect=upload)
    return store


class FakeRedis:
    """Dict-backed stand-in for the redis.asyncio client methods RedisService uses"""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.get = AsyncMock(side_effect=self._get)
        self.set = AsyncMock(side_effect=self._set)
        self.setex = AsyncMock(side_effect=self._setex)
        self.delete = AsyncMock(side_effect=self._delete)
        self.ping = AsyncMock(return_value=True)
        self.aclose = AsyncMock()

    async def _get(self, key: str):
        return self.data.get(key)

    async def _set(self, key: str, value: str):
        self.data[key] = value
        self.ttls.pop(key, None)
        return True

    async def _setex(self, key: str, ttl: int, value: str):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def _delete(self, key: str):
        return 1 if self.data.pop(key, None) is not None else 0


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
