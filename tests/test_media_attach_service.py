"""Tests for the upload -> read -> merge -> write-back attach procedure."""

import asyncio
import json

import pytest

from cms_dashboard.core.exceptions import AppError
from cms_dashboard.services.media_attach_service import MediaAttachService


@pytest.fixture
def attach_service(content_store, media_store) -> MediaAttachService:
    return MediaAttachService(content_store, media_store)


async def test_uploads_under_repository_and_folder_directory(orchard, media_store, attach_service):
    orchard.add_folder("docs", "Docs")

    reference = await attach_service.attach_media("docs", "report.pdf", b"%PDF", "application/pdf", "Local")

    media_store.upload.assert_awaited_once_with(b"%PDF", "report.pdf", "application/pdf", path="Local/docs")
    assert reference.path == "Local/docs/report_20240115103000.pdf"
    assert reference.url == "/media/Local/docs/report_20240115103000.pdf"
    assert reference.size == 4


async def test_missing_media_field_initialises_flat_list(orchard, attach_service):
    orchard.add_folder("docs", "Docs")

    await attach_service.attach_media("docs", "a.txt", b"a", "text/plain", "Local", display_text="Alpha")

    media = orchard.records["docs"]["MediaItems"]
    assert len(media) == 1
    assert media[0]["path"] == "Local/docs/a_20240115103000.txt"
    assert media[0]["mimeType"] == "text/plain"
    assert media[0]["displayText"] == "Alpha"


async def test_appends_to_existing_flat_list_in_order(orchard, attach_service):
    orchard.add_folder("docs", "Docs", mediaItems=[{"path": "old.txt", "name": "old.txt", "url": "/media/old.txt"}])

    await attach_service.attach_media("docs", "new.txt", b"n", "text/plain", "Local")

    media = orchard.records["docs"]["mediaItems"]
    assert [entry["path"] for entry in media] == ["old.txt", "Local/docs/new_20240115103000.txt"]
    assert "MediaItems" not in orchard.records["docs"]


async def test_appends_to_nested_paths_keeping_texts_aligned(orchard, attach_service):
    orchard.add_folder("docs", "Docs", Folder={"Media": {"Paths": ["old.txt"], "MediaTexts": ["Old"]}})

    await attach_service.attach_media("docs", "new.txt", b"n", "text/plain", "Local", display_text="New")

    media_field = orchard.records["docs"]["Folder"]["Media"]
    assert media_field["Paths"] == ["old.txt", "Local/docs/new_20240115103000.txt"]
    assert media_field["MediaTexts"] == ["Old", "New"]
    assert "MediaItems" not in orchard.records["docs"]


async def test_write_back_resubmits_whole_record(orchard, attach_service):
    orchard.add_folder("docs", "Docs", parent_id="root", CustomPart={"Keep": "me"})

    await attach_service.attach_media("docs", "a.txt", b"a", "text/plain", "Local")

    saves = orchard.calls("POST")
    assert len(saves) == 1
    body = json.loads(saves[0].content)
    assert body["ContentItemId"] == "docs"
    assert body["CustomPart"] == {"Keep": "me"}
    assert body["ContainedPart"] == {"ListContentItemId": "root", "Order": 0}


async def test_upload_failure_aborts_before_touching_the_folder(orchard, media_store, attach_service):
    orchard.add_folder("docs", "Docs")
    media_store.upload.side_effect = OSError("bucket unavailable")

    with pytest.raises(AppError) as exc_info:
        await attach_service.attach_media("docs", "a.txt", b"a", "text/plain", "Local")

    assert exc_info.value.code == "store_failure"
    assert orchard.requests == []


async def test_missing_folder_aborts_after_upload(orchard, media_store, attach_service):
    with pytest.raises(AppError) as exc_info:
        await attach_service.attach_media("gone", "a.txt", b"a", "text/plain", "Local")

    assert exc_info.value.status_code == 404
    media_store.upload.assert_awaited_once()
    assert orchard.calls("POST") == []


async def test_write_back_failure_propagates(orchard, attach_service):
    orchard.add_folder("docs", "Docs")
    orchard.failing_saves.add("docs")

    with pytest.raises(AppError) as exc_info:
        await attach_service.attach_media("docs", "a.txt", b"a", "text/plain", "Local")

    assert exc_info.value.code == "store_failure"
    assert "MediaItems" not in orchard.records["docs"]


class InterleavingStore:
    """Holds every read until two have happened, so two attaches see the same snapshot"""

    def __init__(self, inner):
        self.inner = inner
        self.reads = 0
        self.both_read = asyncio.Event()

    async def get_item(self, content_item_id):
        record = await self.inner.get_item(content_item_id)
        self.reads += 1
        if self.reads == 2:
            self.both_read.set()
        await self.both_read.wait()
        return record

    async def save_item(self, payload):
        return await self.inner.save_item(payload)


async def test_concurrent_attaches_to_one_folder_lose_an_update(orchard, content_store, media_store):
    orchard.add_folder("docs", "Docs")
    service = MediaAttachService(InterleavingStore(content_store), media_store)

    await asyncio.gather(
        service.attach_media("docs", "a.txt", b"a", "text/plain", "Local"),
        service.attach_media("docs", "b.txt", b"b", "text/plain", "Local"),
    )

    # both uploads happened, but the last write-back wins
    assert media_store.upload.await_count == 2
    assert len(orchard.calls("POST")) == 2
    assert len(orchard.records["docs"]["MediaItems"]) == 1
