import asyncio
import re
from typing import List, Optional

from pydantic import ValidationError
from starlette.status import HTTP_404_NOT_FOUND, HTTP_502_BAD_GATEWAY

from cms_dashboard.configs.settings import settings
from cms_dashboard.consts.navigation import BulkAction
from cms_dashboard.core.exceptions import AppError
from cms_dashboard.schemas import (
    BreadcrumbItem, BulkActionRequest, BulkActionResult, ContainedPart, ContentItem,
    ContentQueryResponse, Folder, FolderQueryResponse, TaxonomyPart, ValidationResult
)
from cms_dashboard.services.content_store import ContentStoreClient
from cms_dashboard.utils import FileClassifier, get_logger
from cms_dashboard.utils.media_fields import detect_media_field, read_media_references

logger = get_logger(__name__)

FOLDER_NAME_PATTERN = re.compile(r"[a-zA-Z0-9 _-]+")
FOLDER_NAME_MAX_LENGTH = 255


class FolderService:
    def __init__(self, store: ContentStoreClient):
        self.store = store
        self.max_depth = settings.DASHBOARD_MAX_BREADCRUMB_DEPTH

    async def list_folders(self, repository: str, parent_folder_id: Optional[str] = None) -> FolderQueryResponse:
        """List child folders of ``parent_folder_id``, or root folders of ``repository``.

        The query endpoint cannot filter on containment, so filtering happens
        here. The repository only scopes the root listing; a parent listing
        returns every child whatever its repository. A failed query returns an
        empty result, indistinguishable from an empty folder.
        """
        try:
            records = await self.store.query_folders()
        except AppError as e:
            logger.error(f"Error querying folders: {e.message}")
            return FolderQueryResponse()

        folders: List[Folder] = []
        for record in records:
            try:
                folders.append(Folder.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable folder record: {e}")

        if parent_folder_id:
            folders = [f for f in folders if f.parent_id == parent_folder_id]
        else:
            folders = [f for f in folders if f.parent_id is None and f.repository in (None, repository)]

        return FolderQueryResponse(folders=folders, total_count=len(folders))

    async def get_folder_by_id(self, folder_id: str) -> Optional[Folder]:
        try:
            record = await self.store.get_item(folder_id)
            return Folder.model_validate(record) if record else None
        except (AppError, ValidationError) as e:
            logger.error(f"Error getting folder by ID {folder_id}: {e}")
            return None

    async def list_content(self, folder_id: str) -> ContentQueryResponse:
        """Project the media embedded in a folder record as content items"""
        try:
            record = await self.store.get_item(folder_id)
        except AppError as e:
            logger.error(f"Error loading content of folder {folder_id}: {e.message}")
            return ContentQueryResponse()

        if not record:
            return ContentQueryResponse()

        try:
            folder = Folder.model_validate(record)
        except ValidationError as e:
            logger.error(f"Folder {folder_id} has an unreadable record: {e}")
            return ContentQueryResponse()

        shape = detect_media_field(record, settings.DASHBOARD_MEDIA_PART, settings.DASHBOARD_MEDIA_FIELD)
        references = read_media_references(record, shape, settings.DASHBOARD_MEDIA_URL_PREFIX)

        items = []
        for order, reference in enumerate(references):
            extension = FileClassifier.get_file_extension(reference.name)
            items.append(ContentItem(
                content_item_id=reference.path,
                display_text=reference.display_text or reference.name,
                owner=folder.owner,
                author=folder.author,
                created_utc=reference.created_utc or folder.created_utc,
                modified_utc=folder.modified_utc,
                published=folder.published,
                contained_part=ContainedPart(list_content_item_id=folder.content_item_id, order=order),
                taxonomy_part=TaxonomyPart(repository=folder.repository),
                content_size=reference.size,
                mime_type=reference.mime_type,
                file_extension=extension,
                file_type=FileClassifier.get_file_type(reference.mime_type, extension),
                media_path=reference.path,
                media_url=reference.url,
            ))

        total_size = sum(item.content_size or 0 for item in items)
        return ContentQueryResponse(items=items, total_count=len(items), total_size=total_size)

    async def create_folder(self, display_text: str, repository: str, parent_folder_id: Optional[str] = None) -> Folder:
        validation = self.validate_folder_name(display_text)
        if not validation.valid:
            raise AppError(validation.error, code="validation_error", field="folder_name")

        logger.info(f"Creating folder '{display_text}' in {repository} under {parent_folder_id or 'root'}")

        payload = {
            "ContentType": "Folder",
            "DisplayText": display_text,
            "Published": True,
            "TaxonomyPart": {"Repository": [repository]},
            "ListPart": {},
        }
        if parent_folder_id:
            payload["ContainedPart"] = {"ListContentItemId": parent_folder_id, "Order": 0}

        created = await self.store.save_item(payload)
        try:
            folder = Folder.model_validate(created)
        except ValidationError:
            raise AppError("Content store returned an unreadable folder", status_code=HTTP_502_BAD_GATEWAY, code="store_failure")

        logger.info(f"Folder created successfully: {folder.content_item_id}")
        return folder

    @staticmethod
    def validate_folder_name(name: Optional[str]) -> ValidationResult:
        if not name or not name.strip():
            return ValidationResult(valid=False, error="Folder name is required")

        if len(name) > FOLDER_NAME_MAX_LENGTH:
            return ValidationResult(valid=False, error="Folder name must be 255 characters or less")

        if not FOLDER_NAME_PATTERN.fullmatch(name):
            return ValidationResult(
                valid=False,
                error="Folder name can only contain letters, numbers, spaces, hyphens, and underscores",
            )

        return ValidationResult(valid=True)

    def is_max_depth_reached(self, breadcrumb_path: List[BreadcrumbItem]) -> bool:
        return len(breadcrumb_path) >= self.max_depth

    async def set_published(self, content_item_id: str, published: bool) -> dict:
        """Flip the Published flag by resubmitting the whole record"""
        record = await self.store.get_item(content_item_id)
        if record is None:
            raise AppError("Content item not found", status_code=HTTP_404_NOT_FOUND, code="not_found")

        key = "published" if "published" in record and "Published" not in record else "Published"
        record[key] = published
        return await self.store.save_item(record)

    async def delete_item(self, content_item_id: str) -> None:
        await self.store.delete_item(content_item_id)

    async def bulk_action(self, request: BulkActionRequest) -> BulkActionResult:
        """Apply one action to every id concurrently.

        All calls are allowed to settle; if any of them failed the whole bulk
        action fails, with the failed ids listed in the error details.
        """
        action = BulkAction(request.action)
        logger.info(f"Bulk {action.value} of {len(request.content_item_ids)} items")

        async def run(content_item_id: str):
            if action is BulkAction.PUBLISH:
                return await self.set_published(content_item_id, True)
            if action is BulkAction.UNPUBLISH:
                return await self.set_published(content_item_id, False)
            return await self.delete_item(content_item_id)

        results = await asyncio.gather(
            *(run(content_item_id) for content_item_id in request.content_item_ids),
            return_exceptions=True,
        )

        failed = []
        for content_item_id, result in zip(request.content_item_ids, results):
            if isinstance(result, Exception):
                reason = result.message if isinstance(result, AppError) else str(result)
                logger.error(f"Bulk {action.value} failed for {content_item_id}: {reason}")
                failed.append({"content_item_id": content_item_id, "reason": reason})

        if failed:
            raise AppError(
                f"Bulk {action.value} failed",
                status_code=HTTP_502_BAD_GATEWAY,
                code="bulk_action_failed",
                details={"failed": failed},
            )

        return BulkActionResult(
            action=action.value,
            content_item_ids=request.content_item_ids,
            succeeded=len(results),
        )
