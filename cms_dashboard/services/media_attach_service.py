from typing import Optional

from starlette.status import HTTP_404_NOT_FOUND

from cms_dashboard.configs.settings import settings
from cms_dashboard.core.exceptions import AppError, store_failure
from cms_dashboard.schemas.folder import MediaReference
from cms_dashboard.services.content_store import ContentStoreClient
from cms_dashboard.services.media_store_service import MediaStoreService
from cms_dashboard.utils import get_logger
from cms_dashboard.utils.media_fields import append_media_reference, detect_media_field

logger = get_logger(__name__)


class MediaAttachService:
    """Upload a file and attach it to a folder's media list.

    The file store and the content store are independent, so attaching takes
    four sequential steps: upload, fresh read of the folder, merge, and
    write-back of the whole record. There is no concurrency token on the
    write-back: two uploads racing on one folder can lose the first reference
    (last writer wins). A failure after the upload leaves the blob orphaned.
    """

    def __init__(self, store: ContentStoreClient, media_store: MediaStoreService):
        self.store = store
        self.media_store = media_store

    async def attach_media(
        self,
        folder_id: str,
        file_name: str,
        data: bytes,
        content_type: Optional[str] = None,
        repository: Optional[str] = None,
        display_text: Optional[str] = None,
    ) -> MediaReference:
        directory = f"{repository}/{folder_id}" if repository else folder_id

        # Step 1: upload
        try:
            descriptor = await self.media_store.upload(data, file_name, content_type, path=directory)
        except AppError:
            raise
        except Exception as e:
            logger.error(f"[MEDIA_ATTACH] Upload of {file_name} to {directory} failed: {e}", exc_info=True)
            raise store_failure(f"Failed to upload file: {e}", file_name=file_name)

        logger.info(f"[MEDIA_ATTACH] Uploaded {file_name} as {descriptor.path}")

        reference = MediaReference(
            path=descriptor.path,
            name=descriptor.name,
            url=descriptor.url,
            size=descriptor.size,
            mime_type=descriptor.mime_type,
            created_utc=descriptor.created_utc,
            display_text=display_text,
        )

        try:
            # Step 2: read the folder fresh
            record = await self.store.get_item(folder_id)
            if record is None:
                raise AppError("Folder not found", status_code=HTTP_404_NOT_FOUND, code="not_found")

            # Step 3: merge in whatever shape the record already uses
            shape = detect_media_field(record, settings.DASHBOARD_MEDIA_PART, settings.DASHBOARD_MEDIA_FIELD)
            append_media_reference(record, shape, reference)
            logger.info(f"[MEDIA_ATTACH] Appending {descriptor.path} to folder {folder_id} ({shape.kind})")

            # Step 4: resubmit the whole record
            await self.store.save_item(record)
        except AppError as e:
            logger.error(f"[MEDIA_ATTACH] Attaching {descriptor.path} to folder {folder_id} failed, blob left orphaned: {e.message}")
            raise

        logger.info(f"[MEDIA_ATTACH] Attached {descriptor.path} to folder {folder_id}")
        return reference
