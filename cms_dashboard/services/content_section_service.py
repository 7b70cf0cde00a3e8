import asyncio
import posixpath
from typing import Optional

from starlette.status import HTTP_404_NOT_FOUND

from cms_dashboard.core.exceptions import AppError
from cms_dashboard.schemas import (
    BulkActionRequest, ContentQueryResponse, Folder, SectionBulkResult, SectionContent, SectionUploadResult
)
from cms_dashboard.services.breadcrumb_service import BreadcrumbService
from cms_dashboard.services.dashboard_state_service import DashboardStateStore
from cms_dashboard.services.folder_service import FolderService
from cms_dashboard.services.media_attach_service import MediaAttachService
from cms_dashboard.utils import FileClassifier, get_logger

logger = get_logger(__name__)


class ContentSectionService:
    """Drive the file section of the dashboard for one session.

    Ties the session's state store to the folder queries: every navigation
    step updates the breadcrumb and reloads the folders and media of the
    folder the trail now points at.
    """

    def __init__(
        self,
        state_store: DashboardStateStore,
        folder_service: FolderService,
        breadcrumb_service: BreadcrumbService,
        attach_service: Optional[MediaAttachService] = None,
    ):
        self.state_store = state_store
        self.folder_service = folder_service
        self.breadcrumb_service = breadcrumb_service
        self.attach_service = attach_service

    async def load_content(self) -> SectionContent:
        """Load the child folders and the media of the current folder concurrently"""
        state = self.state_store.state
        folder_id = state.current_folder_id

        await self.state_store.set_loading(True)
        try:
            if folder_id:
                folders, content = await asyncio.gather(
                    self.folder_service.list_folders(state.repository_location, folder_id),
                    self.folder_service.list_content(folder_id),
                )
            else:
                folders = await self.folder_service.list_folders(state.repository_location)
                content = ContentQueryResponse()
        finally:
            await self.state_store.set_loading(False)

        path = self.state_store.state.breadcrumb_path
        return SectionContent(
            state=self.state_store.state,
            folders=folders.folders,
            items=content.items,
            total_size=content.total_size,
            total_size_display=FileClassifier.format_file_size(content.total_size),
            can_create_folder=not self.folder_service.is_max_depth_reached(path),
            can_create_file=bool(path),
        )

    async def open_folder(self, folder_id: str) -> SectionContent:
        """Jump straight to a folder, rebuilding the breadcrumb from the store"""
        trail = await self.breadcrumb_service.resolve_breadcrumb(folder_id)
        if not trail:
            raise AppError("Folder not found", status_code=HTTP_404_NOT_FOUND, code="not_found")
        await self.state_store.set_breadcrumb_path(trail)
        return await self.load_content()

    async def enter_folder(self, content_item_id: str, display_text: str) -> SectionContent:
        await self.state_store.enter_folder(content_item_id, display_text)
        return await self.load_content()

    async def navigate_to_breadcrumb(self, content_item_id: str) -> SectionContent:
        await self.state_store.navigate_to_breadcrumb(content_item_id)
        return await self.load_content()

    async def go_home(self) -> SectionContent:
        await self.state_store.go_home()
        return await self.load_content()

    async def create_folder(self, folder_name: str) -> Folder:
        path = self.state_store.state.breadcrumb_path
        if self.folder_service.is_max_depth_reached(path):
            raise AppError(
                f"Maximum folder depth reached ({self.folder_service.max_depth} levels)",
                code="max_depth_reached",
            )

        return await self.folder_service.create_folder(
            folder_name,
            self.state_store.state.repository_location,
            self.state_store.current_folder_id,
        )

    async def upload_file(
        self,
        file_name: Optional[str],
        data: Optional[bytes],
        content_type: Optional[str] = None,
        display_text: Optional[str] = None,
    ) -> SectionUploadResult:
        folder_id = self.state_store.current_folder_id
        if not folder_id:
            raise AppError("You must be inside a folder to create files", code="validation_error")
        if not file_name or not data:
            raise AppError("Please select a file to upload", code="validation_error", field="file")

        if display_text is None:
            display_text = posixpath.splitext(file_name)[0]
        if not display_text.strip():
            raise AppError("Please enter a display name for the file", code="validation_error", field="display_text")

        if self.attach_service is None:
            raise RuntimeError("ContentSectionService was built without a media attach service")

        media = await self.attach_service.attach_media(
            folder_id,
            file_name,
            data,
            content_type,
            repository=self.state_store.state.repository_location,
            display_text=display_text.strip(),
        )
        return SectionUploadResult(media=media, content=await self.load_content())

    async def bulk_action(self, action: str) -> SectionBulkResult:
        """Apply ``action`` to the selection; the selection survives a failed action"""
        selected = list(self.state_store.state.selected_ids)
        if not selected:
            raise AppError("No items selected", code="validation_error", field="selected_ids")

        result = await self.folder_service.bulk_action(BulkActionRequest(content_item_ids=selected, action=action))
        await self.state_store.clear_selection()
        logger.info(f"Bulk {action} committed for {len(selected)} selected items")
        return SectionBulkResult(result=result, content=await self.load_content())
