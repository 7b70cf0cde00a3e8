from typing import List, Optional

from pydantic import ValidationError

from cms_dashboard.configs.settings import settings
from cms_dashboard.core.exceptions import AppError
from cms_dashboard.schemas.folder import BreadcrumbItem, Folder
from cms_dashboard.services.content_store import ContentStoreClient
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)


class BreadcrumbService:
    """Resolve a folder's ancestor trail by following its containment back-references"""

    def __init__(self, store: ContentStoreClient, max_depth: Optional[int] = None):
        self.store = store
        self.max_depth = settings.DASHBOARD_MAX_BREADCRUMB_DEPTH if max_depth is None else max_depth

    async def resolve_breadcrumb(self, folder_id: str, max_depth: Optional[int] = None) -> List[BreadcrumbItem]:
        """Return the breadcrumb for ``folder_id``, root first.

        At most ``max_depth`` parent hops are followed, so the trail holds at
        most ``max_depth + 1`` items; a revisited id ends the walk as if it
        were a root. A missing or unreadable folder anywhere in the chain
        yields an empty trail rather than a partial one.
        """
        max_depth = self.max_depth if max_depth is None else max_depth
        trail: List[BreadcrumbItem] = []
        visited = set()
        next_id: Optional[str] = folder_id
        hops = 0

        while next_id:
            folder = await self._fetch_folder(next_id)
            if folder is None:
                return []

            visited.add(next_id)
            trail.append(BreadcrumbItem(content_item_id=folder.content_item_id, display_text=folder.display_text))

            parent_id = folder.parent_id
            if not parent_id or hops >= max_depth:
                break
            if parent_id in visited:
                logger.warning(f"Containment cycle detected at folder {parent_id} while resolving {folder_id}")
                break

            next_id = parent_id
            hops += 1

        trail.reverse()
        for level, item in enumerate(trail):
            item.level = level
        return trail

    async def _fetch_folder(self, folder_id: str) -> Optional[Folder]:
        try:
            record = await self.store.get_item(folder_id)
        except AppError as e:
            logger.error(f"Error building breadcrumb at folder {folder_id}: {e.message}")
            return None

        if record is None:
            logger.warning(f"Breadcrumb link to missing folder {folder_id}")
            return None

        try:
            return Folder.model_validate(record)
        except ValidationError as e:
            logger.error(f"Folder {folder_id} has an unreadable record: {e}")
            return None
