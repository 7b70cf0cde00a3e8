from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from cms_dashboard.schemas.folder import BreadcrumbItem, BulkActionResult, ContentItem, Folder, MediaReference

NavigationSection = Literal["shared-blog", "file", "change-logs"]
RepositoryLocation = Literal["Local", "Shared"]
ThemeMode = Literal["light", "dark"]
ContentViewMode = Literal["list", "grid"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserPreferences(BaseModel):
    """Durable UI preferences, kept across sessions"""
    theme: ThemeMode = "light"
    sidebar_collapsed: bool = False
    default_repository: RepositoryLocation = "Local"
    default_section: NavigationSection = "file"
    content_view_mode: ContentViewMode = "list"


class DashboardState(BaseModel):
    """Per-session navigation and selection state"""
    current_section: NavigationSection = "file"
    repository_location: RepositoryLocation = "Local"
    breadcrumb_path: List[BreadcrumbItem] = Field(default_factory=list)
    is_loading: bool = False
    last_updated: datetime = Field(default_factory=_utcnow)
    selected_ids: List[str] = Field(default_factory=list)

    @property
    def current_folder_id(self) -> Optional[str]:
        if not self.breadcrumb_path:
            return None
        return self.breadcrumb_path[-1].content_item_id


class NavigationMenuItem(BaseModel):
    id: NavigationSection
    label: str
    icon: str
    route: str
    order: int


class SectionUpdate(BaseModel):
    section: NavigationSection


class RepositoryUpdate(BaseModel):
    repository: RepositoryLocation


class PreferencesUpdate(BaseModel):
    theme: Optional[ThemeMode] = None
    sidebar_collapsed: Optional[bool] = None
    default_repository: Optional[RepositoryLocation] = None
    default_section: Optional[NavigationSection] = None
    content_view_mode: Optional[ContentViewMode] = None


class EnterFolderRequest(BaseModel):
    content_item_id: str
    display_text: str = ""


class SelectionRequest(BaseModel):
    content_item_ids: List[str] = Field(default_factory=list)


class DashboardBulkRequest(BaseModel):
    action: Literal["publish", "unpublish", "delete"]


class CurrentFolderRequest(BaseModel):
    folder_name: str


class SectionContent(BaseModel):
    """What the content section shows for the current folder"""
    state: DashboardState
    folders: List[Folder] = Field(default_factory=list)
    items: List[ContentItem] = Field(default_factory=list)
    total_size: int = 0
    total_size_display: str = "0 B"
    can_create_folder: bool = True
    can_create_file: bool = False


class SectionUploadResult(BaseModel):
    media: MediaReference
    content: SectionContent


class SectionBulkResult(BaseModel):
    result: BulkActionResult
    content: SectionContent
