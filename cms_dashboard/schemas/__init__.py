from cms_dashboard.schemas.response import ApiResponse, ApiError, ErrorDetail, HealthCheck
from cms_dashboard.schemas.folder import (
    Folder, ContainedPart, TaxonomyPart, MediaReference, ContentItem, BreadcrumbItem,
    FolderQueryResponse, ContentQueryResponse, FolderCreateRequest, FolderNameRequest,
    ValidationResult, BulkActionRequest, BulkActionResult
)
from cms_dashboard.schemas.dashboard import (
    DashboardState, UserPreferences, NavigationMenuItem, NavigationSection, RepositoryLocation,
    SectionUpdate, RepositoryUpdate, PreferencesUpdate, EnterFolderRequest, SelectionRequest,
    DashboardBulkRequest, CurrentFolderRequest, SectionContent, SectionUploadResult, SectionBulkResult
)
from cms_dashboard.schemas.media import (
    MediaFileDescriptor, MediaFileInfo, MediaListResponse, MoveFileRequest, MoveFileResponse,
    DeleteFileResponse
)
from cms_dashboard.schemas.auth import AuthErrorCode, AuthError, AuthResponse, LoginRequest, OAuth2TokenResponse

__all__ = [
    "ApiResponse",
    "ApiError",
    "ErrorDetail",
    "HealthCheck",
    # Folder schemas
    "Folder",
    "ContainedPart",
    "TaxonomyPart",
    "MediaReference",
    "ContentItem",
    "BreadcrumbItem",
    "FolderQueryResponse",
    "ContentQueryResponse",
    "FolderCreateRequest",
    "FolderNameRequest",
    "ValidationResult",
    "BulkActionRequest",
    "BulkActionResult",
    # Dashboard schemas
    "DashboardState",
    "UserPreferences",
    "NavigationMenuItem",
    "NavigationSection",
    "RepositoryLocation",
    "SectionUpdate",
    "RepositoryUpdate",
    "PreferencesUpdate",
    "EnterFolderRequest",
    "SelectionRequest",
    "DashboardBulkRequest",
    "CurrentFolderRequest",
    "SectionContent",
    "SectionUploadResult",
    "SectionBulkResult",
    # Media schemas
    "MediaFileDescriptor",
    "MediaFileInfo",
    "MediaListResponse",
    "MoveFileRequest",
    "MoveFileResponse",
    "DeleteFileResponse",
    # Auth schemas
    "AuthErrorCode",
    "AuthError",
    "AuthResponse",
    "LoginRequest",
    "OAuth2TokenResponse",
]
