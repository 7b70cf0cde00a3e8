from .content_store import ContentStoreClient
from .breadcrumb_service import BreadcrumbService
from .folder_service import FolderService
from .media_store_service import MediaStoreService
from .media_attach_service import MediaAttachService
from .redis_service import RedisService, redis_service
from .dashboard_state_service import DashboardStateStore
from .state_persistence import StatePersistence
from .auth_service import AuthService
from .content_section_service import ContentSectionService
__all__ = ["ContentStoreClient", "BreadcrumbService", "FolderService", "MediaStoreService", "MediaAttachService", "RedisService", "redis_service", "DashboardStateStore", "StatePersistence", "AuthService", "ContentSectionService"]
