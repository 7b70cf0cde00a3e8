from cms_dashboard.api.auth import router as auth_router
from cms_dashboard.api.folder import router as folder_router
from cms_dashboard.api.dashboard import router as dashboard_router
from cms_dashboard.api.media import router as media_router

__all__ = ["auth_router", "folder_router", "dashboard_router", "media_router"]
