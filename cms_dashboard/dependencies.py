from functools import lru_cache

from fastapi import Depends

from cms_dashboard.services import (
    AuthService, BreadcrumbService, ContentSectionService, ContentStoreClient, DashboardStateStore,
    FolderService, MediaAttachService, MediaStoreService, StatePersistence, redis_service
)
from cms_dashboard.utils.verify_token import get_client_id, get_session_id, verify_token


@lru_cache
def get_media_store() -> MediaStoreService:
    return MediaStoreService()


def get_state_persistence() -> StatePersistence:
    return StatePersistence(redis_service)


def get_auth_service() -> AuthService:
    return AuthService()


def get_content_store(access_token: str = Depends(verify_token)) -> ContentStoreClient:
    """Content store client that forwards the caller's bearer token"""
    return ContentStoreClient(access_token=access_token)


def get_folder_service(store: ContentStoreClient = Depends(get_content_store)) -> FolderService:
    return FolderService(store)


def get_breadcrumb_service(store: ContentStoreClient = Depends(get_content_store)) -> BreadcrumbService:
    return BreadcrumbService(store)


def get_media_attach_service(
    store: ContentStoreClient = Depends(get_content_store),
    media_store: MediaStoreService = Depends(get_media_store),
) -> MediaAttachService:
    return MediaAttachService(store, media_store)


async def get_state_store(
    session_id: str = Depends(get_session_id),
    client_id: str = Depends(get_client_id),
    persistence: StatePersistence = Depends(get_state_persistence),
) -> DashboardStateStore:
    return await persistence.open_store(session_id, client_id)


def get_content_section_service(
    state_store: DashboardStateStore = Depends(get_state_store),
    folder_service: FolderService = Depends(get_folder_service),
    breadcrumb_service: BreadcrumbService = Depends(get_breadcrumb_service),
    attach_service: MediaAttachService = Depends(get_media_attach_service),
) -> ContentSectionService:
    return ContentSectionService(state_store, folder_service, breadcrumb_service, attach_service)


async def get_preferences_store(
    client_id: str = Depends(get_client_id),
    persistence: StatePersistence = Depends(get_state_persistence),
) -> DashboardStateStore:
    return await persistence.open_preferences_store(client_id)
