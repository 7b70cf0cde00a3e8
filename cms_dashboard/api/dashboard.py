from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette import status

from cms_dashboard.consts.navigation import NAVIGATION_ITEMS
from cms_dashboard.dependencies import (
    get_content_section_service, get_preferences_store, get_state_persistence, get_state_store
)
from cms_dashboard.schemas import (
    CurrentFolderRequest, DashboardBulkRequest, DashboardState, EnterFolderRequest, Folder,
    NavigationMenuItem, PreferencesUpdate, RepositoryUpdate, SectionBulkResult, SectionContent,
    SectionUpdate, SectionUploadResult, SelectionRequest, UserPreferences
)
from cms_dashboard.schemas.dashboard import ContentViewMode, ThemeMode
from cms_dashboard.schemas.response import ApiError, ApiResponse
from cms_dashboard.services import ContentSectionService, DashboardStateStore, StatePersistence
from cms_dashboard.utils.api_response import created, ok
from cms_dashboard.utils.verify_token import get_client_id, get_session_id

router = APIRouter(
    tags=["Dashboard"],
    responses={
        400: {"model": ApiError, "description": "Bad Request"},
        401: {"model": ApiError, "description": "Unauthorized"},
        404: {"model": ApiError, "description": "Not Found"},
        502: {"model": ApiError, "description": "Content Store Failure"},
    }
)


@router.get("/navigation", response_model=ApiResponse[List[NavigationMenuItem]], summary="Navigation Menu")
async def get_navigation():
    return ok(data=sorted(NAVIGATION_ITEMS, key=lambda item: item.order))


# Session state

@router.get("/state", response_model=ApiResponse[DashboardState], summary="Get Session State")
async def get_state(state_store: DashboardStateStore = Depends(get_state_store)):
    return ok(data=state_store.state)


@router.delete("/state", response_model=ApiResponse[DashboardState], summary="Reset Session State")
async def reset_state(
    session_id: str = Depends(get_session_id),
    client_id: str = Depends(get_client_id),
    persistence: StatePersistence = Depends(get_state_persistence),
):
    return ok(data=await persistence.reset_session(session_id, client_id), message="Session state reset")


@router.put("/section", response_model=ApiResponse[DashboardState], summary="Switch Section")
async def set_section(request: SectionUpdate, state_store: DashboardStateStore = Depends(get_state_store)):
    return ok(data=await state_store.set_current_section(request.section))


@router.put("/repository", response_model=ApiResponse[DashboardState], summary="Switch Repository")
async def set_repository(request: RepositoryUpdate, state_store: DashboardStateStore = Depends(get_state_store)):
    return ok(data=await state_store.set_repository_location(request.repository))


# Content section

@router.get("/content", response_model=ApiResponse[SectionContent], summary="Current Folder Content")
async def get_content(section: ContentSectionService = Depends(get_content_section_service)):
    return ok(data=await section.load_content())


@router.post("/navigation/open/{folder_id}", response_model=ApiResponse[SectionContent], summary="Open Folder")
async def open_folder(folder_id: str, section: ContentSectionService = Depends(get_content_section_service)):
    return ok(data=await section.open_folder(folder_id))


@router.post("/navigation/enter", response_model=ApiResponse[SectionContent], summary="Enter Child Folder")
async def enter_folder(
    request: EnterFolderRequest,
    section: ContentSectionService = Depends(get_content_section_service),
):
    return ok(data=await section.enter_folder(request.content_item_id, request.display_text))


@router.post(
    "/navigation/breadcrumb/{content_item_id}",
    response_model=ApiResponse[SectionContent],
    summary="Jump To Breadcrumb",
)
async def navigate_to_breadcrumb(
    content_item_id: str,
    section: ContentSectionService = Depends(get_content_section_service),
):
    return ok(data=await section.navigate_to_breadcrumb(content_item_id))


@router.post("/navigation/home", response_model=ApiResponse[SectionContent], summary="Go Home")
async def go_home(section: ContentSectionService = Depends(get_content_section_service)):
    return ok(data=await section.go_home())


@router.post(
    "/folders",
    response_model=ApiResponse[Folder],
    status_code=status.HTTP_201_CREATED,
    summary="Create Folder Here",
    description="Create a folder inside the current folder, refused once the maximum depth is reached",
)
async def create_folder(
    request: CurrentFolderRequest,
    section: ContentSectionService = Depends(get_content_section_service),
):
    folder = await section.create_folder(request.folder_name)
    return created(folder, message="Folder created successfully", location=f"/api/v1/folders/{folder.content_item_id}")


@router.post(
    "/upload",
    response_model=ApiResponse[SectionUploadResult],
    status_code=status.HTTP_201_CREATED,
    summary="Upload File Here",
)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    display_text: Optional[str] = Form(None),
    section: ContentSectionService = Depends(get_content_section_service),
):
    data = await file.read() if file is not None else None
    result = await section.upload_file(
        file.filename if file is not None else None,
        data,
        file.content_type if file is not None else None,
        display_text,
    )
    return created(result, message="File uploaded successfully", location=result.media.url)


# Selection

@router.post("/selection/{content_item_id}/toggle", response_model=ApiResponse[DashboardState], summary="Toggle Selection")
async def toggle_selection(content_item_id: str, state_store: DashboardStateStore = Depends(get_state_store)):
    return ok(data=await state_store.toggle_selection(content_item_id))


@router.put("/selection", response_model=ApiResponse[DashboardState], summary="Replace Selection")
async def select_all(request: SelectionRequest, state_store: DashboardStateStore = Depends(get_state_store)):
    return ok(data=await state_store.select_all(request.content_item_ids))


@router.delete("/selection", response_model=ApiResponse[DashboardState], summary="Clear Selection")
async def clear_selection(state_store: DashboardStateStore = Depends(get_state_store)):
    return ok(data=await state_store.clear_selection())


@router.post("/bulk", response_model=ApiResponse[SectionBulkResult], summary="Bulk Action On Selection")
async def bulk_action(
    request: DashboardBulkRequest,
    section: ContentSectionService = Depends(get_content_section_service),
):
    result = await section.bulk_action(request.action)
    return ok(data=result, message=f"Bulk {request.action} completed successfully")


# Preferences

@router.get("/preferences", response_model=ApiResponse[UserPreferences], summary="Get Preferences")
async def get_preferences(store: DashboardStateStore = Depends(get_preferences_store)):
    return ok(data=store.preferences)


@router.patch("/preferences", response_model=ApiResponse[UserPreferences], summary="Update Preferences")
async def update_preferences(request: PreferencesUpdate, store: DashboardStateStore = Depends(get_preferences_store)):
    return ok(data=await store.update_preferences(request), message="Preferences updated successfully")


@router.post("/preferences/sidebar/toggle", response_model=ApiResponse[UserPreferences], summary="Toggle Sidebar")
async def toggle_sidebar(store: DashboardStateStore = Depends(get_preferences_store)):
    return ok(data=await store.toggle_sidebar())


@router.put("/preferences/theme/{theme}", response_model=ApiResponse[UserPreferences], summary="Set Theme")
async def set_theme(theme: ThemeMode, store: DashboardStateStore = Depends(get_preferences_store)):
    return ok(data=await store.set_theme(theme))


@router.put("/preferences/view-mode/{mode}", response_model=ApiResponse[UserPreferences], summary="Set Content View Mode")
async def set_content_view_mode(mode: ContentViewMode, store: DashboardStateStore = Depends(get_preferences_store)):
    return ok(data=await store.set_content_view_mode(mode))
