from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from starlette import status
from starlette.status import HTTP_404_NOT_FOUND

from cms_dashboard.core.exceptions import AppError
from cms_dashboard.dependencies import (
    get_breadcrumb_service, get_folder_service, get_media_attach_service
)
from cms_dashboard.schemas import (
    BreadcrumbItem, BulkActionRequest, BulkActionResult, ContentQueryResponse, Folder,
    FolderCreateRequest, FolderNameRequest, FolderQueryResponse, MediaReference, ValidationResult
)
from cms_dashboard.schemas.dashboard import RepositoryLocation
from cms_dashboard.schemas.response import ApiError, ApiResponse
from cms_dashboard.services import BreadcrumbService, FolderService, MediaAttachService
from cms_dashboard.utils.api_response import created, ok

router = APIRouter(
    tags=["Folders"],
    responses={
        400: {"model": ApiError, "description": "Bad Request"},
        401: {"model": ApiError, "description": "Unauthorized"},
        404: {"model": ApiError, "description": "Not Found"},
        422: {"model": ApiError, "description": "Validation Error"},
        502: {"model": ApiError, "description": "Content Store Failure"},
    }
)


@router.get(
    "",
    response_model=ApiResponse[FolderQueryResponse],
    summary="List Folders",
    description="List the root folders of a repository, or the child folders of a parent folder",
)
async def list_folders(
    repository: RepositoryLocation = Query("Local"),
    parent_folder_id: Optional[str] = Query(None),
    folder_service: FolderService = Depends(get_folder_service),
):
    folders = await folder_service.list_folders(repository, parent_folder_id)
    return ok(data=folders, message="Folders listed successfully")


@router.post(
    "",
    response_model=ApiResponse[Folder],
    status_code=status.HTTP_201_CREATED,
    summary="Create Folder",
)
async def create_folder(
    request: FolderCreateRequest,
    folder_service: FolderService = Depends(get_folder_service),
):
    folder = await folder_service.create_folder(request.folder_name, request.repository, request.parent_folder_id)
    return created(folder, message="Folder created successfully", location=f"/api/v1/folders/{folder.content_item_id}")


@router.post("/validate-name", response_model=ApiResponse[ValidationResult], summary="Validate Folder Name")
async def validate_folder_name(request: FolderNameRequest):
    return ok(data=FolderService.validate_folder_name(request.folder_name))


@router.post(
    "/bulk",
    response_model=ApiResponse[BulkActionResult],
    summary="Bulk Action",
    description="Publish, unpublish or delete several content items at once",
)
async def bulk_action(
    request: BulkActionRequest,
    folder_service: FolderService = Depends(get_folder_service),
):
    result = await folder_service.bulk_action(request)
    return ok(data=result, message=f"Bulk {request.action} completed successfully")


@router.get("/{folder_id}", response_model=ApiResponse[Folder], summary="Get Folder")
async def get_folder(folder_id: str, folder_service: FolderService = Depends(get_folder_service)):
    folder = await folder_service.get_folder_by_id(folder_id)
    if folder is None:
        raise AppError("Folder not found", status_code=HTTP_404_NOT_FOUND, code="not_found")
    return ok(data=folder)


@router.get("/{folder_id}/content", response_model=ApiResponse[ContentQueryResponse], summary="List Folder Content")
async def list_content(folder_id: str, folder_service: FolderService = Depends(get_folder_service)):
    content = await folder_service.list_content(folder_id)
    return ok(data=content, message="Content listed successfully")


@router.get("/{folder_id}/breadcrumb", response_model=ApiResponse[List[BreadcrumbItem]], summary="Resolve Breadcrumb")
async def get_breadcrumb(
    folder_id: str,
    max_depth: Optional[int] = Query(None, ge=0),
    breadcrumb_service: BreadcrumbService = Depends(get_breadcrumb_service),
):
    trail = await breadcrumb_service.resolve_breadcrumb(folder_id, max_depth)
    return ok(data=trail)


@router.post(
    "/{folder_id}/media",
    response_model=ApiResponse[MediaReference],
    status_code=status.HTTP_201_CREATED,
    summary="Upload Media Into Folder",
    description="Upload a file and append it to the folder's media list",
)
async def upload_media(
    folder_id: str,
    file: Optional[UploadFile] = File(None),
    repository: RepositoryLocation = Form("Local"),
    display_text: Optional[str] = Form(None),
    attach_service: MediaAttachService = Depends(get_media_attach_service),
):
    data = await file.read() if file is not None else b""
    if not data:
        raise AppError("Please select a file to upload", code="validation_error", field="file")

    reference = await attach_service.attach_media(
        folder_id,
        file.filename or "upload",
        data,
        file.content_type,
        repository=repository,
        display_text=display_text,
    )
    return created(reference, message="File uploaded successfully", location=reference.url)
