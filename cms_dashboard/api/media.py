from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from starlette import status
from starlette.responses import JSONResponse

from cms_dashboard.dependencies import get_media_store
from cms_dashboard.schemas.media import DeleteFileResponse, MoveFileRequest
from cms_dashboard.services.media_store_service import MediaStoreService
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)

# Raw JSON bodies, no ApiResponse envelope
router = APIRouter(tags=["Media"])


def _json(model, status_code: int = status.HTTP_200_OK, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(content=model.model_dump(mode="json", by_alias=True), status_code=status_code, headers=headers)


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(content={"error": error, **extra}, status_code=status_code)


@router.post("", summary="Upload Media File", status_code=status.HTTP_201_CREATED)
async def upload(
    file: Optional[UploadFile] = File(None),
    path: str = Form(""),
    media_store: MediaStoreService = Depends(get_media_store),
):
    data = await file.read() if file is not None else b""
    if not data:
        return _error(status.HTTP_400_BAD_REQUEST, "File is required.")

    try:
        descriptor = await media_store.upload(data, file.filename or "upload", file.content_type, path=path)
    except Exception as e:
        logger.error(f"Failed to upload {file.filename}: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to upload file.", details=str(e))

    return _json(descriptor, status.HTTP_201_CREATED, headers={"Location": descriptor.url})


@router.get("/list", summary="List Media Files")
async def list_files(
    path: str = Query(""),
    media_store: MediaStoreService = Depends(get_media_store),
):
    try:
        listing = await media_store.list_files(path)
    except Exception as e:
        logger.error(f"Failed to list media under '{path}': {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to list files.", details=str(e))
    return _json(listing)


@router.put("/move", summary="Move Media File")
async def move_file(
    request: MoveFileRequest,
    media_store: MediaStoreService = Depends(get_media_store),
):
    if not request.source_path or not request.source_path.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Source path is required.")
    if not request.destination_path or not request.destination_path.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Destination path is required.")

    try:
        moved = await media_store.move_file(request.source_path, request.destination_path)
    except Exception as e:
        logger.error(f"Failed to move {request.source_path}: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to move file.", details=str(e))

    if moved is None:
        return _error(status.HTTP_404_NOT_FOUND, "Source file not found.", path=request.source_path)
    return _json(moved)


@router.get("/{file_path:path}", summary="Get Media File Info")
async def get_file_info(
    file_path: str,
    media_store: MediaStoreService = Depends(get_media_store),
):
    if not file_path.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "File path is required.")

    try:
        info = await media_store.get_file_info(file_path)
    except Exception as e:
        logger.error(f"Failed to get info of {file_path}: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get file info.", details=str(e))

    if info is None:
        return _error(status.HTTP_404_NOT_FOUND, "File not found.", path=file_path)
    return _json(info)


@router.delete("/{file_path:path}", summary="Delete Media File")
async def delete_file(
    file_path: str,
    media_store: MediaStoreService = Depends(get_media_store),
):
    if not file_path.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "File path is required.")

    try:
        deleted = await media_store.delete_file(file_path)
    except Exception as e:
        logger.error(f"Failed to delete {file_path}: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete file.", details=str(e))

    if not deleted:
        return _error(status.HTTP_404_NOT_FOUND, "File not found.", path=file_path)
    return _json(DeleteFileResponse(path=file_path))
