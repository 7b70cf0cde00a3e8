from typing import Any, Dict, Optional

from starlette.responses import JSONResponse
from starlette import status

from cms_dashboard.schemas.response import ApiResponse


def _envelope(data: Any, message: Optional[str], status_code: int, headers: Optional[Dict[str, str]]) -> JSONResponse:
    body = ApiResponse[Any](success=True, message=message, data=data).model_dump(mode="json", exclude_none=True)
    return JSONResponse(content=body, status_code=status_code, headers=headers)


def ok(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
    headers: Optional[Dict[str, str]] = None,
):
    return _envelope(data, message, status_code, headers)


def created(data: Any = None, message: str = "Created", location: Optional[str] = None):
    """201 envelope; ``location`` points at the new folder or media file"""
    headers = {"Location": location} if location else None
    return _envelope(data, message, status.HTTP_201_CREATED, headers)
