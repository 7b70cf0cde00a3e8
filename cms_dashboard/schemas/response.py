from typing import Generic, List, Literal, Optional, TypeVar
from datetime import datetime, timezone

from pydantic import BaseModel, Field, ConfigDict


T = TypeVar("T")

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper for all dashboard endpoints"""
    success: bool = Field(True, description="Indicates if the request was successful")
    message: Optional[str] = Field(None, description="Human-readable message about the operation")
    data: Optional[T] = Field(None, description="Response data payload")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Folders listed successfully",
                "data": {"folders": [], "total_count": 0},
            }
        }
    )

class ErrorDetail(BaseModel):
    """Detailed error information for validation and business logic errors"""
    code: str = Field(..., description="Error code identifier")
    message: str = Field(..., description="Human-readable error message")
    field: Optional[str] = Field(None, description="Field name that caused the error (for validation errors)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "validation_error",
                "message": "Folder name is required",
                "field": "folder_name"
            }
        }
    )

class ApiError(BaseModel):
    """Error response wrapper for failed operations"""
    success: bool = Field(False, description="Always false for error responses")
    message: str = Field(..., description="Main error message")
    code: Optional[str] = Field(None, description="Machine-readable error code")
    errors: Optional[List[ErrorDetail]] = Field(None, description="Detailed error information")
    details: Optional[dict] = Field(None, description="Additional context such as failed ids")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "message": "Bulk delete failed",
                "code": "bulk_action_failed",
                "details": {"failed": [{"content_item_id": "4q3r1k7ve6y1fx0pwkg8s1hc0a", "reason": "Content store returned HTTP 500"}]},
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
    )

class HealthCheck(BaseModel):
    """Health of the API and of the stores behind it"""
    status: Literal["ok", "degraded"] = Field(..., description="degraded when a store is unreachable")
    session_store: Literal["up", "down"] = Field(..., description="Redis holding dashboard state")
    media_store: Literal["up", "down"] = Field(..., description="MinIO bucket holding media files")
    timestamp: datetime = Field(default_factory=_utcnow, description="Health check timestamp")
    version: Optional[str] = Field(None, description="API version")
