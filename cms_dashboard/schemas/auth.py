from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AuthErrorCode(str, Enum):
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class OAuth2TokenResponse(BaseModel):
    """Token endpoint payload (success or OAuth2 error)"""
    access_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    id_token: Optional[str] = None
    error: Optional[str] = None
    error_description: Optional[str] = None


class AuthError(BaseModel):
    code: AuthErrorCode
    message: str


class AuthResponse(BaseModel):
    success: bool
    token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    error: Optional[AuthError] = None
