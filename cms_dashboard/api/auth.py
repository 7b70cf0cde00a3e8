from fastapi import APIRouter, Depends
from starlette import status
from starlette.responses import JSONResponse

from cms_dashboard.dependencies import get_auth_service
from cms_dashboard.schemas.auth import AuthErrorCode, AuthResponse, LoginRequest
from cms_dashboard.services.auth_service import AuthService
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Auth"])

ERROR_STATUS = {
    AuthErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.ACCOUNT_LOCKED: status.HTTP_403_FORBIDDEN,
    AuthErrorCode.NETWORK_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log In",
    description="Exchange a username and password for a CMS access token (OAuth2 password grant)",
)
async def login(credentials: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    result = await auth_service.login(credentials)

    status_code = status.HTTP_200_OK
    if not result.success:
        status_code = ERROR_STATUS.get(result.error.code, status.HTTP_400_BAD_REQUEST)

    return JSONResponse(content=result.model_dump(mode="json", exclude_none=True), status_code=status_code)
