from typing import Optional

import httpx
from pydantic import ValidationError

from cms_dashboard.configs.settings import settings
from cms_dashboard.schemas.auth import AuthError, AuthErrorCode, AuthResponse, LoginRequest, OAuth2TokenResponse
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)

CONNECTION_ERROR_MESSAGE = "Unable to connect to server. Please try again."
INVALID_GRANT_MESSAGE = "Invalid username or password."
LOGIN_FAILED_MESSAGE = "Login failed. Please check your credentials."


def _failure(code: AuthErrorCode, message: str) -> AuthResponse:
    return AuthResponse(success=False, error=AuthError(code=code, message=message))


class AuthService:
    """OAuth2 password grant against the Orchard token endpoint"""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self._http_client = http_client
        self.token_url = settings.token_url

    async def login(self, credentials: LoginRequest) -> AuthResponse:
        form = {
            "grant_type": "password",
            "username": credentials.username,
            "password": credentials.password,
            "client_id": settings.ORCHARD_CLIENT_ID,
            "scope": settings.ORCHARD_SCOPE,
        }

        try:
            response = await self._post(form)
        except httpx.HTTPError as e:
            logger.error(f"Token request to {self.token_url} failed: {e}")
            return _failure(AuthErrorCode.NETWORK_ERROR, CONNECTION_ERROR_MESSAGE)

        try:
            token = OAuth2TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            logger.error(f"Token endpoint returned an unreadable body (HTTP {response.status_code})")
            return _failure(AuthErrorCode.NETWORK_ERROR, CONNECTION_ERROR_MESSAGE)

        if not response.is_success:
            return self._map_error(token, response.status_code)

        if not token.access_token:
            return _failure(AuthErrorCode.INVALID_CREDENTIALS, token.error_description or LOGIN_FAILED_MESSAGE)

        logger.info(f"User {credentials.username} logged in")
        return AuthResponse(
            success=True,
            token=token.access_token,
            token_type=token.token_type,
            expires_in=token.expires_in,
        )

    @staticmethod
    def _map_error(token: OAuth2TokenResponse, status_code: int) -> AuthResponse:
        logger.warning(f"Token endpoint rejected login (HTTP {status_code}): {token.error}")
        if token.error == "invalid_grant":
            return _failure(AuthErrorCode.INVALID_CREDENTIALS, INVALID_GRANT_MESSAGE)
        if token.error:
            return _failure(AuthErrorCode.NETWORK_ERROR, token.error_description or CONNECTION_ERROR_MESSAGE)
        return _failure(AuthErrorCode.NETWORK_ERROR, CONNECTION_ERROR_MESSAGE)

    async def _post(self, form: dict) -> httpx.Response:
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        if self._http_client is not None:
            return await self._http_client.post(self.token_url, data=form, headers=headers)
        async with httpx.AsyncClient(timeout=settings.ORCHARD_TIMEOUT) as client:
            return await client.post(self.token_url, data=form, headers=headers)
