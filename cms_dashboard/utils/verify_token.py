from typing import Optional

from fastapi import Header, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from starlette.status import HTTP_400_BAD_REQUEST

from cms_dashboard.core.exceptions import AppError
from cms_dashboard.middlewares.sentry import tag_dashboard_session
from cms_dashboard.utils.logging import session_context

security = HTTPBearer()

async def verify_token(authorization_credentials: HTTPAuthorizationCredentials = Security(security)) -> str:
    """Return the caller's CMS access token so it can be forwarded to Orchard"""
    return authorization_credentials.credentials


async def get_session_id(x_session_id: Optional[str] = Header(None, alias="X-Session-Id")) -> str:
    """Key of the per-session dashboard state; also tags logs and error reports"""
    if not x_session_id:
        raise AppError("X-Session-Id header is required", status_code=HTTP_400_BAD_REQUEST, field="X-Session-Id")
    session_context.set(x_session_id)
    tag_dashboard_session(x_session_id)
    return x_session_id


async def get_client_id(x_client_id: Optional[str] = Header(None, alias="X-Client-Id")) -> str:
    """Key of the durable preferences; falls back to 'default' for anonymous clients"""
    return x_client_id or "default"
