"""Tests for the OAuth2 password grant client and its error mapping."""

from urllib.parse import parse_qs

import httpx
import pytest

from cms_dashboard.schemas import AuthErrorCode, LoginRequest
from cms_dashboard.services.auth_service import AuthService

CREDENTIALS = LoginRequest(username="admin", password="secret")


def _service(handler) -> tuple[AuthService, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AuthService(http_client=client), client


async def test_successful_login_returns_token():
    seen = {}

    def handler(request):
        seen["form"] = parse_qs(request.content.decode())
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, json={"access_token": "abc", "token_type": "Bearer", "expires_in": 3600})

    service, client = _service(handler)
    async with client:
        result = await service.login(CREDENTIALS)

    assert result.success is True
    assert result.token == "abc"
    assert result.expires_in == 3600
    assert seen["content_type"] == "application/x-www-form-urlencoded"
    assert seen["form"]["grant_type"] == ["password"]
    assert seen["form"]["username"] == ["admin"]
    assert seen["form"]["scope"] == ["openid profile roles"]


async def test_invalid_grant_maps_to_invalid_credentials():
    service, client = _service(lambda r: httpx.Response(400, json={"error": "invalid_grant"}))
    async with client:
        result = await service.login(CREDENTIALS)

    assert result.success is False
    assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS
    assert result.error.message == "Invalid username or password."


async def test_other_oauth_error_maps_to_network_error_with_description():
    service, client = _service(
        lambda r: httpx.Response(400, json={"error": "invalid_client", "error_description": "Unknown client."})
    )
    async with client:
        result = await service.login(CREDENTIALS)

    assert result.error.code == AuthErrorCode.NETWORK_ERROR
    assert result.error.message == "Unknown client."


@pytest.mark.parametrize("response", [
    httpx.Response(502, text="Bad gateway"),
    httpx.Response(500, json={}),
])
async def test_unreadable_or_bare_error_maps_to_network_error(response):
    service, client = _service(lambda r: response)
    async with client:
        result = await service.login(CREDENTIALS)

    assert result.error.code == AuthErrorCode.NETWORK_ERROR
    assert result.error.message == "Unable to connect to server. Please try again."


async def test_transport_failure_maps_to_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    service, client = _service(handler)
    async with client:
        result = await service.login(CREDENTIALS)

    assert result.error.code == AuthErrorCode.NETWORK_ERROR


async def test_success_without_token_is_invalid_credentials():
    service, client = _service(lambda r: httpx.Response(200, json={"error_description": "Account disabled."}))
    async with client:
        result = await service.login(CREDENTIALS)

    assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS
    assert result.error.message == "Account disabled."
