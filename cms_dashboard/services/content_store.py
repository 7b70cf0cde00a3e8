from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from cms_dashboard.configs.settings import settings
from cms_dashboard.core.exceptions import store_failure
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)


FOLDER_QUERY = """
query QueryFolders($first: Int) {
  folder(first: $first) {
    contentItemId
    displayText
    owner
    author
    createdUtc
    modifiedUtc
    published
    containedPart {
      listContentItemId
      order
    }
    taxonomyPart {
      repository
    }
  }
}
"""


class ContentStoreClient:
    """HTTP client for the Orchard content REST and GraphQL endpoints.

    Every transport or status failure is raised as an ``AppError`` with code
    ``store_failure``; an absent record is returned as ``None``.
    """

    def __init__(self, access_token: Optional[str] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.access_token = access_token
        self._http_client = http_client
        self.content_url = settings.content_url.rstrip("/")
        self.graphql_url = settings.graphql_url

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=settings.ORCHARD_TIMEOUT) as client:
            yield client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._session() as client:
                return await client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise store_failure(f"Content store request failed: {e}", url=url)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise store_failure("Content store returned an invalid JSON body", url=str(response.url))

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        logger.error(f"{response.request.method} {response.url} returned {response.status_code}: {response.text[:500]}")
        raise store_failure(
            f"Content store returned HTTP {response.status_code}",
            url=str(response.url),
            status=response.status_code,
        )

    async def get_item(self, content_item_id: str) -> Optional[dict]:
        """GET <content-base>/{id}; a missing record yields None"""
        response = await self._request("GET", f"{self.content_url}/{content_item_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        self._raise_for_status(response)
        return self._json(response) or None

    async def save_item(self, payload: dict) -> dict:
        """POST <content-base>; a ContentItemId in the payload makes it an update"""
        response = await self._request("POST", self.content_url, json=payload)
        self._raise_for_status(response)
        return self._json(response) or payload

    async def delete_item(self, content_item_id: str) -> None:
        response = await self._request("DELETE", f"{self.content_url}/{content_item_id}")
        self._raise_for_status(response)

    async def query(self, query: str, variables: Optional[dict] = None) -> dict:
        """Run a GraphQL query and return its ``data`` object"""
        body: Dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables

        response = await self._request("POST", self.graphql_url, json=body)
        self._raise_for_status(response)
        payload = self._json(response) or {}

        if payload.get("errors") and not payload.get("data"):
            messages = "; ".join(str(e.get("message", e)) for e in payload["errors"])
            raise store_failure(f"GraphQL query failed: {messages}")

        return payload.get("data") or {}

    async def query_folders(self, first: Optional[int] = None) -> list:
        data = await self.query(FOLDER_QUERY, {"first": first or settings.ORCHARD_FOLDER_QUERY_LIMIT})
        return data.get("folder") or []
