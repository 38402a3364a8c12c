"""HTTP client for the read-only test case content store.

Fetches the canonical markdown document of a version and the per-user
status file. Requests are cache-busted so freshly saved results are seen.
"""

import logging
import time
from typing import Any

import httpx

from .errors import (
    CaseMapError,
    DocumentLoadError,
    StatusLoadError,
    map_connection_error,
    map_http_error,
)

logger = logging.getLogger(__name__)


class ContentClient:
    """Async client for the content store.

    Layout:
        GET {base_url}/cases/{version}/_index.md
        GET {base_url}/results/{version}/{user}.json
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            base_url: Content store URL, may include a path prefix
                (e.g., https://example.github.io/test-plans)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ContentClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure client is initialized."""
        if not self._client:
            raise CaseMapError(code=-1, message="Client not initialized. Use 'async with' context.")
        return self._client

    def document_url(self, version: str) -> str:
        return f"{self.base_url}/cases/{version}/_index.md"

    def status_url(self, version: str, user: str) -> str:
        return f"{self.base_url}/results/{version}/{user}.json"

    async def _get(self, url: str, error_cls: type[CaseMapError]) -> httpx.Response:
        """GET a cache-busted URL, mapping failures to error_cls."""
        client = self._ensure_client()
        params = {"cache_bust": str(int(time.time() * 1000))}
        logger.info(f"Fetching {url}")
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise map_http_error(e.response.status_code, url, error_cls)
        except httpx.TimeoutException as e:
            raise map_connection_error(str(e), url, error_cls, is_timeout=True)
        except httpx.HTTPError as e:
            raise map_connection_error(str(e), url, error_cls)

    async def fetch_document(self, version: str) -> str:
        """Fetch the canonical markdown document of a version.

        Raises:
            DocumentLoadError: On HTTP/connection failure or blank content
        """
        response = await self._get(self.document_url(version), DocumentLoadError)
        text = response.text
        if not text.strip():
            raise DocumentLoadError(
                message=f"Markdown file for version {version} is empty.",
                data={"version": version},
            )
        return text

    async def fetch_statuses(self, version: str, user: str) -> dict[str, Any]:
        """Fetch the raw status file of a (version, user) pair.

        Raises:
            StatusLoadError: On HTTP/connection failure, invalid JSON or a
                payload that is not a JSON object
        """
        url = self.status_url(version, user)
        response = await self._get(url, StatusLoadError)
        if not response.content.strip():
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise StatusLoadError(message=f"Invalid JSON in {url}: {e}", data={"url": url})
        if not isinstance(data, dict):
            raise StatusLoadError(message=f"Expected a JSON object in {url}", data={"url": url})
        return data
