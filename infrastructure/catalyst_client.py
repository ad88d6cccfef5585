# ============================================================================
# CATALYST HTTP CLIENT
# ============================================================================
# STATUS: Infrastructure - Async HTTP client for the Catalyst content server
# PURPOSE: Post signed entities and proxy content queries
# CREATED: 19 OCT 2026
# ============================================================================
"""
Catalyst HTTP Client

Async httpx client for the downstream Catalyst:

- POST /content/entities             multipart entity deployment
- GET  /content/available-content    proxied verbatim for clients

Non-2xx deployment responses raise CatalystRequestError whose message
follows the Catalyst client convention:

    Failed to fetch <url>. Got status <code>. Response was '<body>'

so CatalystHttpError.from_unknown() can translate it. Transport errors
(timeouts, connection failures) propagate as httpx exceptions.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import httpx

from __version__ import USER_AGENT

logger = logging.getLogger(__name__)

ENTITIES_PATH = "/content/entities"
AVAILABLE_CONTENT_PATH = "/content/available-content"

# Headers forwarded from proxied Catalyst responses
_PROXIED_HEADER_PREFIXES = ("content-type", "access-control-")


class CatalystRequestError(Exception):
    """Catalyst answered with a non-success status."""

    def __init__(self, url: str, status: int, body: str):
        super().__init__(f"Failed to fetch {url}. Got status {status}. Response was '{body}'")
        self.url = url
        self.status = status
        self.body = body


@dataclass
class ProxiedResponse:
    """Status, filtered headers and raw text of a proxied Catalyst response."""
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)


class CatalystClient:
    """Async HTTP client for a Catalyst content server."""

    def __init__(
        self,
        base_url: str,
        upload_timeout: float = 600.0,
        proxy_timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._upload_timeout = httpx.Timeout(upload_timeout, connect=30.0)
        self._proxy_timeout = httpx.Timeout(proxy_timeout)
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def entities_url(self) -> str:
        return f"{self._base_url}{ENTITIES_PATH}"

    def _client(self, timeout: httpx.Timeout) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout,
            transport=self._transport,
            headers={"User-Agent": USER_AGENT},
        )

    # ------------------------------------------------------------------
    # DEPLOY
    # ------------------------------------------------------------------

    async def post_entity(
        self,
        fields: Iterable[Tuple[str, str]],
        files: Mapping[str, bytes],
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Deploy an entity.

        Args:
            fields: Plain form fields (entityId, authChain[...])
            files: Files by form field name; each is sent under its own name
            headers: Extra request headers

        Returns:
            Parsed JSON body, or raw text if the body is not JSON.

        Raises:
            CatalystRequestError: On a non-2xx response.
            httpx.HTTPError: On transport failure or timeout.
        """
        url = self.entities_url
        multipart_files = [
            (name, (name, content, "application/octet-stream"))
            for name, content in files.items()
        ]

        async with self._client(self._upload_timeout) as client:
            resp = await client.post(
                url,
                data=dict(fields),
                files=multipart_files,
                headers=headers,
            )

        if not resp.is_success:
            raise CatalystRequestError(url, resp.status_code, resp.text)

        try:
            return resp.json()
        except ValueError:
            return resp.text

    # ------------------------------------------------------------------
    # PROXY
    # ------------------------------------------------------------------

    async def fetch_available_content(self, query: str = "") -> ProxiedResponse:
        """
        GET /content/available-content with the caller's query string.

        The response status is relayed as-is, errors included.
        """
        url = f"{self._base_url}{AVAILABLE_CONTENT_PATH}"
        if query:
            url = f"{url}?{query}"

        async with self._client(self._proxy_timeout) as client:
            resp = await client.get(url)

        headers = {
            key: value
            for key, value in resp.headers.items()
            if key.lower().startswith(_PROXIED_HEADER_PREFIXES)
        }
        return ProxiedResponse(status_code=resp.status_code, body=resp.text, headers=headers)


__all__ = [
    "ENTITIES_PATH",
    "AVAILABLE_CONTENT_PATH",
    "CatalystRequestError",
    "ProxiedResponse",
    "CatalystClient",
]
