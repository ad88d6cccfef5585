# ============================================================================
# AUTHORIZATION GRANTS SOURCE
# ============================================================================
# STATUS: Infrastructure - Remote grants fetch
# PURPOSE: Download the raw authorizations list
# CREATED: 19 OCT 2026
# ============================================================================
"""
Authorization Grants Source

Fetches the published authorizations JSON (a list of grant records).
Record validation happens in the registry; this module only guarantees
the payload is a JSON list.
"""

import logging
from typing import Any, List, Optional

import httpx

from __version__ import USER_AGENT

logger = logging.getLogger(__name__)


class GrantsSourceError(Exception):
    """The grants payload could not be fetched or is not a list."""


class GrantsSource:
    """HTTP source of raw authorization grants."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._url = url
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    async def fetch(self) -> List[Any]:
        """
        Download the raw grants list.

        Raises:
            httpx.HTTPError: Transport failure or non-2xx status.
            GrantsSourceError: Body is not a JSON list.
        """
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            resp = await client.get(self._url)
            resp.raise_for_status()

        try:
            data = resp.json()
        except ValueError as e:
            raise GrantsSourceError(f"Authorizations payload is not JSON: {e}") from e

        if not isinstance(data, list):
            raise GrantsSourceError(
                f"Authorizations payload must be a list, got {type(data).__name__}"
            )

        logger.debug(f"Fetched {len(data)} grant records from {self._url}")
        return data


__all__ = ["GrantsSourceError", "GrantsSource"]
