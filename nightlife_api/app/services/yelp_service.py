"""
Proxy for the Yelp Fusion business API.

Responses are relayed verbatim; the only thing this client adds is the
``Authorization: Bearer`` header carrying the server-side API key so
the key never reaches the browser.  There is no retry: a failed call
surfaces as :class:`UpstreamError`.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from nightlife_api.app.core.errors import LocationNotFoundError, UpstreamError
from nightlife_api.app.schemas.yelp import SEARCH_PAGE_SIZE, SearchFilters


logger = logging.getLogger(__name__)


class YelpClient:
    """Thin async wrapper around the ``/businesses`` endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.yelp.com/v3",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "accept": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            timeout=self.timeout,
            transport=self.transport,
        )

    @staticmethod
    def search_params(location: str, filters: SearchFilters) -> List[Tuple[str, Any]]:
        """Build the query string for a business search.

        ``price`` is repeated once per level, ``open_now`` and
        ``sort_by`` are only sent when the client chose a value.
        """
        params: List[Tuple[str, Any]] = [("location", location)]
        params.extend(("price", str(level)) for level in filters.price_levels)
        if filters.open_now is not None:
            params.append(("open_now", "true" if filters.open_now else "false"))
        if filters.sort_by:
            params.append(("sort_by", filters.sort_by))
        params.append(("limit", str(SEARCH_PAGE_SIZE)))
        params.append(("offset", str(filters.offset)))
        return params

    async def _get(self, path: str, params: Optional[List[Tuple[str, Any]]] = None) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.error("Error calling Yelp %s: %s", path, exc)
            raise UpstreamError(f"Upstream request failed: {exc}") from exc

    async def search_businesses(self, location: str, filters: SearchFilters) -> Dict[str, Any]:
        """Search businesses near ``location``.

        Raises ``LocationNotFoundError`` when Yelp answers 400 (it does so
        for locations it cannot geocode) and ``UpstreamError`` for any
        other non-2xx status.
        """
        response = await self._get("/businesses/search", self.search_params(location, filters))
        if response.status_code == 400:
            raise LocationNotFoundError(f"Location {location!r} not found", status_code=400)
        if response.is_error:
            logger.error("Yelp search for %r failed with status %s", location, response.status_code)
            raise UpstreamError(
                f"HTTP error! Status: {response.status_code}", status_code=response.status_code
            )
        return response.json()

    async def get_business(self, venue_yelp_id: str) -> Dict[str, Any]:
        """Return the Yelp business record for ``venue_yelp_id``."""
        response = await self._get(f"/businesses/{quote(venue_yelp_id, safe='')}")
        if response.is_error:
            logger.error(
                "Yelp lookup for %s failed with status %s", venue_yelp_id, response.status_code
            )
            raise UpstreamError(
                f"HTTP error! Status: {response.status_code}", status_code=response.status_code
            )
        return response.json()
