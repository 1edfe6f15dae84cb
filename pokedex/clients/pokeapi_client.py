import httpx
import logging
from typing import Any
from fastapi import HTTPException

from pokedex.cache import ResponseCache
from pokedex.config import get_settings
from pokedex.media import extract_id_from_url
from pokedex.models import ListItem

logger = logging.getLogger(__name__)


class RemoteError(HTTPException):
    """
    A PokeAPI request failed: non-2xx status, transport failure or unreadable body.

    `upstream_status` is None when no response was received. An upstream 404 maps
    to a 404 for our consumers, everything else to 503 Service Unavailable.
    """

    def __init__(self, url: str, upstream_status: int | None, detail: str):
        status_code = 404 if upstream_status == 404 else 503
        super().__init__(status_code=status_code, detail=f"External API Error: {detail}")
        self.url = url
        self.upstream_status = upstream_status


class PokeAPIClient:
    BULK_LIST_LIMIT = 1302  # whole catalog in one page
    DEFAULT_PAGE_SIZE = 60

    def __init__(
        self,
        base_url: str | None = None,
        cache: ResponseCache | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.pokeapi_base_url).rstrip("/")
        self.cache = cache if cache is not None else ResponseCache(ttl=settings.cache_ttl)
        self.client = httpx.AsyncClient(timeout=timeout or settings.http_timeout)

    async def fetch_with_cache(self, url: str) -> Any:
        """Returns the parsed JSON body of a GET to `url`, from the cache when fresh."""
        cached_data = self.cache.get(url)
        if cached_data is not None:
            logger.info(f"Cache hit for: {url}")
            return cached_data

        logger.info(f"Cache miss for: {url}")
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"PokeAPI error for {url}: status {status}")
            raise RemoteError(url, status, f"PokeAPI failed with status {status}")
        except httpx.RequestError as e:
            logger.error(f"PokeAPI network error for {url}: {str(e)}")
            raise RemoteError(url, None, f"PokeAPI network error: {str(e)}")
        except ValueError:
            logger.error(f"PokeAPI returned a non-JSON body for {url}")
            raise RemoteError(url, response.status_code, "PokeAPI returned an unexpected response format.")

        # Only successful results get cached
        self.cache.set(url, data)
        return data

    # --- Lists (best-effort, never raise) ---

    async def fetch_pokemon_paginated(self, offset: int = 0, limit: int = DEFAULT_PAGE_SIZE) -> list[ListItem]:
        """One page of the catalog. Ids come from each result's resource URL."""
        if offset < 0 or limit <= 0:
            logger.warning(f"Returning empty page for invalid window offset={offset} limit={limit}")
            return []

        url = f"{self.base_url}/pokemon?offset={offset}&limit={limit}"
        try:
            data = await self.fetch_with_cache(url)
        except RemoteError as e:
            logger.warning(f"Returning empty page for offset={offset} limit={limit}: {e.detail}")
            return []

        return [
            ListItem(name=entry["name"], url=entry["url"], id=extract_id_from_url(entry["url"]))
            for entry in data.get("results", [])
        ]

    async def fetch_all_pokemon(self) -> list[ListItem]:
        """
        The whole catalog in one request.

        Ids here are positional (index + 1), not parsed from the URL. Past the
        national dex the URL ids jump to 10001+, so the two list accessors
        disagree on those entries.
        """
        url = f"{self.base_url}/pokemon?limit={self.BULK_LIST_LIMIT}"
        try:
            data = await self.fetch_with_cache(url)
        except RemoteError as e:
            logger.warning(f"Returning empty catalog: {e.detail}")
            return []

        return [
            ListItem(name=entry["name"], url=entry["url"], id=index + 1)
            for index, entry in enumerate(data.get("results", []))
        ]

    # --- Single resources (errors propagate) ---

    def _resource_url(self, kind: str, id_or_name: int | str) -> str:
        # PokeAPI slugs are lowercase; "Pikachu" would 404
        return f"{self.base_url}/{kind}/{str(id_or_name).strip().lower()}"

    async def fetch_pokemon(self, id_or_name: int | str) -> dict:
        return await self.fetch_with_cache(self._resource_url("pokemon", id_or_name))

    async def fetch_pokemon_species(self, id_or_name: int | str) -> dict:
        return await self.fetch_with_cache(self._resource_url("pokemon-species", id_or_name))

    async def fetch_move(self, id_or_name: int | str) -> dict:
        return await self.fetch_with_cache(self._resource_url("move", id_or_name))

    async def fetch_evolution_chain(self, url: str) -> dict:
        """Takes the absolute URL from a species' `evolution_chain.url`."""
        return await self.fetch_with_cache(url)

    def clear_cache(self):
        """Clear the response cache. Useful for testing."""
        self.cache.clear()

    async def close(self):
        """Close the HTTP client (call on app shutdown)."""
        await self.client.aclose()
