"""Structured nutrition lookups against USDA FDC."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from calorie_watcher.adapters.fdc_client import FdcClient
from calorie_watcher.services.cache import Cache

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class NutritionService:
    """Finds the top-ranked FDC record for a food name, with caching."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    page_size: int = 5
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def find_food(self, name: str) -> dict[str, object] | None:
        """Return the most relevant record with nutrients, or None."""
        query = name.strip()
        if not query:
            return None
        cache_key = f"fdc:find:{query.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, dict):
            return cached or None

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=self.page_size),
            action="search",
        )
        foods = payload.get("foods") or []
        if not foods:
            _logger.info("No FDC foods found for %r", query)
            self.cache.set(cache_key, {}, ttl_seconds=self.search_ttl_seconds)
            return None

        top = foods[0]
        _logger.info(
            "FDC top result for %r: fdc_id=%s description=%r",
            query,
            top.get("fdcId"),
            top.get("description"),
        )
        record = top
        if not top.get("foodNutrients") and top.get("fdcId") is not None:
            record = await self.get_food(int(top["fdcId"]))
        self.cache.set(cache_key, record, ttl_seconds=self.search_ttl_seconds)
        return record

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Retrieve the full FDC record for an id."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, dict):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        self.cache.set(cache_key, payload, ttl_seconds=self.food_ttl_seconds)
        return payload

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
