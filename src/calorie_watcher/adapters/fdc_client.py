"""USDA FoodData Central API client."""

from dataclasses import dataclass, field
from typing import Protocol

import httpx

DEFAULT_DATA_TYPES = ("Foundation",)


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        """Search foods by query and return raw API data."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0
    data_types: tuple[str, ...] = field(default=DEFAULT_DATA_TYPES)

    @classmethod
    def create(
        cls, api_key: str | None, base_url: str, timeout_seconds: float = 10.0
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    def _params(self) -> dict[str, str]:
        # Public access works without a key, at a lower rate limit.
        return {"api_key": self.api_key} if self.api_key else {}

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        """Search foods by query, most relevant first."""
        url = f"{self.base_url}/foods/search"
        response = await self.http_client.post(
            url,
            params=self._params(),
            json={
                "query": query,
                "pageSize": page_size,
                "dataType": list(self.data_types),
                "sortBy": "dataType.keyword",
                "sortOrder": "asc",
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id."""
        url = f"{self.base_url}/food/{fdc_id}"
        response = await self.http_client.get(
            url,
            params=self._params(),
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
