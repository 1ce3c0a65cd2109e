"""Open Food Facts HTTP client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts read operations."""

    async def get_category_page(self, category: str, page: int) -> dict[str, object]:
        """Return the raw listing of one category page."""

    async def search_products(
        self, text: str, page: int, page_size: int
    ) -> dict[str, object]:
        """Return the raw free-text search response."""

    async def get_product(self, identifier: str) -> dict[str, object]:
        """Return the raw product lookup response."""

    async def get_categories(self) -> dict[str, object]:
        """Return the raw category facet list."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout: float = 15
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        http_client = httpx.AsyncClient(headers={"User-Agent": user_agent})
        return cls(
            base_url=base_url.rstrip("/"), http_client=http_client, timeout=timeout
        )

    async def get_category_page(self, category: str, page: int) -> dict[str, object]:
        """Fetch one page of a category listing."""
        url = f"{self.base_url}/category/{quote(category, safe='')}/{page}.json"
        return await self._get_json(url)

    async def search_products(
        self, text: str, page: int, page_size: int
    ) -> dict[str, object]:
        """Run a free-text product search."""
        return await self._get_json(
            f"{self.base_url}/cgi/search.pl",
            params={
                "search_terms": text,
                "page": page,
                "page_size": page_size,
                "json": "true",
            },
        )

    async def get_product(self, identifier: str) -> dict[str, object]:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/api/v0/product/{quote(identifier, safe='')}.json"
        return await self._get_json(url)

    async def get_categories(self) -> dict[str, object]:
        """Fetch the category facet list."""
        return await self._get_json(f"{self.base_url}/categories.json")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get_json(
        self, url: str, params: dict[str, object] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected payload type from {url}")
        return payload
