"""Catalog queries against Open Food Facts with search caching."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx

from food_catalog.adapters.off_client import OpenFoodFactsClient
from food_catalog.domain.products import Product
from food_catalog.domain.query import FetchResult
from food_catalog.services.cache import Cache

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CatalogService:
    """Query client for the product catalog.

    Every operation fails soft: transport errors and undecodable payloads are
    logged and turned into an empty list or ``None``. The ``*_result`` variants
    expose the same data wrapped in a ``FetchResult`` so callers can tell a
    failed call from an empty one.
    """

    client: OpenFoodFactsClient
    cache: Cache
    search_ttl_seconds: int = 300
    search_page_size: int = 100
    fuzzy_page_size: int = 20

    async def fetch_by_category(self, category: str, page: int = 1) -> list[Product]:
        """Return one page of products in a category."""
        return (await self.fetch_by_category_result(category, page)).value

    async def search_by_text(self, text: str, page: int = 1) -> list[Product]:
        """Return one raw page of free-text search results."""
        return (await self.search_by_text_result(text, page)).value

    async def fuzzy_search_by_text(self, text: str, page: int = 1) -> list[Product]:
        """Return products whose name contains ``text``, paginated locally."""
        return (await self.fuzzy_search_by_text_result(text, page)).value

    async def fetch_by_identifier(self, identifier: str) -> Product | None:
        """Return the product with this barcode, if any."""
        return (await self.fetch_by_identifier_result(identifier)).value

    async def list_category_names(self) -> list[str]:
        """Return names of categories that contain at least one product."""
        return (await self.list_category_names_result()).value

    async def fetch_by_category_result(
        self, category: str, page: int = 1
    ) -> FetchResult[list[Product]]:
        return await self._call(
            lambda: self.client.get_category_page(category, page),
            _products_from_payload,
            default=[],
            action=f"category:{category}:{page}",
        )

    async def search_by_text_result(
        self, text: str, page: int = 1
    ) -> FetchResult[list[Product]]:
        cache_key = f"off:search:{text}:{page}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            _logger.debug("Search cache hit: %s", cache_key)
            return FetchResult.success(list(cached))

        result = await self._call(
            lambda: self.client.search_products(text, page, self.search_page_size),
            _products_from_payload,
            default=[],
            action=f"search:{text}:{page}",
        )
        if result.ok:
            self.cache.set(
                cache_key, list(result.value), ttl_seconds=self.search_ttl_seconds
            )
        return result

    async def fuzzy_search_by_text_result(
        self, text: str, page: int = 1
    ) -> FetchResult[list[Product]]:
        # Deeper pages re-filter the first raw page rather than fetching more.
        raw = await self.search_by_text_result(text, 1)
        if not text:
            return raw

        needle = text.lower()
        matches = [
            product
            for product in raw.value
            if product.name and needle in product.name.lower()
        ]
        start = (page - 1) * self.fuzzy_page_size
        end = start + self.fuzzy_page_size
        return FetchResult(value=matches[start:end], ok=raw.ok, reason=raw.reason)

    async def fetch_by_identifier_result(
        self, identifier: str
    ) -> FetchResult[Product | None]:
        return await self._call(
            lambda: self.client.get_product(identifier),
            _product_from_lookup,
            default=None,
            action=f"product:{identifier}",
        )

    async def list_category_names_result(self) -> FetchResult[list[str]]:
        return await self._call(
            self.client.get_categories,
            _category_names_from_payload,
            default=[],
            action="categories",
        )

    async def _call(
        self,
        func: Callable[[], Awaitable[dict[str, object]]],
        parse: Callable[[dict[str, object]], T],
        *,
        default: T,
        action: str,
    ) -> FetchResult[T]:
        """Run one data-source call, converting failures into a default."""
        try:
            payload = await func()
            return FetchResult.success(parse(payload))
        except (httpx.HTTPError, ValueError) as exc:
            status_code = _status_code_from_exception(exc)
            _logger.warning(
                "Catalog %s failed (status=%s): %s", action, status_code, exc
            )
            return FetchResult.failed(default, reason=f"{action}: {exc}")


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _products_from_payload(payload: dict[str, object]) -> list[Product]:
    raw_products = payload.get("products") or []
    if not isinstance(raw_products, list):
        raise ValueError("'products' is not a list")
    return [Product.from_api(item) for item in raw_products if isinstance(item, dict)]


def _product_from_lookup(payload: dict[str, object]) -> Product | None:
    product = payload.get("product")
    if payload.get("status") == 0 or not isinstance(product, dict):
        return None
    if not product.get("code"):
        product = {**product, "code": payload.get("code")}
    return Product.from_api(product)


def _category_names_from_payload(payload: dict[str, object]) -> list[str]:
    tags = payload.get("tags") or []
    if not isinstance(tags, list):
        raise ValueError("'tags' is not a list")
    return [
        str(tag["name"])
        for tag in tags
        if isinstance(tag, dict)
        and tag.get("name")
        and isinstance(tag.get("products"), int)
        and tag["products"] > 0
    ]
