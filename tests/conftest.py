"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import httpx
import pytest

from food_catalog.adapters.off_client import OpenFoodFactsClient
from food_catalog.config import Settings
from food_catalog.containers import AppContainer
from food_catalog.services.browser import ProductBrowser
from food_catalog.services.cache import InMemoryCache
from food_catalog.services.catalog import CatalogService


def make_product(code: str, name: str | None, grade: str | None = None) -> dict:
    payload: dict[str, object] = {"code": code}
    if name is not None:
        payload["product_name"] = name
    if grade is not None:
        payload["nutrition_grades"] = grade
    return payload


def _http_error(url: str) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", url)
    response = httpx.Response(503, request=request)
    return httpx.HTTPStatusError("unavailable", request=request, response=response)


@dataclass
class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    now: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client with in-memory responses."""

    category_pages: dict[tuple[str, int], list[dict]] = field(default_factory=dict)
    search_pages: dict[tuple[str, int], list[dict]] = field(default_factory=dict)
    products: dict[str, dict] = field(default_factory=dict)
    category_tags: list[dict] = field(
        default_factory=lambda: [
            {"name": "Snacks", "products": 120},
            {"name": "Beverages", "products": 80},
            {"name": "Empty", "products": 0},
        ]
    )
    fail: bool = False
    category_calls: list[tuple[str, int]] = field(default_factory=list)
    search_calls: list[tuple[str, int, int]] = field(default_factory=list)
    product_calls: list[str] = field(default_factory=list)

    async def get_category_page(self, category: str, page: int) -> dict[str, object]:
        self.category_calls.append((category, page))
        if self.fail:
            raise _http_error("/category")
        return {"products": self.category_pages.get((category, page), [])}

    async def search_products(
        self, text: str, page: int, page_size: int
    ) -> dict[str, object]:
        self.search_calls.append((text, page, page_size))
        if self.fail:
            raise _http_error("/cgi/search.pl")
        return {"products": self.search_pages.get((text, page), [])}

    async def get_product(self, identifier: str) -> dict[str, object]:
        self.product_calls.append(identifier)
        if self.fail:
            raise _http_error("/api/v0/product")
        product = self.products.get(identifier)
        if product is None:
            return {"code": identifier, "status": 0}
        return {"code": identifier, "status": 1, "product": product}

    async def get_categories(self) -> dict[str, object]:
        if self.fail:
            raise _http_error("/categories.json")
        return {"tags": self.category_tags}


@pytest.fixture
def settings() -> Settings:
    return Settings(off_base_url="https://off.test", default_category="snacks")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def off_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def catalog_service(
    off_client: FakeOpenFoodFactsClient, clock: FakeClock
) -> CatalogService:
    return CatalogService(client=off_client, cache=InMemoryCache(clock=clock))


@pytest.fixture
def browser(catalog_service: CatalogService) -> ProductBrowser:
    return ProductBrowser(catalog=catalog_service, default_category="snacks")


@pytest.fixture
def container(
    settings: Settings,
    off_client: FakeOpenFoodFactsClient,
    catalog_service: CatalogService,
    browser: ProductBrowser,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        off_client=off_client,
        catalog_service=catalog_service,
        product_browser=browser,
        close_resources=close_resources,
    )
