"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from food_catalog.adapters.off_client import (
    HttpxOpenFoodFactsClient,
    OpenFoodFactsClient,
)
from food_catalog.config import Settings
from food_catalog.services.browser import ProductBrowser
from food_catalog.services.cache import InMemoryCache
from food_catalog.services.catalog import CatalogService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    off_client: OpenFoodFactsClient
    catalog_service: CatalogService
    product_browser: ProductBrowser
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.user_agent,
        timeout=resolved_settings.http_timeout_seconds,
    )
    catalog_service = CatalogService(
        client=off_client,
        cache=InMemoryCache(),
        search_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
        search_page_size=resolved_settings.search_page_size,
        fuzzy_page_size=resolved_settings.fuzzy_page_size,
    )
    product_browser = ProductBrowser(
        catalog=catalog_service,
        default_category=resolved_settings.default_category,
    )

    async def close_resources() -> None:
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        off_client=off_client,
        catalog_service=catalog_service,
        product_browser=product_browser,
        close_resources=close_resources,
    )
