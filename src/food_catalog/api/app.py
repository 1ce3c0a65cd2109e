"""FastAPI application factory.

The service holds a single product browser, so it serves one user at a time:
every caller shares the same query intent and result set.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from food_catalog.api.models import (
    BarcodeRequest,
    BrowserOut,
    CategoryRequest,
    ProductOut,
    SearchRequest,
    SortRequest,
)
from food_catalog.app_logging import configure_logging
from food_catalog.containers import AppContainer
from food_catalog.services.browser import ProductBrowser


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        browser: ProductBrowser = app.state.container.product_browser
        try:
            await browser.load_categories()
            await browser.refresh()
        except Exception:
            logger.exception("Failed to load the initial catalog view")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    def _browser(request: Request) -> ProductBrowser:
        state_container: AppContainer = request.app.state.container
        return state_container.product_browser

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/browser")
    async def browser_view(request: Request) -> BrowserOut:
        """Return the current browser view-model."""
        return BrowserOut.from_view(_browser(request).view())

    @app.post("/browser/search")
    async def browser_search(payload: SearchRequest, request: Request) -> BrowserOut:
        """Search product names."""
        browser = _browser(request)
        await browser.set_search_text(payload.text)
        return BrowserOut.from_view(browser.view())

    @app.post("/browser/barcode")
    async def browser_barcode(payload: BarcodeRequest, request: Request) -> BrowserOut:
        """Look up a single product by barcode."""
        browser = _browser(request)
        await browser.set_barcode_text(payload.code)
        return BrowserOut.from_view(browser.view())

    @app.post("/browser/category")
    async def browser_category(
        payload: CategoryRequest, request: Request
    ) -> BrowserOut:
        """Select a category."""
        browser = _browser(request)
        await browser.set_category(payload.name)
        return BrowserOut.from_view(browser.view())

    @app.post("/browser/sort")
    async def browser_sort(payload: SortRequest, request: Request) -> BrowserOut:
        """Change the sort order."""
        browser = _browser(request)
        await browser.set_sort_order(payload.order)
        return BrowserOut.from_view(browser.view())

    @app.post("/browser/load-more")
    async def browser_load_more(request: Request) -> BrowserOut:
        """Append the next page of results, when allowed."""
        browser = _browser(request)
        await browser.load_more()
        return BrowserOut.from_view(browser.view())

    @app.get("/categories")
    async def categories(request: Request) -> dict[str, list[str]]:
        """Return the available category names."""
        browser = _browser(request)
        if not browser.categories:
            await browser.load_categories()
        return {"categories": browser.categories}

    @app.get("/products/{identifier}")
    async def product_detail(identifier: str, request: Request) -> ProductOut:
        """Return a single product's details."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.catalog_service.fetch_by_identifier_result(
            identifier
        )
        if not result.ok:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Error fetching product details.",
            )
        if result.value is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Product not found."
            )
        return ProductOut.from_product(result.value)

    return app
