"""Product browser state machine driving catalog queries."""

import logging
from dataclasses import dataclass, field

from food_catalog.domain.products import Product
from food_catalog.domain.query import (
    NOT_FOUND,
    SERVICE_UNAVAILABLE,
    BarcodeQuery,
    BrowserView,
    CategoryQuery,
    FetchResult,
    QueryIntent,
    SearchQuery,
    SortOrder,
)
from food_catalog.services.catalog import CatalogService

_logger = logging.getLogger(__name__)


def sort_products(products: list[Product], order: SortOrder) -> list[Product]:
    """Return products ordered by name or nutrition grade.

    Missing values sort as an empty string, i.e. before any letter. The sort is
    stable, so ties keep their fetch order.
    """
    if order == SortOrder.NONE:
        return products
    if order in {SortOrder.NAME_ASC, SortOrder.NAME_DESC}:
        return sorted(
            products,
            key=lambda product: _collation_key(product.name),
            reverse=order == SortOrder.NAME_DESC,
        )
    return sorted(
        products,
        key=lambda product: _collation_key(product.nutrition_grade),
        reverse=order == SortOrder.GRADE_DESC,
    )


def _collation_key(value: str | None) -> tuple[str, str]:
    text = value or ""
    return text.casefold(), text


@dataclass
class ProductBrowser:
    """Owns the query intent and the accumulated result set.

    Every input event resets paging and triggers exactly one catalog call.
    Responses are tagged with the generation that issued them and dropped if
    the intent has moved on in the meantime.
    """

    catalog: CatalogService
    default_category: str = "snacks"
    intent: QueryIntent = field(init=False)
    sort_order: SortOrder = SortOrder.NONE
    page: int = 1
    products: list[Product] = field(default_factory=list)
    has_more: bool = True
    barcode_result: Product | None = None
    is_loading: bool = False
    last_error: str | None = None
    categories: list[str] = field(default_factory=list)
    _selected_category: str = field(init=False)
    _generation: int = 0

    def __post_init__(self) -> None:
        self._selected_category = self.default_category
        self.intent = CategoryQuery(self.default_category)

    @property
    def can_load_more(self) -> bool:
        return (
            not isinstance(self.intent, BarcodeQuery)
            and not self.is_loading
            and self.has_more
        )

    async def refresh(self) -> None:
        """Refetch the current intent from the first page."""
        self._reset()
        await self._fetch()

    async def load_categories(self) -> list[str]:
        """Load the category names offered for selection."""
        result = await self.catalog.list_category_names_result()
        if result.ok:
            self.categories = list(result.value)
        else:
            _logger.warning("Category names unavailable: %s", result.reason)
        return self.categories

    async def set_search_text(self, text: str) -> None:
        """Switch to fuzzy search, or back to the category when cleared."""
        if text:
            await self._change_intent(SearchQuery(text))
        else:
            await self._change_intent(CategoryQuery(self._selected_category))

    async def set_barcode_text(self, code: str) -> None:
        """Switch to barcode lookup, or back to the category when cleared."""
        if code:
            await self._change_intent(BarcodeQuery(code))
        else:
            await self._change_intent(CategoryQuery(self._selected_category))

    async def set_category(self, name: str) -> None:
        """Select a category and list its products."""
        self._selected_category = name or self.default_category
        await self._change_intent(CategoryQuery(self._selected_category))

    async def set_sort_order(self, order: SortOrder | str) -> None:
        """Change the ordering and refetch from the first page."""
        self.sort_order = SortOrder.parse(order)
        await self.refresh()

    async def load_more(self) -> bool:
        """Fetch the next page; returns False when loading more isn't allowed."""
        if not self.can_load_more:
            return False
        self.page += 1
        await self._fetch()
        return True

    def view(self) -> BrowserView:
        """Return an immutable snapshot for rendering."""
        intent = self.intent
        return BrowserView(
            mode=intent.mode,
            category_name=intent.name if isinstance(intent, CategoryQuery) else "",
            search_text=intent.text if isinstance(intent, SearchQuery) else "",
            barcode_text=intent.code if isinstance(intent, BarcodeQuery) else "",
            sort_order=self.sort_order,
            page=self.page,
            products=tuple(self.products),
            has_more=self.has_more,
            barcode_result=self.barcode_result,
            is_loading=self.is_loading,
            last_error=self.last_error,
            categories=tuple(self.categories),
            can_load_more=self.can_load_more,
        )

    async def _change_intent(self, intent: QueryIntent) -> None:
        self.intent = intent
        self._reset()
        await self._fetch()

    def _reset(self) -> None:
        self.page = 1
        self.products = []
        self.barcode_result = None
        self.has_more = True
        self.last_error = None

    async def _fetch(self) -> None:
        self._generation += 1
        generation = self._generation
        intent = self.intent
        page = self.page
        self.is_loading = True
        try:
            if isinstance(intent, BarcodeQuery):
                lookup = await self.catalog.fetch_by_identifier_result(intent.code)
                if generation == self._generation:
                    self._apply_lookup(lookup)
            else:
                result = await self._fetch_page(intent, page)
                if generation == self._generation:
                    self._apply_page(result, page)
        except Exception:
            _logger.exception("Product fetch failed for %s page %s", intent, page)
        finally:
            if generation == self._generation:
                self.is_loading = False

    async def _fetch_page(
        self, intent: CategoryQuery | SearchQuery, page: int
    ) -> FetchResult[list[Product]]:
        if isinstance(intent, SearchQuery):
            return await self.catalog.fuzzy_search_by_text_result(intent.text, page)
        return await self.catalog.fetch_by_category_result(intent.name, page)

    def _apply_page(self, result: FetchResult[list[Product]], page: int) -> None:
        self.last_error = None if result.ok else SERVICE_UNAVAILABLE
        if not result.value:
            self.has_more = False
            return
        ordered = sort_products(list(result.value), self.sort_order)
        if page == 1:
            self.products = ordered
        else:
            self.products = [*self.products, *ordered]
        self.has_more = True

    def _apply_lookup(self, result: FetchResult[Product | None]) -> None:
        self.barcode_result = result.value
        if not result.ok:
            self.last_error = SERVICE_UNAVAILABLE
        elif result.value is None:
            self.last_error = NOT_FOUND
        else:
            self.last_error = None
