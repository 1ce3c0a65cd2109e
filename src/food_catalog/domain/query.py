"""Query intent, fetch results and the browser view-model."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, Literal, TypeVar

from food_catalog.domain.products import Product

T = TypeVar("T")

NOT_FOUND = "not_found"
SERVICE_UNAVAILABLE = "service_unavailable"


class SortOrder(StrEnum):
    """Ordering applied to each fetched page."""

    NONE = "none"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    GRADE_ASC = "grade-asc"
    GRADE_DESC = "grade-desc"

    @classmethod
    def parse(cls, raw: "str | SortOrder | None") -> "SortOrder":
        """Parse a sort order, accepting the legacy dropdown values."""
        if isinstance(raw, SortOrder):
            return raw
        value = (raw or "").strip().lower()
        if not value:
            return cls.NONE
        value = _LEGACY_SORT_VALUES.get(value, value)
        return cls(value)


_LEGACY_SORT_VALUES = {
    "asc": SortOrder.NAME_ASC.value,
    "desc": SortOrder.NAME_DESC.value,
    "nutri-asc": SortOrder.GRADE_ASC.value,
    "nutri-desc": SortOrder.GRADE_DESC.value,
}


@dataclass(frozen=True)
class CategoryQuery:
    """List products of one category."""

    name: str
    mode: Literal["category"] = "category"


@dataclass(frozen=True)
class SearchQuery:
    """Free-text fuzzy search over product names."""

    text: str
    mode: Literal["search"] = "search"


@dataclass(frozen=True)
class BarcodeQuery:
    """Direct lookup of a single product by barcode."""

    code: str
    mode: Literal["barcode"] = "barcode"


QueryIntent = CategoryQuery | SearchQuery | BarcodeQuery


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of one data-source call.

    A failed fetch still carries the fail-soft default in ``value`` so callers
    that only care about data can ignore ``ok``.
    """

    value: T
    ok: bool = True
    reason: str | None = None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, default: T, reason: str) -> "FetchResult[T]":
        return cls(value=default, ok=False, reason=reason)


@dataclass(frozen=True)
class BrowserView:
    """Display-ready snapshot of the product browser."""

    mode: str
    category_name: str
    search_text: str
    barcode_text: str
    sort_order: SortOrder
    page: int
    products: tuple[Product, ...] = ()
    has_more: bool = True
    barcode_result: Product | None = None
    is_loading: bool = False
    last_error: str | None = None
    categories: tuple[str, ...] = ()
    can_load_more: bool = False
