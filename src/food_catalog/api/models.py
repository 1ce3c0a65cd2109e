"""Pydantic models for the browser API."""

from pydantic import BaseModel, Field, field_validator

from food_catalog.domain.products import Product
from food_catalog.domain.query import BrowserView, SortOrder


class SearchRequest(BaseModel):
    """Free-text search input."""

    text: str = ""


class BarcodeRequest(BaseModel):
    """Barcode lookup input."""

    code: str = ""


class CategoryRequest(BaseModel):
    """Category selection input."""

    name: str = Field(min_length=1)


class SortRequest(BaseModel):
    """Sort order selection input."""

    order: SortOrder = SortOrder.NONE

    @field_validator("order", mode="before")
    @classmethod
    def _parse_order(cls, value: object) -> SortOrder:
        if value is None or isinstance(value, str):
            return SortOrder.parse(value)
        raise ValueError("sort order must be a string")


class ProductOut(BaseModel):
    """Product payload returned to clients."""

    identifier: str
    name: str | None = None
    categories: str | None = None
    ingredients_text: str | None = None
    nutrition_grade: str | None = None
    quantity: str | None = None
    brands: str | None = None
    manufacturing_places: str | None = None
    origins: str | None = None
    labels: str | None = None
    stores: str | None = None
    countries: str | None = None
    image_url: str | None = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        return cls.model_validate(product, from_attributes=True)


class BrowserOut(BaseModel):
    """Browser view-model payload."""

    mode: str
    category_name: str
    search_text: str
    barcode_text: str
    sort_order: SortOrder
    page: int
    products: list[ProductOut]
    has_more: bool
    barcode_result: ProductOut | None = None
    is_loading: bool
    last_error: str | None = None
    categories: list[str]
    can_load_more: bool

    @classmethod
    def from_view(cls, view: BrowserView) -> "BrowserOut":
        return cls(
            mode=view.mode,
            category_name=view.category_name,
            search_text=view.search_text,
            barcode_text=view.barcode_text,
            sort_order=view.sort_order,
            page=view.page,
            products=[ProductOut.from_product(item) for item in view.products],
            has_more=view.has_more,
            barcode_result=(
                ProductOut.from_product(view.barcode_result)
                if view.barcode_result
                else None
            ),
            is_loading=view.is_loading,
            last_error=view.last_error,
            categories=list(view.categories),
            can_load_more=view.can_load_more,
        )
