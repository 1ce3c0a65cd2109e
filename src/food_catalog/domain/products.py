"""Product domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    """Snapshot of one catalog item as reported by Open Food Facts."""

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
    def from_api(cls, payload: dict[str, object]) -> "Product":
        """Build a product from a raw Open Food Facts product object."""
        return cls(
            identifier=str(payload.get("code") or payload.get("_id") or ""),
            name=_text(payload.get("product_name")),
            categories=_text(payload.get("categories")),
            ingredients_text=_text(payload.get("ingredients_text")),
            nutrition_grade=_text(payload.get("nutrition_grades")),
            quantity=_text(payload.get("quantity")),
            brands=_text(payload.get("brands")),
            manufacturing_places=_text(payload.get("manufacturing_places")),
            origins=_text(payload.get("origins")),
            labels=_text(payload.get("labels")),
            stores=_text(payload.get("stores")),
            countries=_text(payload.get("countries")),
            image_url=_text(payload.get("image_url")),
        )


def _text(value: object) -> str | None:
    """Return a non-empty string value or None."""
    if value is None:
        return None
    text = str(value)
    return text or None
