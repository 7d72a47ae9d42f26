"""Services for user-defined products."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.errors import ValidationError
from macro_tracker.domain.nutrition import MacroProfile
from macro_tracker.domain.products import UserProduct
from macro_tracker.services.parsing import optional_text, parse_bool, parse_number

_REQUIRED_NUMBERS = ("calories", "protein", "carbs", "fat")
_OPTIONAL_NUMBERS = ("fiber", "sugar")


class ProductRepository(Protocol):
    """Persistence interface for user-defined products."""

    def create_product(self, payload: dict[str, object]) -> UserProduct:
        """Create a product and return it."""

    def update_product(
        self, product_id: UUID, payload: dict[str, object]
    ) -> UserProduct | None:
        """Update a product and return it, or None if missing."""

    def get_product(self, product_id: UUID) -> UserProduct | None:
        """Return a product by id, if present."""

    def delete_product(self, product_id: UUID) -> bool:
        """Delete a product; return True if a row was removed."""

    def list_products(
        self, search: str | None, favorites_only: bool
    ) -> list[UserProduct]:
        """List products filtered by name substring and favorite flag."""

    def find_by_name(self, name: str) -> UserProduct | None:
        """Return a product by exact name, then case-insensitive normalized name."""


@dataclass
class ProductService:
    """Application service for the user's own products."""

    repository: ProductRepository

    def create_product(self, payload: dict[str, object]) -> UserProduct:
        return self.repository.create_product(clean_product_payload(payload))

    def update_product(
        self, product_id: UUID, payload: dict[str, object]
    ) -> UserProduct | None:
        return self.repository.update_product(
            product_id, clean_product_payload(payload)
        )

    def get_product(self, product_id: UUID) -> UserProduct | None:
        return self.repository.get_product(product_id)

    def delete_product(self, product_id: UUID) -> bool:
        return self.repository.delete_product(product_id)

    def list_products(
        self, search: str | None = None, favorites_only: bool = False
    ) -> list[UserProduct]:
        """List products, newest first unless favorites are requested."""
        query = search.strip() if search else None
        return self.repository.list_products(query or None, favorites_only)

    def find_by_name(self, name: str) -> UserProduct | None:
        """Find a product for an ingredient name."""
        stripped = name.strip()
        if not stripped:
            return None
        return self.repository.find_by_name(stripped)

    def calculate(self, product_id: UUID, quantity: object) -> MacroProfile | None:
        """Scale a product's per-serving macros to ``quantity`` serving units."""
        product = self.repository.get_product(product_id)
        if product is None:
            return None
        amount = parse_number(quantity)
        if amount is None or amount <= 0:
            raise ValidationError("Quantity must be a positive number.")
        return scale_by_serving(product, amount)


def scale_by_serving(product: UserProduct, quantity: float) -> MacroProfile:
    """Scale per-serving macros by ``quantity / serving_size``."""
    return product.per_serving.scale(quantity / product.serving_size)


def clean_product_payload(payload: dict[str, object]) -> dict[str, object]:
    """Trim and validate a product payload, collecting every field error."""
    errors: list[str] = []
    name = str(payload.get("product_name") or "").strip()
    if not name:
        errors.append("Product name is required.")
    serving_size = parse_number(payload.get("serving_size"))
    if serving_size is None or serving_size <= 0:
        errors.append("Serving size must be a positive number.")

    cleaned: dict[str, object] = {
        "product_name": name,
        "brand": optional_text(payload.get("brand")),
        "serving_size": serving_size,
        "serving_unit": optional_text(payload.get("serving_unit")) or "g",
        "notes": optional_text(payload.get("notes")),
    }
    is_favorite = parse_bool(payload.get("is_favorite"))
    if is_favorite is None:
        errors.append("Favorite must be true or false.")
    cleaned["is_favorite"] = bool(is_favorite)
    for key in _REQUIRED_NUMBERS:
        value = parse_number(payload.get(key))
        if value is None or value < 0:
            errors.append(f"{key.capitalize()} must be a non-negative number.")
        cleaned[key] = value
    for key in _OPTIONAL_NUMBERS:
        raw = payload.get(key)
        if raw is None or raw == "":
            cleaned[key] = None
            continue
        value = parse_number(raw)
        if value is None or value < 0:
            errors.append(f"{key.capitalize()} must be a non-negative number.")
        cleaned[key] = value

    if errors:
        raise ValidationError("Validation error", errors)
    return cleaned
