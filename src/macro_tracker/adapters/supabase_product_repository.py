"""Supabase implementation for user-defined products."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.products import UserProduct
from macro_tracker.services.normalize import normalize_name
from macro_tracker.services.products import ProductRepository


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Supabase-backed repository for the my_products table."""

    client: Client

    def create_product(self, payload: dict[str, object]) -> UserProduct:
        """Create a product and return it."""
        response = self.client.table("my_products").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create product")
        return _parse_product(response.data[0])

    def update_product(
        self, product_id: UUID, payload: dict[str, object]
    ) -> UserProduct | None:
        """Update a product and return it."""
        response = (
            self.client.table("my_products")
            .update(payload)
            .eq("id", str(product_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_product(response.data[0])

    def get_product(self, product_id: UUID) -> UserProduct | None:
        """Return a product by id, if present."""
        response = (
            self.client.table("my_products")
            .select("*")
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_product(response.data[0])

    def delete_product(self, product_id: UUID) -> bool:
        """Delete a product by id."""
        response = (
            self.client.table("my_products")
            .delete()
            .eq("id", str(product_id))
            .execute()
        )
        return bool(response.data)

    def list_products(
        self, search: str | None, favorites_only: bool
    ) -> list[UserProduct]:
        """List products filtered by name substring and favorite flag."""
        query = self.client.table("my_products").select("*")
        if search:
            query = query.ilike("product_name", f"%{_escape_like(search)}%")
        if favorites_only:
            query = query.eq("is_favorite", True)
        response = (
            query.order("is_favorite", desc=True)
            .order("product_name")
            .execute()
        )
        return [_parse_product(row) for row in response.data or []]

    def find_by_name(self, name: str) -> UserProduct | None:
        """Return a product by exact name, then by normalized case-insensitive name."""
        response = (
            self.client.table("my_products")
            .select("*")
            .eq("product_name", name)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_product(response.data[0])
        response = (
            self.client.table("my_products")
            .select("*")
            .ilike("product_name", _escape_like(normalize_name(name)))
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_product(response.data[0])
        return None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _optional_float(value: object) -> float | None:
    return float(value) if isinstance(value, int | float) else None


def _parse_product(row: dict[str, object]) -> UserProduct:
    """Parse a my_products row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return UserProduct(
        id=UUID(row["id"]),
        product_name=str(row.get("product_name", "")),
        brand=row.get("brand"),
        serving_size=float(row.get("serving_size", 100.0)),
        serving_unit=str(row.get("serving_unit") or "g"),
        calories=float(row.get("calories", 0.0)),
        protein=float(row.get("protein", 0.0)),
        carbs=float(row.get("carbs", 0.0)),
        fat=float(row.get("fat", 0.0)),
        fiber=_optional_float(row.get("fiber")),
        sugar=_optional_float(row.get("sugar")),
        notes=row.get("notes"),
        is_favorite=bool(row.get("is_favorite", False)),
        created_at=created_at,
    )
