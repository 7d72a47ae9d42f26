"""Supabase implementation of the food cache."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_tracker.domain.nutrition import FoodRecord, MacroProfile
from macro_tracker.services.food_cache import FoodCacheRepository


@dataclass
class SupabaseFoodCacheRepository(FoodCacheRepository):
    """Supabase-backed cache of per-100g food records."""

    client: Client

    def get_by_normalized_name(self, normalized_name: str) -> FoodRecord | None:
        """Return the cached record for a normalized name, if present."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("normalized_name", normalized_name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def insert(self, record: FoodRecord) -> UUID:
        """Upsert on the unique normalized name so racing writers converge."""
        response = (
            self.client.table("foods")
            .upsert(_food_payload(record), on_conflict="normalized_name")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to cache food record")
        return UUID(response.data[0]["id"])

    def update(self, food_id: UUID, record: FoodRecord) -> None:
        """Overwrite values and source for an existing record."""
        payload = _food_payload(record)
        payload.pop("normalized_name")
        payload.pop("display_name")
        response = (
            self.client.table("foods").update(payload).eq("id", str(food_id)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update food record")


def _food_payload(record: FoodRecord) -> dict[str, object]:
    return {
        "normalized_name": record.normalized_name,
        "display_name": record.display_name,
        "calories_per_100g": record.per_100g.calories,
        "protein_per_100g": record.per_100g.protein,
        "carbs_per_100g": record.per_100g.carbs,
        "fat_per_100g": record.per_100g.fat,
        "source": record.source,
    }


def _parse_food(row: dict[str, object]) -> FoodRecord:
    """Parse a foods row into a domain model."""
    return FoodRecord(
        id=UUID(row["id"]),
        normalized_name=str(row.get("normalized_name", "")),
        display_name=str(row.get("display_name", "")),
        per_100g=MacroProfile(
            calories=float(row.get("calories_per_100g", 0.0)),
            protein=float(row.get("protein_per_100g", 0.0)),
            carbs=float(row.get("carbs_per_100g", 0.0)),
            fat=float(row.get("fat_per_100g", 0.0)),
        ),
        source=str(row.get("source", "")),
    )
