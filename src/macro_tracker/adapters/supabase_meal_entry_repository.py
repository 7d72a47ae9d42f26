"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.ingredients import ResolvedIngredient
from macro_tracker.domain.meals import MealEntry, MealIngredientRecord
from macro_tracker.domain.nutrition import MacroProfile
from macro_tracker.services.meals import MealEntryRepository


@dataclass
class SupabaseMealEntryRepository(MealEntryRepository):
    """Supabase implementation for meal entries and their ingredients."""

    client: Client

    def create_entry(
        self,
        entry_date: date,
        meal: str,
        totals: MacroProfile,
        notes: str,
    ) -> MealEntry:
        """Create a meal entry row and return it."""
        response = (
            self.client.table("meal_entries")
            .insert(_entry_payload(entry_date, meal, totals, notes))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal entry")
        return _parse_entry(response.data[0])

    def create_ingredients(
        self, meal_entry_id: UUID, ingredients: list[ResolvedIngredient]
    ) -> None:
        """Create ingredient breakdown rows."""
        payload = []
        for ingredient in ingredients:
            payload.append(
                {
                    "meal_entry_id": str(meal_entry_id),
                    "food_id": str(ingredient.food_id) if ingredient.food_id else None,
                    "food_name": ingredient.food_name,
                    "quantity_grams": ingredient.quantity_grams,
                    "calories": ingredient.scaled.calories,
                    "protein": ingredient.scaled.protein,
                    "carbs": ingredient.scaled.carbs,
                    "fat": ingredient.scaled.fat,
                    "per_100g": ingredient.per_100g.as_dict(),
                    "source": ingredient.source,
                }
            )
        if not payload:
            return
        response = self.client.table("meal_ingredients").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal ingredients")

    def get_entry(self, entry_id: UUID) -> MealEntry | None:
        """Return a meal entry with its ingredients."""
        response = (
            self.client.table("meal_entries")
            .select("*")
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        ingredients_response = (
            self.client.table("meal_ingredients")
            .select("*")
            .eq("meal_entry_id", str(entry_id))
            .execute()
        )
        return _parse_entry(
            response.data[0],
            [_parse_ingredient(row) for row in ingredients_response.data or []],
        )

    def list_entries(self, entry_date: date) -> list[MealEntry]:
        """Return entries for a day ordered by creation time."""
        response = (
            self.client.table("meal_entries")
            .select("*")
            .eq("entry_date", entry_date.isoformat())
            .order("created_at")
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def update_entry(
        self,
        entry_id: UUID,
        entry_date: date,
        meal: str,
        totals: MacroProfile,
        notes: str,
    ) -> MealEntry | None:
        """Update a meal entry and return it."""
        response = (
            self.client.table("meal_entries")
            .update(_entry_payload(entry_date, meal, totals, notes))
            .eq("id", str(entry_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def delete_ingredients(self, meal_entry_id: UUID) -> None:
        """Delete the ingredient rows for a meal entry."""
        self.client.table("meal_ingredients").delete().eq(
            "meal_entry_id", str(meal_entry_id)
        ).execute()

    def delete_entry(self, entry_id: UUID) -> bool:
        """Delete a meal entry and its ingredient rows."""
        self.delete_ingredients(entry_id)
        response = (
            self.client.table("meal_entries")
            .delete()
            .eq("id", str(entry_id))
            .execute()
        )
        return bool(response.data)


def _entry_payload(
    entry_date: date, meal: str, totals: MacroProfile, notes: str
) -> dict[str, object]:
    return {
        "entry_date": entry_date.isoformat(),
        "meal": meal,
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fat": totals.fat,
        "notes": notes,
    }


def _macros(row: dict[str, object]) -> MacroProfile:
    return MacroProfile(
        calories=float(row.get("calories", 0.0)),
        protein=float(row.get("protein", 0.0)),
        carbs=float(row.get("carbs", 0.0)),
        fat=float(row.get("fat", 0.0)),
    )


def _parse_entry(
    row: dict[str, object], ingredients: list[MealIngredientRecord] | None = None
) -> MealEntry:
    """Parse a meal_entries row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return MealEntry(
        id=UUID(row["id"]),
        entry_date=date.fromisoformat(str(row["entry_date"])),
        meal=str(row.get("meal", "")),
        totals=_macros(row),
        notes=str(row.get("notes") or ""),
        created_at=created_at,
        ingredients=ingredients or [],
    )


def _parse_ingredient(row: dict[str, object]) -> MealIngredientRecord:
    food_id = row.get("food_id")
    per_100g = row.get("per_100g") or {}
    return MealIngredientRecord(
        id=UUID(row["id"]),
        meal_entry_id=UUID(row["meal_entry_id"]),
        food_id=UUID(food_id) if isinstance(food_id, str) and food_id else None,
        food_name=str(row.get("food_name", "")),
        quantity_grams=float(row.get("quantity_grams", 0.0)),
        macros=_macros(row),
        per_100g=_macros(per_100g if isinstance(per_100g, dict) else {}),
        source=str(row.get("source", "")),
    )
