"""Domain models for meal logging."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from macro_tracker.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class MealIngredientRecord:
    """Persisted ingredient breakdown row for a meal entry."""

    id: UUID
    meal_entry_id: UUID
    food_id: UUID | None
    food_name: str
    quantity_grams: float
    macros: MacroProfile
    per_100g: MacroProfile
    source: str


@dataclass(frozen=True)
class MealEntry:
    """A logged meal for a given day."""

    id: UUID
    entry_date: date
    meal: str
    totals: MacroProfile
    notes: str
    created_at: datetime | None
    ingredients: list[MealIngredientRecord] = field(default_factory=list)


@dataclass(frozen=True)
class MealTotals:
    """Totals for one meal name within a day."""

    meal: str
    entries: int
    totals: MacroProfile


@dataclass(frozen=True)
class DailySummary:
    """Day totals plus per-meal breakdown."""

    day: date
    totals: MacroProfile
    by_meal: list[MealTotals]
