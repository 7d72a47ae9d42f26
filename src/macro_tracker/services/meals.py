"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.errors import ValidationError
from macro_tracker.domain.ingredients import (
    IngredientLine,
    MealResolution,
    ResolvedIngredient,
)
from macro_tracker.domain.meals import DailySummary, MealEntry, MealTotals
from macro_tracker.domain.nutrition import ZERO_MACROS, MacroProfile
from macro_tracker.services.parsing import parse_number
from macro_tracker.services.pipeline import IngredientResolutionPipeline

_MACRO_FIELDS = ("calories", "protein", "carbs", "fat")

_logger = logging.getLogger(__name__)


class MealEntryRepository(Protocol):
    """Persistence interface for meal entries."""

    def create_entry(
        self,
        entry_date: date,
        meal: str,
        totals: MacroProfile,
        notes: str,
    ) -> MealEntry:
        """Create a meal entry and return it."""

    def create_ingredients(
        self, meal_entry_id: UUID, ingredients: list[ResolvedIngredient]
    ) -> None:
        """Persist the ingredient breakdown for a meal entry."""

    def get_entry(self, entry_id: UUID) -> MealEntry | None:
        """Return a meal entry with its ingredients."""

    def list_entries(self, entry_date: date) -> list[MealEntry]:
        """Return entries for a day ordered by creation time."""

    def update_entry(
        self,
        entry_id: UUID,
        entry_date: date,
        meal: str,
        totals: MacroProfile,
        notes: str,
    ) -> MealEntry | None:
        """Update a meal entry and return it, or None if missing."""

    def delete_ingredients(self, meal_entry_id: UUID) -> None:
        """Delete the ingredient breakdown for a meal entry."""

    def delete_entry(self, entry_id: UUID) -> bool:
        """Delete a meal entry and its ingredients."""


@dataclass(frozen=True)
class MealDraft:
    """Validated fields for a raw-macro meal entry."""

    entry_date: date
    meal: str
    totals: MacroProfile
    notes: str


@dataclass
class MealEntryService:
    """Service that resolves ingredients and persists meal entries."""

    pipeline: IngredientResolutionPipeline
    repository: MealEntryRepository

    def log_meal(self, payload: dict[str, object]) -> MealEntry:
        """Persist a meal given raw macro totals."""
        draft = parse_meal_payload(payload)
        return self.repository.create_entry(
            entry_date=draft.entry_date,
            meal=draft.meal,
            totals=draft.totals,
            notes=draft.notes,
        )

    async def preview_ingredients(
        self, lines: list[IngredientLine]
    ) -> MealResolution:
        """Resolve ingredient lines without persisting a meal."""
        return await self.pipeline.resolve_ingredients(lines)

    async def log_ingredient_meal(
        self,
        entry_date: object,
        meal: object,
        lines: list[IngredientLine],
        notes: object = None,
    ) -> tuple[MealEntry, MealResolution]:
        """Resolve every ingredient, then persist the meal and its breakdown."""
        errors: list[str] = []
        parsed_date = _parse_date(entry_date, errors)
        meal_name = str(meal or "").strip()
        if not meal_name:
            errors.append("Meal name is required.")
        if errors:
            raise ValidationError("Validation error", errors)

        resolution = await self.pipeline.resolve_ingredients(lines)
        entry = self.repository.create_entry(
            entry_date=parsed_date,
            meal=meal_name,
            totals=resolution.totals,
            notes=str(notes or "").strip(),
        )
        try:
            self.repository.create_ingredients(entry.id, resolution.ingredients)
        except Exception:
            _logger.exception("Rolling back meal entry %s", entry.id)
            self.repository.delete_entry(entry.id)
            raise
        return entry, resolution

    def get_entry(self, entry_id: UUID) -> MealEntry | None:
        return self.repository.get_entry(entry_id)

    def list_entries(self, entry_date: date) -> list[MealEntry]:
        return self.repository.list_entries(entry_date)

    def get_summary(self, entry_date: date) -> DailySummary:
        """Return day totals plus totals per meal name."""
        entries = self.repository.list_entries(entry_date)
        totals = ZERO_MACROS
        by_meal: dict[str, tuple[int, MacroProfile]] = {}
        for entry in entries:
            totals = totals + entry.totals
            count, meal_totals = by_meal.get(entry.meal, (0, ZERO_MACROS))
            by_meal[entry.meal] = (count + 1, meal_totals + entry.totals)
        return DailySummary(
            day=entry_date,
            totals=totals,
            by_meal=[
                MealTotals(meal=meal, entries=count, totals=meal_totals)
                for meal, (count, meal_totals) in sorted(by_meal.items())
            ],
        )

    def update_meal(
        self, entry_id: UUID, payload: dict[str, object]
    ) -> MealEntry | None:
        """Replace a meal entry's fields with raw macro totals.

        Any ingredient breakdown for the entry is removed.
        """
        draft = parse_meal_payload(payload)
        entry = self.repository.update_entry(
            entry_id,
            entry_date=draft.entry_date,
            meal=draft.meal,
            totals=draft.totals,
            notes=draft.notes,
        )
        if entry is not None:
            self.repository.delete_ingredients(entry_id)
        return entry

    def delete_meal(self, entry_id: UUID) -> bool:
        return self.repository.delete_entry(entry_id)


def parse_meal_payload(payload: dict[str, object]) -> MealDraft:
    """Trim and validate a raw-macro meal payload, collecting all errors."""
    errors: list[str] = []
    entry_date = _parse_date(payload.get("date"), errors)
    meal = str(payload.get("meal") or "").strip()
    if not meal:
        errors.append("Meal name is required.")
    values: dict[str, float] = {}
    for key in _MACRO_FIELDS:
        value = parse_number(payload.get(key))
        if value is None:
            errors.append(f"{key.capitalize()} must be a number.")
            continue
        values[key] = value
    if errors:
        raise ValidationError("Validation error", errors)
    notes = payload.get("notes")
    return MealDraft(
        entry_date=entry_date,
        meal=meal,
        totals=MacroProfile(**values),
        notes=str(notes).strip() if notes else "",
    )


def _parse_date(value: object, errors: list[str]) -> date:
    if isinstance(value, date):
        return value
    raw = str(value or "").strip()
    if not raw:
        errors.append("Date is required.")
        return date.min
    try:
        return date.fromisoformat(raw)
    except ValueError:
        errors.append("Date must be in YYYY-MM-DD format.")
        return date.min
