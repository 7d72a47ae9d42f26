"""Domain models for user-defined products."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from macro_tracker.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class UserProduct:
    """A product the user entered with per-serving macros."""

    id: UUID
    product_name: str
    brand: str | None
    serving_size: float
    serving_unit: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float | None
    sugar: float | None
    notes: str | None
    is_favorite: bool
    created_at: datetime | None = None

    @property
    def per_serving(self) -> MacroProfile:
        return MacroProfile(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )
