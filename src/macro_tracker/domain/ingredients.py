"""Domain models for ingredient resolution."""

from dataclasses import dataclass
from uuid import UUID

from macro_tracker.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class IngredientLine:
    """A caller-supplied ingredient and the grams consumed."""

    name: str
    quantity_grams: object


@dataclass(frozen=True)
class ResolvedIngredient:
    """Scaled macros for one ingredient plus the per-100g values behind them."""

    food_id: UUID | None
    food_name: str
    quantity_grams: float
    scaled: MacroProfile
    per_100g: MacroProfile
    source: str

    def to_payload(self) -> dict[str, object]:
        return {
            "foodId": str(self.food_id) if self.food_id else None,
            "foodName": self.food_name,
            "quantityGrams": self.quantity_grams,
            **self.scaled.as_dict(),
            "per100g": self.per_100g.as_dict(),
            "source": self.source,
        }


@dataclass(frozen=True)
class MealResolution:
    """Totals across a batch of resolved ingredients."""

    totals: MacroProfile
    ingredients: list[ResolvedIngredient]

    def to_payload(self) -> dict[str, object]:
        return {
            "totals": self.totals.as_dict(),
            "ingredients": [item.to_payload() for item in self.ingredients],
        }
