"""Nutrition domain models."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class FoodSource(StrEnum):
    """Provenance tag for a resolved nutrition record."""

    CURATED = "curated"
    OPENFOODFACTS = "openfoodfacts"
    MY_PRODUCTS = "my_products"


class NutrimentBasis(StrEnum):
    """How external nutriments were turned into per-100g values."""

    PER_100G = "per100g"
    KILOJOULES = "kj"
    PER_SERVING = "serving"


@dataclass(frozen=True)
class MacroProfile:
    """Calories plus the three macronutrients."""

    calories: float
    protein: float
    carbs: float
    fat: float

    def scale(self, factor: float) -> "MacroProfile":
        """Return every value multiplied by ``factor``."""
        return MacroProfile(
            calories=self.calories * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fat=self.fat * factor,
        )

    def __add__(self, other: "MacroProfile") -> "MacroProfile":
        return MacroProfile(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }


ZERO_MACROS = MacroProfile(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class FoodRecord:
    """Cached per-100g nutrition facts for a normalized food name."""

    normalized_name: str
    display_name: str
    per_100g: MacroProfile
    source: str
    id: UUID | None = None


@dataclass(frozen=True)
class CuratedMatch:
    """A hit in the curated whole-food table."""

    key: str
    per_100g: MacroProfile
    exact: bool
    distance: int = 0


@dataclass(frozen=True)
class CuratedResolution:
    """Resolution taken from the curated table."""

    match: CuratedMatch


@dataclass(frozen=True)
class ExternalResolution:
    """Resolution decoded from a scored external search candidate."""

    provider: str
    product_name: str
    product_code: str | None
    score: int
    basis: NutrimentBasis
    per_100g: MacroProfile


@dataclass(frozen=True)
class UserProductResolution:
    """Resolution taken from a user-defined product."""

    product_id: UUID
    product_name: str
    serving_size: float
    per_serving: MacroProfile

    @property
    def per_100g(self) -> MacroProfile:
        return self.per_serving.scale(100 / self.serving_size)


FoodResolution = CuratedResolution | ExternalResolution | UserProductResolution
