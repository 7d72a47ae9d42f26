"""Plausibility checks for per-100g nutrition values."""

import math
from dataclasses import dataclass

from macro_tracker.domain.errors import OutOfRangeError
from macro_tracker.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class ValueBounds:
    """Upper bounds for per-100g values; lower bounds are always zero."""

    max_calories: float = 900.0
    max_macro_g: float = 100.0


DEFAULT_BOUNDS = ValueBounds()


def validate_per_100g(
    macros: MacroProfile, bounds: ValueBounds = DEFAULT_BOUNDS
) -> MacroProfile:
    """Return ``macros`` unchanged or raise OutOfRangeError."""
    if not _within(macros.calories, bounds.max_calories):
        raise OutOfRangeError(macros)
    for value in (macros.protein, macros.carbs, macros.fat):
        if not _within(value, bounds.max_macro_g):
            raise OutOfRangeError(macros)
    return macros


def validate(
    calories: float,
    protein: float,
    carbs: float,
    fat: float,
    bounds: ValueBounds = DEFAULT_BOUNDS,
) -> MacroProfile:
    """Validate loose per-100g values."""
    return validate_per_100g(
        MacroProfile(calories=calories, protein=protein, carbs=carbs, fat=fat),
        bounds,
    )


def is_plausible(macros: MacroProfile, bounds: ValueBounds = DEFAULT_BOUNDS) -> bool:
    """Return True when ``macros`` pass ``validate_per_100g``."""
    try:
        validate_per_100g(macros, bounds)
    except OutOfRangeError:
        return False
    return True


def _within(value: float, upper: float) -> bool:
    return math.isfinite(value) and 0 <= value <= upper
