"""Curated whole-food table with typo-tolerant lookup.

Values are per 100g of the raw or plainly cooked food.
Staples here override search results for the same name.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from rapidfuzz.distance import Levenshtein

from macro_tracker.domain.nutrition import CuratedMatch, MacroProfile

CURATED_FOODS: Mapping[str, MacroProfile] = MappingProxyType(
    {
        "chicken": MacroProfile(calories=165, protein=31, carbs=0, fat=3.6),
        "chicken breast": MacroProfile(calories=165, protein=31, carbs=0, fat=3.6),
        "chicken thigh": MacroProfile(calories=209, protein=26, carbs=0, fat=10.9),
        "turkey": MacroProfile(calories=135, protein=30, carbs=0, fat=1),
        "beef": MacroProfile(calories=250, protein=26, carbs=0, fat=15),
        "salmon": MacroProfile(calories=208, protein=20.4, carbs=0, fat=13.4),
        "tuna": MacroProfile(calories=132, protein=28.2, carbs=0, fat=1.3),
        "shrimp": MacroProfile(calories=85, protein=20.1, carbs=0, fat=0.5),
        "egg": MacroProfile(calories=155, protein=13, carbs=1.1, fat=11),
        "tofu": MacroProfile(calories=76, protein=8, carbs=1.9, fat=4.8),
        "rice": MacroProfile(calories=130, protein=2.7, carbs=28.2, fat=0.3),
        "brown rice": MacroProfile(calories=123, protein=2.7, carbs=25.6, fat=1),
        "oats": MacroProfile(calories=389, protein=16.9, carbs=66.3, fat=6.9),
        "pasta": MacroProfile(calories=131, protein=5, carbs=25.4, fat=1.1),
        "bread": MacroProfile(calories=265, protein=9.4, carbs=49, fat=3.2),
        "quinoa": MacroProfile(calories=120, protein=4.4, carbs=21.3, fat=1.9),
        "potato": MacroProfile(calories=77, protein=2, carbs=17.5, fat=0.1),
        "sweet potato": MacroProfile(calories=86, protein=1.6, carbs=20.1, fat=0.1),
        "broccoli": MacroProfile(calories=34, protein=2.8, carbs=7, fat=0.4),
        "spinach": MacroProfile(calories=23, protein=2.9, carbs=3.6, fat=0.4),
        "carrot": MacroProfile(calories=41, protein=0.9, carbs=9.6, fat=0.2),
        "tomato": MacroProfile(calories=18, protein=0.9, carbs=3.9, fat=0.2),
        "peas": MacroProfile(calories=81, protein=5.4, carbs=14.5, fat=0.4),
        "pear": MacroProfile(calories=57, protein=0.4, carbs=15.2, fat=0.1),
        "apple": MacroProfile(calories=52, protein=0.3, carbs=13.8, fat=0.2),
        "banana": MacroProfile(calories=89, protein=1.1, carbs=22.8, fat=0.3),
        "orange": MacroProfile(calories=47, protein=0.9, carbs=11.8, fat=0.1),
        "avocado": MacroProfile(calories=160, protein=2, carbs=8.5, fat=14.7),
        "almonds": MacroProfile(calories=579, protein=21.2, carbs=21.6, fat=49.9),
        "peanut butter": MacroProfile(calories=588, protein=25, carbs=20, fat=50),
        "olive oil": MacroProfile(calories=884, protein=0, carbs=0, fat=100),
        "butter": MacroProfile(calories=717, protein=0.9, carbs=0.1, fat=81.1),
        "milk": MacroProfile(calories=61, protein=3.2, carbs=4.8, fat=3.3),
        "greek yogurt": MacroProfile(calories=97, protein=9, carbs=3.6, fat=5),
        "cheddar cheese": MacroProfile(calories=403, protein=24.9, carbs=1.3, fat=33.1),
        "cottage cheese": MacroProfile(calories=98, protein=11.1, carbs=3.4, fat=4.3),
        "lentils": MacroProfile(calories=116, protein=9, carbs=20.1, fat=0.4),
    }
)

MAX_EDIT_DISTANCE = 2
MIN_SIMILARITY = 0.75


@dataclass
class CuratedMatcher:
    """Exact and fuzzy lookup against the curated table."""

    table: Mapping[str, MacroProfile] = field(default_factory=lambda: CURATED_FOODS)
    max_distance: int = MAX_EDIT_DISTANCE
    min_similarity: float = MIN_SIMILARITY

    def find_match(self, normalized_name: str) -> CuratedMatch | None:
        """Return the curated entry for a normalized name, if unambiguous."""
        exact = self.table.get(normalized_name)
        if exact is not None:
            return CuratedMatch(key=normalized_name, per_100g=exact, exact=True)
        if not normalized_name:
            return None

        best: list[tuple[int, str]] = []
        for key in self.table:
            distance = Levenshtein.distance(normalized_name, key)
            if distance > self.max_distance:
                continue
            similarity = 1 - distance / max(len(normalized_name), len(key))
            if similarity < self.min_similarity:
                continue
            if not best or distance < best[0][0]:
                best = [(distance, key)]
            elif distance == best[0][0]:
                best.append((distance, key))

        # Equidistant candidates are ambiguous.
        if len(best) != 1:
            return None
        distance, key = best[0]
        return CuratedMatch(
            key=key, per_100g=self.table[key], exact=False, distance=distance
        )
