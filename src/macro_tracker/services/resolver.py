"""External nutrition resolution with candidate scoring."""

import logging
import re
from dataclasses import dataclass, field

from macro_tracker.adapters.openfoodfacts_client import FoodDatabaseClient
from macro_tracker.domain.errors import NotFoundError
from macro_tracker.domain.nutrition import (
    CuratedResolution,
    ExternalResolution,
    FoodRecord,
    FoodResolution,
    FoodSource,
    MacroProfile,
    NutrimentBasis,
    UserProductResolution,
)
from macro_tracker.services.curated import CuratedMatcher
from macro_tracker.services.normalize import normalize_name
from macro_tracker.services.parsing import parse_number
from macro_tracker.services.validation import (
    DEFAULT_BOUNDS,
    ValueBounds,
    validate_per_100g,
)

KJ_PER_KCAL = 4.184

_logger = logging.getLogger(__name__)

_MACRO_FIELDS = {
    "protein": "proteins",
    "carbs": "carbohydrates",
    "fat": "fat",
}


@dataclass(frozen=True)
class ScoringWeights:
    """Weights and keyword lists used to rank search candidates."""

    term_in_names: int = 20
    term_in_product_name: int = 15
    plain_keyword: int = 5
    processed_keyword: int = -10
    dairy_category: int = 8
    milk_category: int = 5
    complete_macros: int = 10
    min_score: int = 5
    plain_keywords: tuple[str, ...] = (
        "plain",
        "regular",
        "whole",
        "natural",
        "original",
        "classic",
        "simple",
    )
    processed_keywords: tuple[str, ...] = (
        "high-protein",
        "strained",
        "flavored",
        "lite",
        "low-fat",
        "fat-free",
        "zero",
        "sugar-free",
    )
    dairy_query_terms: tuple[str, ...] = ("cheese", "yogurt", "yoghurt", "cream")
    dairy_category_tags: tuple[str, ...] = ("en:dairies", "en:cheeses")
    milk_query_terms: tuple[str, ...] = ("milk",)
    milk_category_tags: tuple[str, ...] = ("en:milks",)


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ScoredCandidate:
    """A search candidate with its relevance score and search position."""

    score: int
    position: int
    product: dict[str, object]


def score_candidate(
    term: str, product: dict[str, object], weights: ScoringWeights = DEFAULT_WEIGHTS
) -> int:
    """Score one search candidate for relevance to a normalized term."""
    product_name = _text(product.get("product_name"))
    generic_name = _text(product.get("generic_name"))
    names = f"{product_name} {generic_name}".strip()
    score = 0
    if term and term in names:
        score += weights.term_in_names
    if term and term in product_name:
        score += weights.term_in_product_name

    flat_names = _flatten(names)
    for keyword in weights.plain_keywords:
        if _contains_word(flat_names, _flatten(keyword)):
            score += weights.plain_keyword
    for keyword in weights.processed_keywords:
        if _contains_word(flat_names, _flatten(keyword)):
            score += weights.processed_keyword

    tags = _category_tags(product)
    if any(word in term for word in weights.dairy_query_terms) and tags.intersection(
        weights.dairy_category_tags
    ):
        score += weights.dairy_category
    if any(word in term for word in weights.milk_query_terms) and tags.intersection(
        weights.milk_category_tags
    ):
        score += weights.milk_category

    nutriments = _nutriments(product)
    if all(
        parse_number(nutriments.get(f"{key}_100g")) is not None
        for key in _MACRO_FIELDS.values()
    ):
        score += weights.complete_macros
    return score


def rank_candidates(
    term: str,
    products: list[dict[str, object]],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[ScoredCandidate]:
    """Return candidates clearing the threshold, best first, search order on ties."""
    scored = [
        ScoredCandidate(
            score=score_candidate(term, product, weights),
            position=position,
            product=product,
        )
        for position, product in enumerate(products)
    ]
    kept = [candidate for candidate in scored if candidate.score >= weights.min_score]
    return sorted(kept, key=lambda candidate: candidate.score, reverse=True)


def normalize_nutriments(
    product: dict[str, object],
) -> tuple[MacroProfile, NutrimentBasis] | None:
    """Derive per-100g values from a product's nutriments, or None if incomplete."""
    nutriments = _nutriments(product)
    if not nutriments:
        return None

    calories = parse_number(nutriments.get("energy-kcal_100g"))
    basis = NutrimentBasis.PER_100G
    if calories is None:
        kilojoules = parse_number(nutriments.get("energy-kj_100g"))
        if kilojoules is None:
            kilojoules = parse_number(nutriments.get("energy_100g"))
        if kilojoules is not None:
            calories = kilojoules / KJ_PER_KCAL
            basis = NutrimentBasis.KILOJOULES

    macros: dict[str, float] = {}
    for key, field_name in _MACRO_FIELDS.items():
        value = parse_number(nutriments.get(f"{field_name}_100g"))
        if value is not None:
            macros[key] = value

    if calories is not None and len(macros) == len(_MACRO_FIELDS):
        return _profile(calories, macros), basis

    serving_grams = _serving_grams(product)
    if serving_grams is None:
        return None
    factor = 100 / serving_grams
    if calories is None:
        serving_kcal = parse_number(nutriments.get("energy-kcal_serving"))
        if serving_kcal is None:
            serving_kj = parse_number(nutriments.get("energy-kj_serving"))
            if serving_kj is not None:
                serving_kcal = serving_kj / KJ_PER_KCAL
        if serving_kcal is None:
            return None
        calories = serving_kcal * factor
    for key, field_name in _MACRO_FIELDS.items():
        if key in macros:
            continue
        value = parse_number(nutriments.get(f"{field_name}_serving"))
        if value is None:
            return None
        macros[key] = value * factor
    return _profile(calories, macros), NutrimentBasis.PER_SERVING


@dataclass
class ExternalNutritionResolver:
    """Resolve a food name to per-100g values via curated data or a search."""

    client: FoodDatabaseClient
    matcher: CuratedMatcher = field(default_factory=CuratedMatcher)
    weights: ScoringWeights = DEFAULT_WEIGHTS
    bounds: ValueBounds = DEFAULT_BOUNDS
    provider: str = FoodSource.OPENFOODFACTS.value
    page_size: int = 10
    debug: bool = False

    async def resolve(self, raw_name: str) -> FoodRecord:
        """Return an unsaved FoodRecord or raise NotFoundError/OutOfRangeError."""
        normalized = normalize_name(raw_name)
        match = self.matcher.find_match(normalized)
        if match is not None:
            return record_from_resolution(
                normalized, raw_name, CuratedResolution(match)
            )

        resolution = await self.search(normalized)
        return record_from_resolution(normalized, raw_name, resolution)

    async def search(self, normalized: str) -> ExternalResolution:
        """Search the external database and decode the best candidate."""
        products = await self.client.search(normalized, page_size=self.page_size)
        ranked = rank_candidates(normalized, products, self.weights)
        if self.debug:
            _logger.info(
                "External search: term=%s results=%s kept=%s",
                normalized,
                len(products),
                len(ranked),
            )
        for candidate in ranked:
            decoded = normalize_nutriments(candidate.product)
            if decoded is None:
                continue
            per_100g, basis = decoded
            validate_per_100g(per_100g, self.bounds)
            code = candidate.product.get("code")
            return ExternalResolution(
                provider=self.provider,
                product_name=_text(candidate.product.get("product_name")),
                product_code=str(code) if code else None,
                score=candidate.score,
                basis=basis,
                per_100g=per_100g,
            )
        raise NotFoundError(f"no reliable nutrition data for {normalized}")


def record_from_resolution(
    normalized: str,
    display_name: str,
    resolution: FoodResolution,
) -> FoodRecord:
    """Build an unsaved cache record from any resolution variant."""
    if isinstance(resolution, CuratedResolution):
        return FoodRecord(
            normalized_name=normalized,
            display_name=display_name.strip(),
            per_100g=resolution.match.per_100g,
            source=FoodSource.CURATED.value,
        )
    if isinstance(resolution, UserProductResolution):
        return FoodRecord(
            normalized_name=normalized,
            display_name=display_name.strip(),
            per_100g=resolution.per_100g,
            source=FoodSource.MY_PRODUCTS.value,
        )
    return FoodRecord(
        normalized_name=normalized,
        display_name=display_name.strip(),
        per_100g=resolution.per_100g,
        source=resolution.provider,
    )


def _profile(calories: float, macros: dict[str, float]) -> MacroProfile:
    return MacroProfile(
        calories=round(calories, 2),
        protein=round(macros["protein"], 2),
        carbs=round(macros["carbs"], 2),
        fat=round(macros["fat"], 2),
    )


def _serving_grams(product: dict[str, object]) -> float | None:
    unit = product.get("serving_quantity_unit")
    if unit not in (None, "", "g"):
        return None
    grams = parse_number(product.get("serving_quantity"))
    if grams is None or grams <= 0:
        return None
    return grams


def _nutriments(product: dict[str, object]) -> dict[str, object]:
    nutriments = product.get("nutriments")
    return nutriments if isinstance(nutriments, dict) else {}


def _category_tags(product: dict[str, object]) -> set[str]:
    tags = product.get("categories_tags")
    if not isinstance(tags, list):
        return set()
    return {str(tag).lower() for tag in tags}


def _text(value: object) -> str:
    return normalize_name(value) if isinstance(value, str) else ""


def _flatten(text: str) -> str:
    return text.replace("-", " ")


def _contains_word(text: str, phrase: str) -> bool:
    return re.search(rf"\b{re.escape(phrase)}\b", text) is not None
