"""Ingredient resolution pipeline.

Each ingredient line runs through an ordered list of strategies: the user's
own products, then the food cache (with curated values overriding stale
rows), then the external resolver. The first strategy that finds the food
wins; its per-100g or per-serving values are scaled to the requested grams
and summed into the meal total.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.errors import (
    NotFoundError,
    OutOfRangeError,
    ValidationError,
)
from macro_tracker.domain.ingredients import (
    IngredientLine,
    MealResolution,
    ResolvedIngredient,
)
from macro_tracker.domain.nutrition import (
    ZERO_MACROS,
    CuratedResolution,
    FoodRecord,
    MacroProfile,
    UserProductResolution,
)
from macro_tracker.services.curated import CuratedMatcher
from macro_tracker.services.food_cache import FoodCacheRepository
from macro_tracker.services.normalize import normalize_name
from macro_tracker.services.products import ProductService, scale_by_serving
from macro_tracker.services.resolver import (
    ExternalNutritionResolver,
    record_from_resolution,
)
from macro_tracker.services.validation import is_plausible

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngredientRequest:
    """A validated ingredient line."""

    name: str
    normalized_name: str
    quantity_grams: float


@dataclass(frozen=True)
class IngredientMatch:
    """Values a strategy found for one ingredient, before scaling."""

    food_id: UUID | None
    per_100g: MacroProfile
    source: str
    scaled: MacroProfile


class ResolutionStrategy(Protocol):
    """One step of the fallback chain."""

    async def find(self, request: IngredientRequest) -> IngredientMatch | None:
        """Return a match, or None to defer to the next strategy."""


def scale_per_100g(per_100g: MacroProfile, quantity_grams: float) -> MacroProfile:
    """Scale per-100g values to ``quantity_grams``."""
    return MacroProfile(
        calories=per_100g.calories * quantity_grams / 100,
        protein=per_100g.protein * quantity_grams / 100,
        carbs=per_100g.carbs * quantity_grams / 100,
        fat=per_100g.fat * quantity_grams / 100,
    )


def _match_from_record(record: FoodRecord, quantity_grams: float) -> IngredientMatch:
    return IngredientMatch(
        food_id=record.id,
        per_100g=record.per_100g,
        source=record.source,
        scaled=scale_per_100g(record.per_100g, quantity_grams),
    )


@dataclass
class UserProductStrategy:
    """Match the user's own products and scale by serving size."""

    products: ProductService
    cache: FoodCacheRepository

    async def find(self, request: IngredientRequest) -> IngredientMatch | None:
        product = self.products.find_by_name(request.name)
        if product is None:
            return None
        resolution = UserProductResolution(
            product_id=product.id,
            product_name=product.product_name,
            serving_size=product.serving_size,
            per_serving=product.per_serving,
        )
        record = record_from_resolution(
            request.normalized_name, product.product_name, resolution
        )
        food_id = None
        cached = self.cache.get_by_normalized_name(request.normalized_name)
        if cached is not None:
            food_id = cached.id
        elif is_plausible(record.per_100g):
            food_id = self.cache.insert(record)
        else:
            _logger.warning(
                "Not caching product %s: implausible per-100g values %s",
                product.id,
                record.per_100g,
            )
        return IngredientMatch(
            food_id=food_id,
            per_100g=record.per_100g,
            source=record.source,
            scaled=scale_by_serving(product, request.quantity_grams),
        )


@dataclass
class FoodCacheStrategy:
    """Use a cached record, letting curated values replace stale ones."""

    cache: FoodCacheRepository
    matcher: CuratedMatcher

    async def find(self, request: IngredientRequest) -> IngredientMatch | None:
        cached = self.cache.get_by_normalized_name(request.normalized_name)
        if cached is None:
            return None
        match = self.matcher.find_match(request.normalized_name)
        if match is not None and cached.id is not None:
            curated = record_from_resolution(
                request.normalized_name,
                cached.display_name,
                CuratedResolution(match),
            )
            if (
                cached.source != curated.source
                or cached.per_100g != curated.per_100g
            ):
                self.cache.update(cached.id, curated)
                _logger.info(
                    "Curated values replaced cached %s entry for %s",
                    cached.source,
                    request.normalized_name,
                )
            cached = FoodRecord(
                normalized_name=cached.normalized_name,
                display_name=cached.display_name,
                per_100g=curated.per_100g,
                source=curated.source,
                id=cached.id,
            )
        return _match_from_record(cached, request.quantity_grams)


@dataclass
class ExternalStrategy:
    """Resolve through curated data or the external database and cache the result."""

    resolver: ExternalNutritionResolver
    cache: FoodCacheRepository

    async def find(self, request: IngredientRequest) -> IngredientMatch | None:
        record = await self.resolver.resolve(request.name)
        food_id = self.cache.insert(record)
        stored = FoodRecord(
            normalized_name=record.normalized_name,
            display_name=record.display_name,
            per_100g=record.per_100g,
            source=record.source,
            id=food_id,
        )
        return _match_from_record(stored, request.quantity_grams)


async def first_match(
    strategies: Sequence[ResolutionStrategy], request: IngredientRequest
) -> IngredientMatch:
    """Run strategies in order and return the first match."""
    for strategy in strategies:
        match = await strategy.find(request)
        if match is not None:
            return match
    raise NotFoundError(f"no reliable nutrition data for {request.normalized_name}")


def validate_lines(lines: Sequence[IngredientLine]) -> list[IngredientRequest]:
    """Validate every line up front; the first bad line aborts the batch."""
    if not lines:
        raise ValidationError("At least one ingredient is required.")
    requests: list[IngredientRequest] = []
    for position, line in enumerate(lines, start=1):
        name = line.name.strip() if isinstance(line.name, str) else ""
        normalized = normalize_name(name)
        if not normalized:
            raise ValidationError(f"Ingredient {position}: name is required.")
        quantity = line.quantity_grams
        if (
            isinstance(quantity, bool)
            or not isinstance(quantity, int | float)
            or not math.isfinite(quantity)
        ):
            raise ValidationError(
                f"Ingredient {position} ({name}): quantity must be a number."
            )
        if quantity <= 0:
            raise ValidationError(
                f"Ingredient {position} ({name}): quantity must be greater than 0."
            )
        requests.append(
            IngredientRequest(
                name=name,
                normalized_name=normalized,
                quantity_grams=float(quantity),
            )
        )
    return requests


@dataclass
class IngredientResolutionPipeline:
    """Resolve ingredient lines sequentially and accumulate meal totals."""

    products: ProductService
    cache: FoodCacheRepository
    resolver: ExternalNutritionResolver
    matcher: CuratedMatcher = field(default_factory=CuratedMatcher)

    def strategies(self) -> list[ResolutionStrategy]:
        return [
            UserProductStrategy(self.products, self.cache),
            FoodCacheStrategy(self.cache, self.matcher),
            ExternalStrategy(self.resolver, self.cache),
        ]

    async def resolve_ingredients(
        self, lines: Sequence[IngredientLine]
    ) -> MealResolution:
        """Resolve all lines or raise on the first failure."""
        requests = validate_lines(lines)
        strategies = self.strategies()
        totals = ZERO_MACROS
        resolved: list[ResolvedIngredient] = []
        for request in requests:
            match = await self._resolve_one(strategies, request)
            resolved.append(
                ResolvedIngredient(
                    food_id=match.food_id,
                    food_name=request.name,
                    quantity_grams=request.quantity_grams,
                    scaled=match.scaled,
                    per_100g=match.per_100g,
                    source=match.source,
                )
            )
            totals = totals + match.scaled
        return MealResolution(totals=totals, ingredients=resolved)

    async def _resolve_one(
        self, strategies: Sequence[ResolutionStrategy], request: IngredientRequest
    ) -> IngredientMatch:
        try:
            match = await first_match(strategies, request)
        except OutOfRangeError as exc:
            _logger.error(
                "Implausible nutrition data for %s: %s", request.name, exc.message
            )
            raise OutOfRangeError(exc.macros, ingredient=request.name) from exc
        except NotFoundError as exc:
            _logger.warning("No nutrition data for %s: %s", request.name, exc.message)
            raise NotFoundError(
                f"Please enter macros manually for {request.name}",
                ingredient=request.name,
            ) from exc
        _logger.debug(
            "Resolved %s (%sg) from %s",
            request.name,
            request.quantity_grams,
            match.source,
        )
        return match
