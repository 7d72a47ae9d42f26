"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_tracker.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from macro_tracker.adapters.supabase_food_cache_repository import (
    SupabaseFoodCacheRepository,
)
from macro_tracker.adapters.supabase_meal_entry_repository import (
    SupabaseMealEntryRepository,
)
from macro_tracker.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from macro_tracker.config import Settings
from macro_tracker.services.curated import CuratedMatcher
from macro_tracker.services.meals import MealEntryService
from macro_tracker.services.pipeline import IngredientResolutionPipeline
from macro_tracker.services.products import ProductService
from macro_tracker.services.resolver import ExternalNutritionResolver


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    product_service: ProductService
    pipeline: IngredientResolutionPipeline
    meal_entry_service: MealEntryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_cache_repository = SupabaseFoodCacheRepository(supabase_client)
    product_repository = SupabaseProductRepository(supabase_client)
    meal_entry_repository = SupabaseMealEntryRepository(supabase_client)

    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
        timeout_seconds=resolved_settings.off_timeout_seconds,
    )
    matcher = CuratedMatcher()
    resolver = ExternalNutritionResolver(
        client=off_client,
        matcher=matcher,
        provider=resolved_settings.food_provider,
        page_size=resolved_settings.off_page_size,
        debug=resolved_settings.debug,
    )
    product_service = ProductService(product_repository)
    pipeline = IngredientResolutionPipeline(
        products=product_service,
        cache=food_cache_repository,
        resolver=resolver,
        matcher=matcher,
    )
    meal_entry_service = MealEntryService(
        pipeline=pipeline,
        repository=meal_entry_repository,
    )

    async def close_resources() -> None:
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        product_service=product_service,
        pipeline=pipeline,
        meal_entry_service=meal_entry_service,
        close_resources=close_resources,
    )
