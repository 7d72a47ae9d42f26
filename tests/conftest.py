"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from macro_tracker.adapters.openfoodfacts_client import FoodDatabaseClient
from macro_tracker.config import Settings
from macro_tracker.containers import AppContainer
from macro_tracker.domain.ingredients import ResolvedIngredient
from macro_tracker.domain.meals import MealEntry, MealIngredientRecord
from macro_tracker.domain.nutrition import FoodRecord, MacroProfile
from macro_tracker.domain.products import UserProduct
from macro_tracker.services.curated import CuratedMatcher
from macro_tracker.services.food_cache import FoodCacheRepository
from macro_tracker.services.meals import MealEntryRepository, MealEntryService
from macro_tracker.services.normalize import normalize_name
from macro_tracker.services.pipeline import IngredientResolutionPipeline
from macro_tracker.services.products import ProductRepository, ProductService
from macro_tracker.services.resolver import ExternalNutritionResolver


def off_product(  # noqa: PLR0913
    name: str,
    *,
    calories: float | None = 100,
    protein: float | None = 10,
    carbs: float | None = 10,
    fat: float | None = 1,
    generic_name: str = "",
    categories: list[str] | None = None,
    code: str = "000",
) -> dict[str, object]:
    """Build an Open Food Facts search hit with per-100g nutriments."""
    nutriments: dict[str, object] = {}
    if calories is not None:
        nutriments["energy-kcal_100g"] = calories
    if protein is not None:
        nutriments["proteins_100g"] = protein
    if carbs is not None:
        nutriments["carbohydrates_100g"] = carbs
    if fat is not None:
        nutriments["fat_100g"] = fat
    return {
        "code": code,
        "product_name": name,
        "generic_name": generic_name,
        "categories_tags": categories or [],
        "nutriments": nutriments,
    }


@dataclass
class FakeFoodDatabaseClient(FoodDatabaseClient):
    """Fake food database returning canned products per search term."""

    products: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    searches: list[str] = field(default_factory=list)

    async def search(self, term: str, page_size: int = 10) -> list[dict[str, object]]:
        self.searches.append(term)
        return self.products.get(term, [])[:page_size]


@dataclass
class InMemoryFoodCacheRepository(FoodCacheRepository):
    """In-memory food cache for tests."""

    records: dict[str, FoodRecord] = field(default_factory=dict)
    updates: list[UUID] = field(default_factory=list)

    def get_by_normalized_name(self, normalized_name: str) -> FoodRecord | None:
        return self.records.get(normalized_name)

    def insert(self, record: FoodRecord) -> UUID:
        existing = self.records.get(record.normalized_name)
        food_id = existing.id if existing and existing.id else uuid4()
        self.records[record.normalized_name] = FoodRecord(
            normalized_name=record.normalized_name,
            display_name=record.display_name,
            per_100g=record.per_100g,
            source=record.source,
            id=food_id,
        )
        return food_id

    def update(self, food_id: UUID, record: FoodRecord) -> None:
        for key, current in self.records.items():
            if current.id == food_id:
                self.records[key] = FoodRecord(
                    normalized_name=current.normalized_name,
                    display_name=current.display_name,
                    per_100g=record.per_100g,
                    source=record.source,
                    id=food_id,
                )
                self.updates.append(food_id)
                return
        raise KeyError(food_id)


@dataclass
class InMemoryProductRepository(ProductRepository):
    """In-memory product repository for tests."""

    products: dict[UUID, UserProduct] = field(default_factory=dict)

    def create_product(self, payload: dict[str, object]) -> UserProduct:
        product = _product_from_payload(uuid4(), payload)
        self.products[product.id] = product
        return product

    def update_product(
        self, product_id: UUID, payload: dict[str, object]
    ) -> UserProduct | None:
        if product_id not in self.products:
            return None
        product = _product_from_payload(product_id, payload)
        self.products[product_id] = product
        return product

    def get_product(self, product_id: UUID) -> UserProduct | None:
        return self.products.get(product_id)

    def delete_product(self, product_id: UUID) -> bool:
        return self.products.pop(product_id, None) is not None

    def list_products(
        self, search: str | None, favorites_only: bool
    ) -> list[UserProduct]:
        results = list(self.products.values())
        if search:
            results = [
                product
                for product in results
                if search.lower() in product.product_name.lower()
            ]
        if favorites_only:
            results = [product for product in results if product.is_favorite]
        return results

    def find_by_name(self, name: str) -> UserProduct | None:
        for product in self.products.values():
            if product.product_name == name:
                return product
        normalized = normalize_name(name)
        for product in self.products.values():
            if product.product_name.lower() == normalized:
                return product
        return None


def _product_from_payload(product_id: UUID, payload: dict[str, object]) -> UserProduct:
    return UserProduct(
        id=product_id,
        product_name=str(payload["product_name"]),
        brand=payload.get("brand"),
        serving_size=float(payload["serving_size"]),
        serving_unit=str(payload.get("serving_unit") or "g"),
        calories=float(payload["calories"]),
        protein=float(payload["protein"]),
        carbs=float(payload["carbs"]),
        fat=float(payload["fat"]),
        fiber=payload.get("fiber"),
        sugar=payload.get("sugar"),
        notes=payload.get("notes"),
        is_favorite=bool(payload.get("is_favorite", False)),
        created_at=datetime.now(tz=UTC),
    )


@dataclass
class InMemoryMealEntryRepository(MealEntryRepository):
    """In-memory meal entry repository for tests."""

    entries: dict[UUID, MealEntry] = field(default_factory=dict)
    ingredients: dict[UUID, list[MealIngredientRecord]] = field(default_factory=dict)
    fail_ingredient_writes: bool = False

    def create_entry(
        self, entry_date: date, meal: str, totals: MacroProfile, notes: str
    ) -> MealEntry:
        entry = MealEntry(
            id=uuid4(),
            entry_date=entry_date,
            meal=meal,
            totals=totals,
            notes=notes,
            created_at=datetime.now(tz=UTC),
        )
        self.entries[entry.id] = entry
        return entry

    def create_ingredients(
        self, meal_entry_id: UUID, ingredients: list[ResolvedIngredient]
    ) -> None:
        if self.fail_ingredient_writes:
            raise RuntimeError("Failed to create meal ingredients")
        self.ingredients[meal_entry_id] = [
            MealIngredientRecord(
                id=uuid4(),
                meal_entry_id=meal_entry_id,
                food_id=item.food_id,
                food_name=item.food_name,
                quantity_grams=item.quantity_grams,
                macros=item.scaled,
                per_100g=item.per_100g,
                source=item.source,
            )
            for item in ingredients
        ]

    def get_entry(self, entry_id: UUID) -> MealEntry | None:
        entry = self.entries.get(entry_id)
        if entry is None:
            return None
        return MealEntry(
            id=entry.id,
            entry_date=entry.entry_date,
            meal=entry.meal,
            totals=entry.totals,
            notes=entry.notes,
            created_at=entry.created_at,
            ingredients=self.ingredients.get(entry_id, []),
        )

    def list_entries(self, entry_date: date) -> list[MealEntry]:
        return [
            entry for entry in self.entries.values() if entry.entry_date == entry_date
        ]

    def update_entry(
        self,
        entry_id: UUID,
        entry_date: date,
        meal: str,
        totals: MacroProfile,
        notes: str,
    ) -> MealEntry | None:
        current = self.entries.get(entry_id)
        if current is None:
            return None
        updated = MealEntry(
            id=entry_id,
            entry_date=entry_date,
            meal=meal,
            totals=totals,
            notes=notes,
            created_at=current.created_at,
        )
        self.entries[entry_id] = updated
        return updated

    def delete_ingredients(self, meal_entry_id: UUID) -> None:
        self.ingredients.pop(meal_entry_id, None)

    def delete_entry(self, entry_id: UUID) -> bool:
        self.ingredients.pop(entry_id, None)
        return self.entries.pop(entry_id, None) is not None


@dataclass
class PipelineFixture:
    """Pipeline plus the fakes behind it."""

    pipeline: IngredientResolutionPipeline
    client: FakeFoodDatabaseClient
    cache: InMemoryFoodCacheRepository
    products: InMemoryProductRepository


def build_pipeline(client: FakeFoodDatabaseClient | None = None) -> PipelineFixture:
    """Wire a pipeline over in-memory fakes."""
    fake_client = client or FakeFoodDatabaseClient()
    cache = InMemoryFoodCacheRepository()
    products = InMemoryProductRepository()
    matcher = CuratedMatcher()
    pipeline = IngredientResolutionPipeline(
        products=ProductService(products),
        cache=cache,
        resolver=ExternalNutritionResolver(client=fake_client, matcher=matcher),
        matcher=matcher,
    )
    return PipelineFixture(
        pipeline=pipeline, client=fake_client, cache=cache, products=products
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def food_client() -> FakeFoodDatabaseClient:
    return FakeFoodDatabaseClient(
        products={
            "kirkland salsa": [
                off_product("Kirkland Salsa", calories=36, protein=1.5, carbs=7, fat=0.2)
            ]
        }
    )


@pytest.fixture
def pipeline_fixture(food_client: FakeFoodDatabaseClient) -> PipelineFixture:
    return build_pipeline(food_client)


@pytest.fixture
def container(settings: Settings, pipeline_fixture: PipelineFixture) -> AppContainer:
    pipeline = pipeline_fixture.pipeline
    meal_entry_service = MealEntryService(
        pipeline=pipeline,
        repository=InMemoryMealEntryRepository(),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        product_service=pipeline.products,
        pipeline=pipeline,
        meal_entry_service=meal_entry_service,
        close_resources=close_resources,
    )
