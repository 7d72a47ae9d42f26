"""Persistence port for cached per-100g food records."""

from typing import Protocol
from uuid import UUID

from macro_tracker.domain.nutrition import FoodRecord


class FoodCacheRepository(Protocol):
    """Key-value-like store of FoodRecords keyed by normalized name."""

    def get_by_normalized_name(self, normalized_name: str) -> FoodRecord | None:
        """Return the cached record for a normalized name, if present."""

    def insert(self, record: FoodRecord) -> UUID:
        """Insert or upsert a record by normalized name and return its id."""

    def update(self, food_id: UUID, record: FoodRecord) -> None:
        """Overwrite the values and source of an existing record."""
