"""Pydantic models for API request bodies."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IngredientLineIn(BaseModel):
    """One ingredient line as sent by the client."""

    name: str = ""
    quantity_grams: Any = Field(default=None, alias="quantityGrams")

    model_config = ConfigDict(populate_by_name=True)


class IngredientBatchIn(BaseModel):
    """Ingredient lines to resolve without saving."""

    ingredients: list[IngredientLineIn]


class IngredientMealIn(BaseModel):
    """A meal built from ingredient lines."""

    date: str | None = None
    meal: str | None = None
    notes: str | None = None
    ingredients: list[IngredientLineIn]


class CalculateIn(BaseModel):
    """Quantity for a product macro calculation."""

    quantity: float | str | None = None
