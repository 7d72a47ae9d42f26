"""Meal entry and ingredient resolution endpoints."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Query, Request, status

from macro_tracker.api.models import (
    IngredientBatchIn,
    IngredientLineIn,
    IngredientMealIn,
)
from macro_tracker.domain.errors import ValidationError
from macro_tracker.domain.ingredients import IngredientLine

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer
    from macro_tracker.domain.meals import DailySummary, MealEntry

router = APIRouter(prefix="/api", tags=["meals"])


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def create_meal(request: Request) -> dict[str, object]:
    """Log a meal from raw macro totals."""
    container: AppContainer = request.app.state.container
    entry = container.meal_entry_service.log_meal(await _json_body(request))
    return _entry_payload(entry)


@router.post("/meals/ingredients", status_code=status.HTTP_201_CREATED)
async def create_ingredient_meal(
    body: IngredientMealIn, request: Request
) -> dict[str, object]:
    """Log a meal whose totals are resolved from ingredient lines."""
    container: AppContainer = request.app.state.container
    entry, resolution = await container.meal_entry_service.log_ingredient_meal(
        entry_date=body.date or date.today().isoformat(),
        meal=body.meal,
        notes=body.notes,
        lines=_lines(body.ingredients),
    )
    return {**_entry_payload(entry), **resolution.to_payload()}


@router.post("/ingredients/resolve")
async def resolve_ingredients(
    body: IngredientBatchIn, request: Request
) -> dict[str, object]:
    """Resolve ingredient lines without saving a meal."""
    container: AppContainer = request.app.state.container
    resolution = await container.meal_entry_service.preview_ingredients(
        _lines(body.ingredients)
    )
    return resolution.to_payload()


@router.get("/meals")
async def list_meals(
    request: Request, day: str | None = Query(default=None, alias="date")
) -> dict[str, object]:
    """Return meal entries for a day, defaulting to today."""
    container: AppContainer = request.app.state.container
    parsed_day = _parse_day(day)
    entries = container.meal_entry_service.list_entries(parsed_day)
    return {
        "date": parsed_day.isoformat(),
        "entries": [_entry_payload(entry) for entry in entries],
    }


@router.get("/meals/{entry_id}")
async def get_meal(entry_id: UUID, request: Request) -> dict[str, object]:
    """Return one meal entry with its ingredient breakdown."""
    container: AppContainer = request.app.state.container
    entry = container.meal_entry_service.get_entry(entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _entry_payload(entry)


@router.put("/meals/{entry_id}")
async def update_meal(entry_id: UUID, request: Request) -> dict[str, object]:
    """Replace a meal entry with raw macro totals."""
    container: AppContainer = request.app.state.container
    entry = container.meal_entry_service.update_meal(
        entry_id, await _json_body(request)
    )
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _entry_payload(entry)


@router.delete("/meals/{entry_id}")
async def delete_meal(entry_id: UUID, request: Request) -> dict[str, object]:
    """Delete a meal entry."""
    container: AppContainer = request.app.state.container
    if not container.meal_entry_service.delete_meal(entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"deleted": True}


@router.get("/summary")
async def daily_summary(
    request: Request, day: str | None = Query(default=None, alias="date")
) -> dict[str, object]:
    """Return day totals and totals per meal."""
    container: AppContainer = request.app.state.container
    summary = container.meal_entry_service.get_summary(_parse_day(day))
    return _summary_payload(summary)


async def _json_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        body = None
    return body if isinstance(body, dict) else {}


def _lines(items: list[IngredientLineIn]) -> list[IngredientLine]:
    return [
        IngredientLine(name=item.name, quantity_grams=item.quantity_grams)
        for item in items
    ]


def _parse_day(raw: str | None) -> date:
    if not raw or not raw.strip():
        return date.today()
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValidationError("Date must be in YYYY-MM-DD format.") from exc


def _entry_payload(entry: MealEntry) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": str(entry.id),
        "date": entry.entry_date.isoformat(),
        "meal": entry.meal,
        **entry.totals.as_dict(),
        "notes": entry.notes,
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
    }
    if entry.ingredients:
        payload["ingredients"] = [
            {
                "foodId": str(item.food_id) if item.food_id else None,
                "foodName": item.food_name,
                "quantityGrams": item.quantity_grams,
                **item.macros.as_dict(),
                "per100g": item.per_100g.as_dict(),
                "source": item.source,
            }
            for item in entry.ingredients
        ]
    return payload


def _summary_payload(summary: DailySummary) -> dict[str, object]:
    return {
        "date": summary.day.isoformat(),
        "totals": summary.totals.as_dict(),
        "byMeal": [
            {"meal": item.meal, "entries": item.entries, **item.totals.as_dict()}
            for item in summary.by_meal
        ],
    }
