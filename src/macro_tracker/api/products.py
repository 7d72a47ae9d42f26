"""Endpoints for user-defined products."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING, Any
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from macro_tracker.api.models import CalculateIn

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer
    from macro_tracker.domain.products import UserProduct

router = APIRouter(prefix="/api/my-products", tags=["my-products"])


@router.get("")
async def list_products(
    request: Request, search: str | None = None, favorite: bool = False
) -> dict[str, object]:
    """Return products, optionally filtered by name or favorites."""
    container: AppContainer = request.app.state.container
    products = container.product_service.list_products(search, favorite)
    return {"products": [_product_payload(product) for product in products]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(request: Request) -> dict[str, object]:
    """Create a product."""
    container: AppContainer = request.app.state.container
    product = container.product_service.create_product(await _json_body(request))
    return _product_payload(product)


@router.get("/{product_id}")
async def get_product(product_id: UUID, request: Request) -> dict[str, object]:
    """Return a product by id."""
    container: AppContainer = request.app.state.container
    return _product_payload(_require(container.product_service.get_product(product_id)))


@router.put("/{product_id}")
async def update_product(product_id: UUID, request: Request) -> dict[str, object]:
    """Replace a product's fields."""
    container: AppContainer = request.app.state.container
    product = container.product_service.update_product(
        product_id, await _json_body(request)
    )
    return _product_payload(_require(product))


@router.delete("/{product_id}")
async def delete_product(product_id: UUID, request: Request) -> dict[str, object]:
    """Delete a product."""
    container: AppContainer = request.app.state.container
    if not container.product_service.delete_product(product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"deleted": True}


@router.post("/{product_id}/calculate")
async def calculate(
    product_id: UUID, body: CalculateIn, request: Request
) -> dict[str, object]:
    """Scale a product's macros to a quantity in serving units."""
    container: AppContainer = request.app.state.container
    macros = container.product_service.calculate(product_id, body.quantity)
    if macros is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"quantity": body.quantity, "macros": macros.as_dict()}


async def _json_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        body = None
    return body if isinstance(body, dict) else {}


def _require(product: UserProduct | None) -> UserProduct:
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return product


def _product_payload(product: UserProduct) -> dict[str, object]:
    payload = asdict(product)
    payload["id"] = str(product.id)
    payload["created_at"] = (
        product.created_at.isoformat() if product.created_at else None
    )
    return payload
