"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder

from catalog_cache.api.models import ProductUpdate

if TYPE_CHECKING:
    from catalog_cache.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/cache", dependencies=[Depends(require_admin)])
async def cache_stats(request: Request) -> dict[str, object]:
    """Return cache size and hit/miss counters."""
    container: AppContainer = request.app.state.container
    stats = container.cache.stats()
    return {**asdict(stats), "policy": stats.policy.value}


@router.delete("/cache", dependencies=[Depends(require_admin)])
async def clear_cache(request: Request) -> dict[str, str]:
    """Drop every cached entry."""
    container: AppContainer = request.app.state.container
    container.cache.clear()
    return {"status": "cleared"}


@router.delete("/cache/{key:path}", dependencies=[Depends(require_admin)])
async def delete_cache_key(key: str, request: Request) -> dict[str, object]:
    """Drop a single cache key."""
    container: AppContainer = request.app.state.container
    return {"key": key, "deleted": container.cache.delete(key)}


@router.patch("/products/{product_id}", dependencies=[Depends(require_admin)])
async def update_product(
    product_id: int, update: ProductUpdate, request: Request
) -> dict[str, object]:
    """Update a product and invalidate its cached copy."""
    container: AppContainer = request.app.state.container
    payload = update.model_dump(exclude_unset=True)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No fields to update",
        )
    product = container.product_service.update_product(product_id, payload)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return jsonable_encoder(asdict(product))
