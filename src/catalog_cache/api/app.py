"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime

from fastapi import FastAPI, HTTPException, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from catalog_cache.api.admin import router as admin_router
from catalog_cache.api.http_caching import (
    CachePolicy,
    apply_cache_headers,
    compute_etag,
    is_not_modified,
)
from catalog_cache.app_logging import configure_logging
from catalog_cache.containers import AppContainer
from catalog_cache.domain.products import Product, ProductPage


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    policy = CachePolicy(max_age_seconds=container.settings.http_max_age_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/products")
    async def list_products(
        request: Request,
        page: int = Query(default=1, ge=1),
        per_page: int = Query(default=10, ge=1),
    ) -> Response:
        """Return one page of the catalog with HTTP caching headers."""
        state_container: AppContainer = request.app.state.container
        try:
            result = state_container.product_service.list_page(page, per_page)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        last_modified = max(
            (item.updated_at for item in result.items), default=None
        )
        return _cached_json(request, _page_payload(result), policy, last_modified)

    @app.get("/products/{product_id}")
    async def get_product(product_id: int, request: Request) -> Response:
        """Return a single product with HTTP caching headers."""
        state_container: AppContainer = request.app.state.container
        product = state_container.product_service.get_product(product_id)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
            )
        return _cached_json(
            request, _product_payload(product), policy, product.updated_at
        )

    return app


def _cached_json(
    request: Request,
    payload: dict[str, object],
    policy: CachePolicy,
    last_modified: datetime | None,
) -> Response:
    """Render JSON, answering 304 when the client copy is still current."""
    response: Response = JSONResponse(content=payload)
    etag = compute_etag(response.body)
    if is_not_modified(request.headers, etag, last_modified):
        response = Response(status_code=status.HTTP_304_NOT_MODIFIED)
    apply_cache_headers(response, policy, etag=etag, last_modified=last_modified)
    return response


def _product_payload(product: Product) -> dict[str, object]:
    return jsonable_encoder(asdict(product))


def _page_payload(result: ProductPage) -> dict[str, object]:
    return {
        "items": [_product_payload(item) for item in result.items],
        "page": result.page,
        "per_page": result.per_page,
        "total": result.total,
        "pages": result.pages,
        "has_next": result.has_next,
    }
