"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from catalog_cache.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from catalog_cache.config import Settings
from catalog_cache.services.cache import ExpiringCache
from catalog_cache.services.products import ProductService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cache: ExpiringCache
    product_service: ProductService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    cache = ExpiringCache(
        capacity=resolved_settings.cache_capacity,
        eviction=resolved_settings.cache_eviction_policy,
    )
    product_service = ProductService(
        repository=SupabaseProductRepository(supabase_client),
        cache=cache,
        list_ttl_seconds=resolved_settings.product_list_ttl_seconds,
        product_ttl_seconds=resolved_settings.product_ttl_seconds,
        max_per_page=resolved_settings.max_per_page,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        cache.clear()

    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        product_service=product_service,
        close_resources=close_resources,
    )
