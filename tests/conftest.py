"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

import pytest

from catalog_cache.config import Settings
from catalog_cache.containers import AppContainer
from catalog_cache.domain.products import Product
from catalog_cache.services.cache import ExpiringCache
from catalog_cache.services.products import ProductRepository, ProductService


@dataclass
class FakeClock:
    """Manually advanced clock for expiry tests."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@dataclass
class InMemoryProductRepository(ProductRepository):
    """In-memory product repository that counts data-source calls."""

    products: dict[int, Product] = field(default_factory=dict)
    list_calls: int = 0
    count_calls: int = 0
    get_calls: int = 0

    def list_products(self, offset: int, limit: int) -> list[Product]:
        self.list_calls += 1
        ordered = [self.products[key] for key in sorted(self.products)]
        return ordered[offset : offset + limit]

    def count_products(self) -> int:
        self.count_calls += 1
        return len(self.products)

    def get_product(self, product_id: int) -> Product | None:
        self.get_calls += 1
        return self.products.get(product_id)

    def update_product(
        self, product_id: int, payload: dict[str, object]
    ) -> Product | None:
        existing = self.products.get(product_id)
        if existing is None:
            return None
        updated = replace(existing, **payload)
        self.products[product_id] = updated
        return updated


def make_product(product_id: int, **overrides: object) -> Product:
    values: dict[str, object] = {
        "id": product_id,
        "name": f"Product {product_id}",
        "description": None,
        "price": 10.0 + product_id,
        "category": "general",
        "updated_at": datetime(2024, 1, 1, tzinfo=UTC) + timedelta(days=product_id),
    }
    values.update(overrides)
    return Product(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service.key",
        admin_token="admin-token",
        http_max_age_seconds=60,
        max_per_page=50,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def product_repository() -> InMemoryProductRepository:
    return InMemoryProductRepository(
        products={product_id: make_product(product_id) for product_id in range(1, 26)}
    )


@pytest.fixture
def cache(clock: FakeClock) -> ExpiringCache:
    return ExpiringCache(capacity=64, clock=clock)


@pytest.fixture
def container(
    settings: Settings,
    product_repository: InMemoryProductRepository,
    cache: ExpiringCache,
) -> AppContainer:
    product_service = ProductService(
        repository=product_repository,
        cache=cache,
        list_ttl_seconds=settings.product_list_ttl_seconds,
        product_ttl_seconds=settings.product_ttl_seconds,
        max_per_page=settings.max_per_page,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        cache=cache,
        product_service=product_service,
        close_resources=close_resources,
    )
