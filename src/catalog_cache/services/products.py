"""Product catalog service with read-through caching."""

import logging
from dataclasses import dataclass
from typing import Protocol

from catalog_cache.domain.products import Product, ProductPage
from catalog_cache.services.cache import Cache
from catalog_cache.services.caching import build_cache_key

_logger = logging.getLogger(__name__)


class ProductRepository(Protocol):
    """Persistence interface for catalog products."""

    def list_products(self, offset: int, limit: int) -> list[Product]:
        """Return products ordered by id, starting at offset."""

    def count_products(self) -> int:
        """Return the total number of products."""

    def get_product(self, product_id: int) -> Product | None:
        """Return a product by id, if present."""

    def update_product(
        self, product_id: int, payload: dict[str, object]
    ) -> Product | None:
        """Update a product and return it, or None if it does not exist."""


@dataclass
class ProductService:
    """Catalog reads served from cache, falling back to the repository."""

    repository: ProductRepository
    cache: Cache
    list_ttl_seconds: float = 60
    product_ttl_seconds: float = 300
    max_per_page: int = 100
    debug: bool = False

    def list_page(self, page: int = 1, per_page: int = 10) -> ProductPage:
        """Return one page of products."""
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if not 1 <= per_page <= self.max_per_page:
            raise ValueError(
                f"per_page must be between 1 and {self.max_per_page}, got {per_page}"
            )
        cache_key = build_cache_key("products", page=page, per_page=per_page)
        cached = self.cache.get(cache_key)
        if isinstance(cached, ProductPage):
            self._log("hit", cache_key)
            return cached

        self._log("miss", cache_key)
        items = self.repository.list_products(
            offset=(page - 1) * per_page, limit=per_page
        )
        result = ProductPage(
            items=items,
            page=page,
            per_page=per_page,
            total=self.repository.count_products(),
        )
        self.cache.set(cache_key, result, ttl_seconds=self.list_ttl_seconds)
        return result

    def get_product(self, product_id: int) -> Product | None:
        """Return a product by id. Unknown ids are not cached."""
        cache_key = product_cache_key(product_id)
        cached = self.cache.get(cache_key)
        if isinstance(cached, Product):
            self._log("hit", cache_key)
            return cached

        self._log("miss", cache_key)
        product = self.repository.get_product(product_id)
        if product is not None:
            self.cache.set(cache_key, product, ttl_seconds=self.product_ttl_seconds)
        return product

    def update_product(
        self, product_id: int, payload: dict[str, object]
    ) -> Product | None:
        """Write a product change through and drop its cached copy.

        Cached list pages keep serving the old row until their TTL runs out.
        """
        product = self.repository.update_product(product_id, payload)
        self.cache.delete(product_cache_key(product_id))
        return product

    def _log(self, outcome: str, cache_key: str) -> None:
        if self.debug:
            _logger.info("Product cache %s: key=%s", outcome, cache_key)


def product_cache_key(product_id: int) -> str:
    """Return the cache key for a single product."""
    return build_cache_key("product", product_id)
