"""Product catalog domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Product:
    """A single catalog product."""

    id: int
    name: str
    description: str | None
    price: float
    category: str | None
    updated_at: datetime


@dataclass(frozen=True)
class ProductPage:
    """One page of products plus the totals needed to navigate."""

    items: list[Product]
    page: int
    per_page: int
    total: int

    @property
    def pages(self) -> int:
        if self.total <= 0:
            return 0
        return -(-self.total // self.per_page)

    @property
    def has_next(self) -> bool:
        return self.page < self.pages
