"""Supabase-backed product repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from catalog_cache.domain.products import Product
from catalog_cache.services.products import ProductRepository

_COLUMNS = "id, name, description, price, category, updated_at"


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Supabase implementation for catalog queries."""

    client: Client
    table_name: str = "products"

    def list_products(self, offset: int, limit: int) -> list[Product]:
        """Return a page of products ordered by id."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .order("id", desc=False)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def count_products(self) -> int:
        """Return the total product count."""
        response = (
            self.client.table(self.table_name)
            .select("id", count="exact")
            .limit(1)
            .execute()
        )
        return response.count or 0

    def get_product(self, product_id: int) -> Product | None:
        """Return a product by id, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def update_product(
        self, product_id: int, payload: dict[str, object]
    ) -> Product | None:
        """Update a product row and return the stored version."""
        changes = {
            **payload,
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        response = (
            self.client.table(self.table_name)
            .update(changes)
            .eq("id", product_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> Product:
    updated_at_raw = row.get("updated_at")
    updated_at = (
        datetime.fromisoformat(updated_at_raw)
        if isinstance(updated_at_raw, str) and updated_at_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=UTC)
    return Product(
        id=int(row["id"]),
        name=str(row.get("name") or ""),
        description=row.get("description"),
        price=float(row.get("price") or 0.0),
        category=row.get("category"),
        updated_at=updated_at,
    )
