"""Request models for the catalog API."""

from pydantic import BaseModel, Field


class ProductUpdate(BaseModel):
    """Partial product update; only fields that are sent are written."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
