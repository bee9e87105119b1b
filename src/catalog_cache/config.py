"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_cache.services.cache import EvictionPolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    cache_capacity: int = 256
    cache_eviction_policy: EvictionPolicy = EvictionPolicy.FIFO
    product_list_ttl_seconds: float = 60
    product_ttl_seconds: float = 300
    http_max_age_seconds: int = 60
    max_per_page: int = 100
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
