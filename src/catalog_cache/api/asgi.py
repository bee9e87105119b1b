"""ASGI entrypoint for the catalog cache API."""

from catalog_cache.api.app import create_app
from catalog_cache.containers import build_container

app = create_app(build_container())
