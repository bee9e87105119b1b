"""Cache key construction and get-or-compute helpers."""

import functools
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from catalog_cache.services.cache import Cache

P = ParamSpec("P")
R = TypeVar("R")

_MISSING = object()


def build_cache_key(resource: str, /, *parts: object, **params: object) -> str:
    """Build a deterministic key from a resource name and its parameters.

    Positional parts keep their order; keyword params are sorted by name so
    ``build_cache_key("products", page=2, per_page=10)`` and the same call
    with the keywords swapped both give ``"products:page=2:per_page=10"``.

    Separators inside parts and values are backslash-escaped, so
    ``("x", "y")`` and ``("x:y",)`` map to different keys.
    """
    if not resource:
        raise ValueError("resource must be a non-empty string")
    segments = [resource]
    segments.extend(_escape(part) for part in parts)
    segments.extend(
        f"{_escape(name)}={_escape(params[name])}" for name in sorted(params)
    )
    return ":".join(segments)


def _escape(value: object) -> str:
    return (
        str(value).replace("\\", "\\\\").replace(":", "\\:").replace("=", "\\=")
    )


def get_or_set(
    cache: Cache,
    key: str,
    compute: Callable[[], R],
    ttl_seconds: float | None = None,
) -> R:
    """Return the cached value for key, computing and storing it on a miss."""
    cached = cache.get(key, _MISSING)
    if cached is not _MISSING:
        return cached  # type: ignore[return-value]
    value = compute()
    cache.set(key, value, ttl_seconds=ttl_seconds)
    return value


def cached(
    cache: Cache, *, prefix: str, ttl_seconds: float | None = None
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Memoize a function through a shared cache.

    Arguments are folded into the key with ``build_cache_key``, so they must
    have stable string representations.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        def cache_key(*args: P.args, **kwargs: P.kwargs) -> str:
            return build_cache_key(prefix, *args, **kwargs)

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            return get_or_set(
                cache,
                cache_key(*args, **kwargs),
                lambda: func(*args, **kwargs),
                ttl_seconds=ttl_seconds,
            )

        def invalidate(*args: P.args, **kwargs: P.kwargs) -> bool:
            return cache.delete(cache_key(*args, **kwargs))

        wrapper.cache_key = cache_key  # type: ignore[attr-defined]
        wrapper.invalidate = invalidate  # type: ignore[attr-defined]
        return wrapper

    return decorator
