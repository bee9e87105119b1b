"""Tests for cache key and memoization helpers."""

import pytest

from catalog_cache.services.caching import build_cache_key, cached, get_or_set


def test_build_cache_key_sorts_params() -> None:
    first = build_cache_key("products", page=2, per_page=10)
    second = build_cache_key("products", per_page=10, page=2)

    assert first == "products:page=2:per_page=10"
    assert first == second


def test_build_cache_key_keeps_positional_order() -> None:
    assert build_cache_key("product", 42) == "product:42"
    assert build_cache_key("user", 7, "orders", page=1) == "user:7:orders:page=1"


def test_build_cache_key_requires_resource() -> None:
    with pytest.raises(ValueError):
        build_cache_key("")


def test_get_or_set_computes_once(cache) -> None:
    calls: list[int] = []

    def compute() -> int:
        calls.append(1)
        return 99

    assert get_or_set(cache, "answer", compute) == 99
    assert get_or_set(cache, "answer", compute) == 99
    assert len(calls) == 1


def test_get_or_set_caches_none(cache) -> None:
    calls: list[int] = []

    def compute() -> None:
        calls.append(1)

    get_or_set(cache, "nothing", compute)
    get_or_set(cache, "nothing", compute)

    assert len(calls) == 1


def test_get_or_set_recomputes_after_expiry(cache, clock) -> None:
    values = iter([1, 2])

    assert get_or_set(cache, "k", lambda: next(values), ttl_seconds=10) == 1
    clock.advance(11)
    assert get_or_set(cache, "k", lambda: next(values), ttl_seconds=10) == 2


def test_get_or_set_does_not_store_failures(cache) -> None:
    def boom() -> int:
        raise RuntimeError("data source down")

    with pytest.raises(RuntimeError):
        get_or_set(cache, "k", boom)

    assert cache.is_valid("k") is False


def test_cached_memoizes_recursive_function(cache) -> None:
    calls: list[int] = []

    @cached(cache, prefix="fib")
    def fibonacci(n: int) -> int:
        calls.append(n)
        if n < 2:
            return n
        return fibonacci(n - 1) + fibonacci(n - 2)

    assert fibonacci(30) == 832040
    assert len(calls) == 31
    assert fibonacci.cache_key(30) == "fib:30"

    fibonacci(30)
    assert len(calls) == 31


def test_cached_invalidate_forces_recompute(cache) -> None:
    calls: list[str] = []

    @cached(cache, prefix="greeting", ttl_seconds=60)
    def greet(name: str) -> str:
        calls.append(name)
        return f"hello {name}"

    greet("ada")
    assert greet.invalidate("ada") is True
    greet("ada")

    assert calls == ["ada", "ada"]


def test_build_cache_key_escapes_separators() -> None:
    assert build_cache_key("join", "x", "y") != build_cache_key("join", "x:y")
    assert build_cache_key("a", "x=1") != build_cache_key("a", x=1)
    assert build_cache_key("a", "x\\") != build_cache_key("a", "x", "")


def test_build_cache_key_accepts_resource_keyword() -> None:
    assert build_cache_key("lookup", resource="a") == "lookup:resource=a"


def test_cached_keeps_colliding_looking_calls_apart(cache) -> None:
    @cached(cache, prefix="join")
    def join(a: str, b: str = "") -> str:
        return f"{a}|{b}"

    assert join("x", "y") == "x|y"
    assert join("x:y") == "x:y|"


def test_cached_function_with_resource_parameter(cache) -> None:
    calls: list[str] = []

    @cached(cache, prefix="lookup")
    def lookup(resource: str) -> str:
        calls.append(resource)
        return resource.upper()

    assert lookup(resource="a") == "A"
    assert lookup(resource="a") == "A"
    assert calls == ["a"]
