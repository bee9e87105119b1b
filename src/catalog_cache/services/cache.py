"""Process-local expiring key-value cache."""

import logging
import math
import threading
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Generic, Protocol, TypeVar

V = TypeVar("V")

_logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str, default: object | None = None) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: float | None = None) -> None:
        """Store a cached value, optionally expiring after ttl_seconds."""

    def delete(self, key: str) -> bool:
        """Remove a cached value if present."""

    def is_valid(self, key: str) -> bool:
        """Return whether a key holds an unexpired value."""


class EvictionPolicy(StrEnum):
    """Which entry to drop when the cache is full."""

    FIFO = "fifo"
    LRU = "lru"


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A stored value with its insertion time and optional TTL."""

    value: V
    stored_at: datetime
    ttl_seconds: float | None = None

    def is_valid(self, now: datetime) -> bool:
        """Return True when the entry has no TTL or it has not elapsed."""
        if self.ttl_seconds is None:
            return True
        return (now - self.stored_at).total_seconds() < self.ttl_seconds


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counters for a cache."""

    size: int
    capacity: int
    hits: int
    misses: int
    evictions: int
    expirations: int
    policy: EvictionPolicy


def _utc_now() -> datetime:
    """Wall-clock UTC time; TTLs shift if the system clock is adjusted."""
    return datetime.now(tz=UTC)


class ExpiringCache(Cache, Generic[V]):
    """Bounded in-memory cache with lazy TTL expiry.

    Entries live in an ordered mapping whose head is the next eviction
    candidate. Under FIFO the order is insertion order (an overwrite counts
    as a new insertion); under LRU a hit also moves the entry to the tail.
    Expired entries are dropped only when read through ``get`` or
    ``is_valid``; there is no background sweep.

    A single lock guards every operation, so the check-then-remove in reads
    and the check-evict-insert in ``set`` are atomic across threads.
    """

    def __init__(
        self,
        capacity: int = 128,
        eviction: EvictionPolicy = EvictionPolicy.FIFO,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.eviction = EvictionPolicy(eviction)
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry[V]] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def get(self, key: str, default: V | None = None) -> V | None:
        """Return the value for key, or default on a miss or expiry."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._misses += 1
                return default
            self._hits += 1
            if self.eviction is EvictionPolicy.LRU:
                self._entries.move_to_end(key)
            return entry.value

    def set(self, key: str, value: V, ttl_seconds: float | None = None) -> None:
        """Insert or overwrite key, evicting one entry if the cache is full."""
        if ttl_seconds is not None and (math.isnan(ttl_seconds) or ttl_seconds < 0):
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.capacity:
                self._evict_one()
            self._entries[key] = CacheEntry(
                value=value, stored_at=self._clock(), ttl_seconds=ttl_seconds
            )

    def delete(self, key: str) -> bool:
        """Remove key if present. Absent keys are ignored."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def is_valid(self, key: str) -> bool:
        """Return True if key holds an unexpired entry, dropping it otherwise."""
        with self._lock:
            return self._live_entry(key) is not None

    def clear(self) -> None:
        """Drop every entry. Counters are kept."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        """Return a snapshot of size and hit/miss counters."""
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                capacity=self.capacity,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
                policy=self.eviction,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.is_valid(key)

    def _live_entry(self, key: str) -> CacheEntry[V] | None:
        # Caller holds the lock.
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_valid(self._clock()):
            del self._entries[key]
            self._expirations += 1
            _logger.debug("Cache expired key=%s", key)
            return None
        return entry

    def _evict_one(self) -> None:
        # Caller holds the lock.
        key, _ = self._entries.popitem(last=False)
        self._evictions += 1
        _logger.debug("Cache evicted key=%s policy=%s", key, self.eviction.value)
