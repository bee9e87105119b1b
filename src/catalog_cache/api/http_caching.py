"""HTTP response caching headers and conditional request checks."""

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from email.utils import format_datetime, parsedate_to_datetime

from fastapi import Response


@dataclass(frozen=True)
class CachePolicy:
    """How long and by whom a response may be cached."""

    max_age_seconds: int
    public: bool = True
    vary: tuple[str, ...] = ("Accept", "Accept-Encoding")

    def cache_control(self) -> str:
        if self.max_age_seconds <= 0:
            return "no-store"
        scope = "public" if self.public else "private"
        return f"{scope}, max-age={self.max_age_seconds}"


def compute_etag(body: bytes) -> str:
    """Return a strong ETag for a response body."""
    return f'"{hashlib.sha256(body).hexdigest()}"'


def http_date(value: datetime) -> str:
    """Format a datetime as an IMF-fixdate."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return format_datetime(value.astimezone(UTC), usegmt=True)


def apply_cache_headers(
    response: Response,
    policy: CachePolicy,
    *,
    etag: str,
    last_modified: datetime | None,
    now: datetime | None = None,
) -> None:
    """Set Cache-Control, ETag, Last-Modified, Expires and Vary."""
    current = now or datetime.now(tz=UTC)
    response.headers["Cache-Control"] = policy.cache_control()
    response.headers["ETag"] = etag
    if last_modified is not None:
        response.headers["Last-Modified"] = http_date(last_modified)
    expires = current + timedelta(seconds=max(policy.max_age_seconds, 0))
    response.headers["Expires"] = http_date(expires)
    if policy.vary:
        response.headers["Vary"] = ", ".join(policy.vary)


def is_not_modified(
    headers: Mapping[str, str], etag: str, last_modified: datetime | None
) -> bool:
    """Return True when a conditional GET can be answered with 304.

    If-None-Match wins over If-Modified-Since when both are sent.
    """
    if_none_match = headers.get("if-none-match")
    if if_none_match is not None:
        return _etag_matches(if_none_match, etag)

    if_modified_since = headers.get("if-modified-since")
    if if_modified_since is None or last_modified is None:
        return False
    try:
        since = parsedate_to_datetime(if_modified_since)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=UTC)
    if last_modified.tzinfo is None:
        last_modified = last_modified.replace(tzinfo=UTC)
    return last_modified.replace(microsecond=0) <= since


def _etag_matches(header_value: str, etag: str) -> bool:
    candidates = [token.strip() for token in header_value.split(",")]
    if "*" in candidates:
        return True
    target = _strip_weak(etag)
    return any(_strip_weak(candidate) == target for candidate in candidates)


def _strip_weak(value: str) -> str:
    return value[2:] if value.startswith("W/") else value
