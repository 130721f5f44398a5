"""Settings for the shared HTTP session: retries, throttling and response caching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

_TRANSIENT_ERRORS: tuple[type[httpx.HTTPError], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """How often a metadata GET is retried before the collection counts as unavailable."""

    total: int = 3
    backoff_factor: float = 1.0
    backoff_jitter: float = 1.0
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = frozenset({"GET", "HEAD"})
    # Nuxeo answers 503 while it is still deploying bundles
    status_forcelist: frozenset[int] = frozenset({429, 500, 502, 503, 504})
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = _TRANSIENT_ERRORS


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float

    @classmethod
    def per_second(cls, rate: float) -> RateLimit:
        """One call every ``1 / rate`` seconds."""

        return cls(max_calls=1, per_seconds=1.0 / rate)


@dataclass(slots=True, frozen=True)
class CacheConfig:
    backend: Literal["sqlite", "memory"] = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Everything :class:`~nuxeo_constants.adapters.http_resilience.ResilientClient` needs.

    ``transport`` replaces the network layer; tests pass an ``httpx.MockTransport``.
    A ``cache`` of ``None`` disables response caching.
    """

    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None
    basic_auth: tuple[str, str] | None = None
    transport: httpx.AsyncBaseTransport | None = None
