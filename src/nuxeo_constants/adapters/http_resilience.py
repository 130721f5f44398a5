"""Shared async HTTP session for talking to a Nuxeo server.

Retries come from ``httpx-retries``, throttling from ``aiolimiter`` and response
caching from ``hishel``. Everything is driven by a :class:`ResilienceConfig`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes

    from nuxeo_constants.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

log = logging.getLogger(__name__)

_MEMORY_DATABASE = ":memory:"


class GetOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    follow_redirects: bool


class _ClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    auth: httpx.Auth
    transport: httpx.AsyncBaseTransport


class ResilientClient:
    """GET-only async session with retries, optional throttling and optional caching.

    Use it as an async context manager; the underlying connection pool is closed on exit.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = _build_limiter(config)
        options = _client_options(config)
        storage = _build_cache_storage(config.cache)
        if storage is None:
            self._client: httpx.AsyncClient = httpx.AsyncClient(**options)
        else:
            self._client = AsyncCacheClient(**options, storage=storage)
        log.debug(
            "Opened HTTP session %s (base_url=%s, retries=%d, cached=%s, throttled=%s)",
            config.name,
            config.base_url,
            config.retry.total,
            storage is not None,
            self._limiter is not None,
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, **options: Unpack[GetOptions]) -> httpx.Response:
        if self._limiter is not None:
            async with self._limiter:
                return await self._client.get(url, **options)
        return await self._client.get(url, **options)


def build_retry(policy: RetryPolicy) -> Retry:
    """Translate a :class:`RetryPolicy` into the ``httpx-retries`` settings object."""

    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
    )


def _build_limiter(config: ResilienceConfig) -> AsyncLimiter | None:
    if config.ratelimit is None:
        return None
    return AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)


def _client_options(config: ResilienceConfig) -> _ClientOptions:
    options: _ClientOptions = {
        "timeout": config.timeout_seconds,
        "transport": RetryTransport(transport=config.transport, retry=build_retry(config.retry)),
    }
    if config.base_url is not None:
        options["base_url"] = config.base_url
    if config.default_headers:
        options["headers"] = dict(config.default_headers)
    if config.basic_auth is not None:
        username, password = config.basic_auth
        options["auth"] = httpx.BasicAuth(username, password)
    return options


def _build_cache_storage(cache: CacheConfig | None) -> AsyncSqliteStorage | None:
    if cache is None:
        return None

    if cache.backend == "memory":
        database_path = _MEMORY_DATABASE
    elif cache.backend == "sqlite":
        if cache.sqlite_path is None:
            raise ValueError("SQLite cache backend requires sqlite_path")
        database_path = cache.sqlite_path
    else:
        raise ValueError(f"Unsupported cache backend: {cache.backend}")

    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=cache.default_ttl_seconds,
        refresh_ttl_on_access=cache.refresh_ttl_on_access,
    )
