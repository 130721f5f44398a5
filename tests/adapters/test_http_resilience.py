from __future__ import annotations

import asyncio

import httpx
import pytest

from nuxeo_constants.adapters.http_resilience import ResilientClient, build_retry
from nuxeo_constants.config.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

FAST_RETRY = RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0)


def _config(handler: httpx.MockTransport, **overrides: object) -> ResilienceConfig:
    return ResilienceConfig(
        name="test",
        base_url="http://service.test/api",
        retry=FAST_RETRY,
        transport=handler,
        **overrides,  # type: ignore[arg-type]
    )


def _get(config: ResilienceConfig, url: str) -> httpx.Response:
    async def run() -> httpx.Response:
        async with ResilientClient(config) as client:
            return await client.get(url)

    return asyncio.run(run())


def test_relative_urls_resolve_against_base_url() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"ok": True})

    response = _get(_config(httpx.MockTransport(handler)), "v1/items")

    assert response.json() == {"ok": True}
    assert seen == ["http://service.test/api/v1/items"]


def test_server_errors_are_retried_until_success() -> None:
    statuses = iter([503, 502, 200])
    calls: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        status = next(statuses)
        calls.append(status)
        return httpx.Response(status)

    response = _get(_config(httpx.MockTransport(handler)), "flaky")

    assert response.status_code == 200
    assert calls == [503, 502, 200]


def test_client_errors_are_not_retried() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404)

    response = _get(_config(httpx.MockTransport(handler)), "missing")

    assert response.status_code == 404
    assert len(calls) == 1


def test_default_headers_and_basic_auth_are_sent() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200)

    config = _config(
        httpx.MockTransport(handler),
        default_headers={"User-Agent": "nuxeo-constants/test"},
        basic_auth=("user", "secret"),
    )
    _get(config, "")

    (request,) = captured
    assert request.headers["User-Agent"] == "nuxeo-constants/test"
    assert request.headers["Authorization"].startswith("Basic ")


def test_rate_limited_client_still_completes_requests() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200)

    config = _config(httpx.MockTransport(handler), ratelimit=RateLimit(max_calls=10, per_seconds=1))

    assert _get(config, "limited").status_code == 200


def test_build_retry_mirrors_policy() -> None:
    retry = build_retry(RetryPolicy(total=5))

    assert retry.total == 5
    assert retry.is_retryable_method("GET")
    assert not retry.is_retryable_method("POST")
    assert retry.is_retryable_status_code(503)


def test_unknown_cache_backend_is_rejected() -> None:
    config = _config(
        httpx.MockTransport(lambda _request: httpx.Response(200)),
        cache=CacheConfig(backend="redis"),  # type: ignore[arg-type]
    )

    with pytest.raises(ValueError, match="Unsupported cache backend"):
        ResilientClient(config)
