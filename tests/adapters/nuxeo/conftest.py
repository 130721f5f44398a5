"""Shared fixtures for Nuxeo adapter tests."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx
import pytest

from nuxeo_constants.adapters.nuxeo import NuxeoClient
from nuxeo_constants.config.http_resilience import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from nuxeo_constants.config.nuxeo import NuxeoConfig

    type Route = Callable[[httpx.Request], httpx.Response]


def json_route(payload: object, status_code: int = 200) -> Route:
    def route(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return route


def status_route(status_code: int, **kwargs: object) -> Route:
    def route(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **kwargs)  # type: ignore[arg-type]

    return route


@dataclass
class FakeNuxeoServer:
    """Serve metadata endpoints below ``/nuxeo`` from in-memory routes."""

    routes: dict[str, Route]
    requests: list[httpx.Request] = field(default_factory=list[httpx.Request])

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"status": 404, "message": "Not found"})
        return route(request)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def nuxeo_server(nuxeo_payloads: dict[str, object]) -> FakeNuxeoServer:
    return FakeNuxeoServer(
        routes={
            "/nuxeo/": status_route(302, headers={"Location": "http://nuxeo.test/nuxeo/login.jsp"}),
            "/nuxeo/site/automation": json_route(nuxeo_payloads["operations"]),
            "/nuxeo/api/v1/config/types": json_route(nuxeo_payloads["doctypes"]),
            "/nuxeo/api/v1/config/schemas": json_route(nuxeo_payloads["schemas"]),
            "/nuxeo/api/v1/config/facets": json_route(nuxeo_payloads["facets"]),
        }
    )


@pytest.fixture
def server_config(nuxeo_config: NuxeoConfig, nuxeo_server: FakeNuxeoServer) -> NuxeoConfig:
    resilience = dataclasses.replace(
        nuxeo_config.resilience,
        retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
        transport=httpx.MockTransport(nuxeo_server.handle),
    )
    return dataclasses.replace(nuxeo_config, resilience=resilience)


@pytest.fixture
def nuxeo_client(server_config: NuxeoConfig) -> NuxeoClient:
    return NuxeoClient(config=server_config)
