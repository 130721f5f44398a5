"""Nuxeo metadata API client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx

from nuxeo_constants.adapters.http_resilience import ResilientClient

from .schema import AutomationRegistry, DocumentTypeRegistry, FacetList, SchemaList

if TYPE_CHECKING:
    from collections.abc import Callable

    from nuxeo_constants.config.http_resilience import ResilienceConfig
    from nuxeo_constants.config.nuxeo import NuxeoConfig

log = getLogger(__name__)

OPERATIONS_PATH: Final[str] = "site/automation"
DOCUMENT_TYPES_PATH: Final[str] = "api/v1/config/types"
SCHEMAS_PATH: Final[str] = "api/v1/config/schemas"
FACETS_PATH: Final[str] = "api/v1/config/facets"


class NuxeoAPIError(RuntimeError):
    """Raised when the Nuxeo server returns an unexpected response."""


class NuxeoClient:
    """Low-level HTTP client for the Nuxeo metadata endpoints.

    Every call takes an open :class:`ResilientClient` so several requests can share
    one connection pool; :meth:`session` opens one with the configured settings.
    """

    def __init__(
        self,
        *,
        config: NuxeoConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def session(self) -> ResilientClient:
        return self._client_factory(self._resilience)

    async def probe(self, client: ResilientClient) -> bool:
        """Return whether the server answers at its base URL.

        Redirects count as reachable; the Nuxeo root usually redirects to the login page.
        """

        try:
            response = await client.get("", follow_redirects=False)
        except httpx.HTTPError as exc:
            log.warning("Nuxeo server at %s is unreachable: %s", self.base_url, exc)
            return False
        if response.status_code >= httpx.codes.BAD_REQUEST:
            log.warning(
                "Nuxeo server at %s answered HTTP %s", self.base_url, response.status_code
            )
            return False
        log.info("Connected to Nuxeo server at %s", self.base_url)
        return True

    async def operations(self, client: ResilientClient) -> AutomationRegistry:
        payload = await self._get_json(client, OPERATIONS_PATH)
        if not isinstance(payload, dict) or "operations" not in payload:
            raise NuxeoAPIError("Invalid response format for operations")
        return AutomationRegistry.model_validate(payload)

    async def document_types(self, client: ResilientClient) -> DocumentTypeRegistry:
        payload = await self._get_json(client, DOCUMENT_TYPES_PATH)
        if not isinstance(payload, dict) or "doctypes" not in payload:
            raise NuxeoAPIError("Invalid response format for document types")
        return DocumentTypeRegistry.model_validate(payload)

    async def schemas(self, client: ResilientClient) -> SchemaList:
        payload = await self._get_json(client, SCHEMAS_PATH)
        if not isinstance(payload, list):
            raise NuxeoAPIError("Invalid response format for schemas")
        return SchemaList.model_validate(payload)

    async def facets(self, client: ResilientClient) -> FacetList:
        payload = await self._get_json(client, FACETS_PATH)
        if not isinstance(payload, list):
            raise NuxeoAPIError("Invalid response format for facets")
        return FacetList.model_validate(payload)

    async def _get_json(self, client: ResilientClient, path: str) -> object:
        log.debug("GET %s", path)
        response = await client.get(path)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            raise NuxeoAPIError(f"Response from {path} is not JSON") from exc
