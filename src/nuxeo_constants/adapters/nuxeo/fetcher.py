"""Fetch every metadata collection from a Nuxeo server."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from nuxeo_constants.domain.ports.fetching import CollectionFetched, CollectionUnavailable
from nuxeo_constants.domain.types import Collection

from .client import NuxeoAPIError, NuxeoClient
from .translator import (
    translate_document_type,
    translate_facet,
    translate_operation,
    translate_schema,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from nuxeo_constants.adapters.http_resilience import ResilientClient
    from nuxeo_constants.config.nuxeo import NuxeoConfig
    from nuxeo_constants.domain.ports.fetching import FetchOutcome
    from nuxeo_constants.domain.types import RawRecord

    type CollectionLoader = Callable[[ResilientClient], Awaitable[tuple[RawRecord, ...]]]

log = getLogger(__name__)


@dataclass(slots=True)
class NuxeoMetadataFetcher:
    """Fetch all collections concurrently over one session.

    A failing collection is reported as :class:`CollectionUnavailable` without
    affecting the others; an unreachable server makes every collection unavailable.
    """

    client: NuxeoClient

    @classmethod
    def from_config(cls, config: NuxeoConfig) -> NuxeoMetadataFetcher:
        return cls(client=NuxeoClient(config=config))

    def __call__(self) -> dict[Collection, FetchOutcome]:
        return asyncio.run(self._fetch_all_async())

    def probe(self) -> bool:
        return asyncio.run(self._probe_async())

    async def _probe_async(self) -> bool:
        client = self.client
        async with client.session() as session:
            return await client.probe(session)

    async def _fetch_all_async(self) -> dict[Collection, FetchOutcome]:
        client = self.client
        async with client.session() as session:
            if not await client.probe(session):
                reason = f"Nuxeo server not available at {client.base_url}"
                return {
                    collection: CollectionUnavailable(collection=collection, reason=reason)
                    for collection in Collection
                }
            loaders = self._loaders(client)
            outcomes = await asyncio.gather(
                *(
                    self._fetch_collection(collection, loaders[collection], session)
                    for collection in Collection
                )
            )
        return {outcome.collection: outcome for outcome in outcomes}

    async def _fetch_collection(
        self,
        collection: Collection,
        loader: CollectionLoader,
        session: ResilientClient,
    ) -> FetchOutcome:
        try:
            records = await loader(session)
        except (httpx.HTTPError, NuxeoAPIError, ValidationError) as exc:
            log.warning("Could not fetch %s: %s", collection, exc)
            return CollectionUnavailable(collection=collection, reason=str(exc))
        log.info("Retrieved %s %s", len(records), collection)
        return CollectionFetched(collection=collection, records=records)

    @staticmethod
    def _loaders(client: NuxeoClient) -> dict[Collection, CollectionLoader]:
        async def operations(session: ResilientClient) -> tuple[RawRecord, ...]:
            registry = await client.operations(session)
            return tuple(translate_operation(operation) for operation in registry.operations)

        async def document_types(session: ResilientClient) -> tuple[RawRecord, ...]:
            registry = await client.document_types(session)
            return tuple(
                translate_document_type(name, document_type)
                for name, document_type in registry.doctypes.items()
            )

        async def schemas(session: ResilientClient) -> tuple[RawRecord, ...]:
            payload = await client.schemas(session)
            return tuple(translate_schema(schema) for schema in payload.root)

        async def facets(session: ResilientClient) -> tuple[RawRecord, ...]:
            payload = await client.facets(session)
            return tuple(translate_facet(facet) for facet in payload.root)

        return {
            Collection.OPERATIONS: operations,
            Collection.DOCUMENT_TYPES: document_types,
            Collection.SCHEMAS: schemas,
            Collection.FACETS: facets,
        }
