"""Ports for fetching repository metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from nuxeo_constants.domain.types import Collection, RawRecord


class FetchStatus(StrEnum):
    FETCHED = "fetched"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionFetched:
    """Complete snapshot of one collection; ``records`` may be empty."""

    collection: Collection
    records: tuple[RawRecord, ...] = ()
    status: Literal[FetchStatus.FETCHED] = FetchStatus.FETCHED


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionUnavailable:
    """The collection could not be fetched and is treated as absent."""

    collection: Collection
    reason: str
    status: Literal[FetchStatus.UNAVAILABLE] = FetchStatus.UNAVAILABLE


type FetchOutcome = CollectionFetched | CollectionUnavailable


@runtime_checkable
class MetadataFetcher(Protocol):
    """Callable port returning one outcome per collection."""

    def __call__(self) -> Mapping[Collection, FetchOutcome]: ...


__all__ = [
    "CollectionFetched",
    "CollectionUnavailable",
    "FetchOutcome",
    "FetchStatus",
    "MetadataFetcher",
]
