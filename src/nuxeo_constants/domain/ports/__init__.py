"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import (
    CollectionFetched,
    CollectionUnavailable,
    FetchOutcome,
    FetchStatus,
    MetadataFetcher,
)
from .persistence import ArtifactWriter, WriteOutcome

__all__ = [
    "ArtifactWriter",
    "CollectionFetched",
    "CollectionUnavailable",
    "FetchOutcome",
    "FetchStatus",
    "MetadataFetcher",
    "WriteOutcome",
]
