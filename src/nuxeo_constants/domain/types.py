"""Metadata records and resolution results shared across the generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003
from enum import StrEnum


class Collection(StrEnum):
    """Independent metadata namespaces exposed by the repository server.

    Declaration order is the order tables appear in the rendered artifact.
    """

    OPERATIONS = "operations"
    DOCUMENT_TYPES = "document_types"
    SCHEMAS = "schemas"
    FACETS = "facets"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[Collection, str] = {
    Collection.OPERATIONS: "Operations",
    Collection.DOCUMENT_TYPES: "Document types",
    Collection.SCHEMAS: "Schemas",
    Collection.FACETS: "Facets",
}


@dataclass(frozen=True, slots=True, kw_only=True)
class RawRecord:
    """Immutable snapshot of one metadata record as fetched from the server."""

    key: str
    label: str | None = None
    description: str | None = None
    category: str | None = None
    prefix: str | None = None
    parent: str | None = None
    facets: tuple[str, ...] = ()
    schemas: tuple[str, ...] = ()
    alias_keys: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedEntry:
    """A record (or one of its aliases) bound to a unique constant name."""

    final_name: str
    source_key: str
    record: RawRecord
    original_candidate_name: str
    is_alias: bool = False
    alias_of_key: str | None = None

    @property
    def renamed(self) -> bool:
        return self.final_name != self.original_candidate_name


class CollisionReason(StrEnum):
    """Why a constant name had to deviate from its sanitized candidate."""

    DUPLICATE_NAME = "duplicate_name"
    DUPLICATE_ALIAS = "duplicate_alias"
    DEGENERATE_NAME = "degenerate_name"


@dataclass(frozen=True, slots=True, kw_only=True)
class CollisionRecord:
    collection: Collection
    source_key: str
    candidate_name: str
    resolved_name: str
    reason: CollisionReason


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedEntrySet:
    """All entries of one collection, in assignment order."""

    collection: Collection
    entries: tuple[ResolvedEntry, ...] = ()
    collisions: tuple[CollisionRecord, ...] = ()
    record_count: int = 0
    census: dict[str, int] = field(default_factory=dict[str, int])

    @property
    def aliases(self) -> tuple[ResolvedEntry, ...]:
        return tuple(entry for entry in self.entries if entry.is_alias)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True, kw_only=True)
class RenderedArtifact:
    """Rendered module text; reproducible apart from the generation timestamp line."""

    text: str
    generated_at: datetime


__all__ = [
    "Collection",
    "CollisionReason",
    "CollisionRecord",
    "RawRecord",
    "RenderedArtifact",
    "ResolvedEntry",
    "ResolvedEntrySet",
]
