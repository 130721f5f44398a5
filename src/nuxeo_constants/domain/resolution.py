"""Assign unique constant names to the records of one collection.

Resolution runs in two passes over an already fetched collection:

- a census that counts how often each sanitized candidate name occurs, primary
  keys and alias keys alike
- an assignment pass in the given record order that claims one unique name per
  primary key and per alias key

The first record in order keeps the bare candidate; later duplicates receive
``_1``, ``_2``, ... and aliases ``_ALIAS_1``, ``_ALIAS_2``, ... Every renamed
entry is recorded as a :class:`CollisionRecord`.
"""

from __future__ import annotations

from collections import Counter
from logging import getLogger
from typing import TYPE_CHECKING

from .naming import DEGENERATE_NAME, sanitize
from .types import (
    Collection,
    CollisionReason,
    CollisionRecord,
    RawRecord,
    ResolvedEntry,
    ResolvedEntrySet,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

log = getLogger(__name__)

type Census = Counter[str]

ALIAS_SUFFIX = "_ALIAS_"


class NamingInvariantError(RuntimeError):
    """Raised when a resolved collection would contain duplicate constant names."""


def take_census(records: Iterable[RawRecord]) -> Census:
    census: Census = Counter()
    for record in records:
        census[sanitize(record.key)] += 1
        for alias_key in record.alias_keys:
            census[sanitize(alias_key)] += 1
    return census


def resolve(collection: Collection, records: Sequence[RawRecord]) -> ResolvedEntrySet:
    """Resolve ``records`` into uniquely named entries without reordering them."""

    census = take_census(records)
    claimed: set[str] = set()
    entries: list[ResolvedEntry] = []
    collisions: list[CollisionRecord] = []

    for record in records:
        entry = _assign_primary(collection, record, census=census, claimed=claimed)
        entries.append(entry)
        _note_collision(collection, entry, collisions, alias=False)

        for alias_key in record.alias_keys:
            alias_entry = _assign_alias(
                collection,
                record,
                alias_key,
                census=census,
                claimed=claimed,
            )
            entries.append(alias_entry)
            _note_collision(collection, alias_entry, collisions, alias=True)

    log.debug(
        "Resolved %s: records=%s, entries=%s, collisions=%s",
        collection,
        len(records),
        len(entries),
        len(collisions),
    )
    return ResolvedEntrySet(
        collection=collection,
        entries=tuple(entries),
        collisions=tuple(collisions),
        record_count=len(records),
        census=dict(census),
    )


def ensure_unique_names(entry_set: ResolvedEntrySet) -> None:
    """Raise :class:`NamingInvariantError` if any final name occurs twice."""

    counts = Counter(entry.final_name for entry in entry_set.entries)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        msg = f"Duplicate constant names in {entry_set.collection}: {', '.join(duplicates)}"
        raise NamingInvariantError(msg)


def _assign_primary(
    collection: Collection,
    record: RawRecord,
    *,
    census: Census,
    claimed: set[str],
) -> ResolvedEntry:
    candidate = sanitize(record.key)
    base = _base_name(collection, record.key, candidate)
    final_name = _first_unclaimed(base, "_", claimed)
    if census[candidate] > 1 and final_name == base:
        log.debug("%s %r keeps contested name %s", collection, record.key, base)
    claimed.add(final_name)
    return ResolvedEntry(
        final_name=final_name,
        source_key=record.key,
        record=record,
        original_candidate_name=candidate,
    )


def _assign_alias(
    collection: Collection,
    record: RawRecord,
    alias_key: str,
    *,
    census: Census,
    claimed: set[str],
) -> ResolvedEntry:
    candidate = sanitize(alias_key)
    base = _base_name(collection, alias_key, candidate)
    final_name = _first_unclaimed(base, ALIAS_SUFFIX, claimed)
    if census[candidate] > 1 and final_name == base:
        log.debug("%s alias %r keeps contested name %s", collection, alias_key, base)
    claimed.add(final_name)
    return ResolvedEntry(
        final_name=final_name,
        source_key=alias_key,
        record=record,
        original_candidate_name=candidate,
        is_alias=True,
        alias_of_key=record.key,
    )


def _base_name(collection: Collection, key: str, candidate: str) -> str:
    if candidate:
        return candidate
    log.warning(
        "Key %r in %s has no usable identifier characters; naming it %r",
        key,
        collection,
        DEGENERATE_NAME,
    )
    return DEGENERATE_NAME


def _first_unclaimed(base: str, separator: str, claimed: set[str]) -> str:
    if base not in claimed:
        return base
    suffix = 1
    while f"{base}{separator}{suffix}" in claimed:
        suffix += 1
    return f"{base}{separator}{suffix}"


def _note_collision(
    collection: Collection,
    entry: ResolvedEntry,
    collisions: list[CollisionRecord],
    *,
    alias: bool,
) -> None:
    if not entry.renamed:
        return
    if not entry.original_candidate_name and entry.final_name == DEGENERATE_NAME:
        reason = CollisionReason.DEGENERATE_NAME
    elif alias:
        reason = CollisionReason.DUPLICATE_ALIAS
    else:
        reason = CollisionReason.DUPLICATE_NAME
    log.info(
        "Renamed %s %r: %s -> %s",
        collection,
        entry.source_key,
        entry.original_candidate_name or "<empty>",
        entry.final_name,
    )
    collisions.append(
        CollisionRecord(
            collection=collection,
            source_key=entry.source_key,
            candidate_name=entry.original_candidate_name,
            resolved_name=entry.final_name,
            reason=reason,
        )
    )
