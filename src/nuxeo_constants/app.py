"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from nuxeo_constants.adapters.filesystem import FileArtifactWriter
from nuxeo_constants.adapters.nuxeo import NuxeoMetadataFetcher
from nuxeo_constants.config import get_app_config
from nuxeo_constants.domain.ports.fetching import CollectionFetched
from nuxeo_constants.domain.ports.persistence import WriteOutcome
from nuxeo_constants.domain.rendering import render, reproducible_body
from nuxeo_constants.domain.resolution import ensure_unique_names, resolve
from nuxeo_constants.domain.types import Collection, RawRecord, ResolvedEntrySet

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from nuxeo_constants.config import AppConfig
    from nuxeo_constants.domain.ports.fetching import FetchOutcome, MetadataFetcher
    from nuxeo_constants.domain.ports.persistence import ArtifactWriter
    from nuxeo_constants.domain.types import RenderedArtifact

NowProvider = Callable[[], datetime]


log = getLogger(__name__)


class GenerationStatus(StrEnum):
    WRITTEN = "written"
    UNCHANGED = "unchanged"
    UP_TO_DATE = "up_to_date"
    OUTDATED = "outdated"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True, kw_only=True)
class GenerationResult:
    status: GenerationStatus
    entry_sets: Mapping[Collection, ResolvedEntrySet] = field(
        default_factory=dict[Collection, ResolvedEntrySet]
    )
    unavailable: tuple[Collection, ...] = ()
    artifact: RenderedArtifact | None = None
    reason: str | None = None

    @property
    def constant_count(self) -> int:
        return sum(len(entry_set) for entry_set in self.entry_sets.values())

    @property
    def collision_count(self) -> int:
        return sum(len(entry_set.collisions) for entry_set in self.entry_sets.values())


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


def generate_constants(
    *,
    config: AppConfig | None = None,
    fetcher: MetadataFetcher | None = None,
    writer: ArtifactWriter | None = None,
    now: NowProvider | None = None,
    check: bool = False,
) -> GenerationResult:
    """Fetch, resolve, render and persist the constants module.

    The previous artifact is left untouched whenever regeneration is skipped, and in
    ``check`` mode nothing is written at all.
    """

    effective_config = config or get_app_config()
    effective_fetcher = fetcher or NuxeoMetadataFetcher.from_config(effective_config.nuxeo)
    effective_writer = writer or FileArtifactWriter.from_config(effective_config.output)
    now_provider = now or _utcnow
    generation = effective_config.generation
    log.info(
        "Starting constants generation: profile=%s, server=%s, output=%s",
        effective_config.profile,
        effective_config.nuxeo.base_url,
        effective_config.output.path,
    )

    records_by_collection, unavailable = _split_outcomes(effective_fetcher())

    if not records_by_collection:
        _log_fallback(effective_config)
        return GenerationResult(
            status=GenerationStatus.SKIPPED,
            unavailable=unavailable,
            reason="No metadata collection could be fetched",
        )
    if unavailable and generation.fail_on_warnings:
        names = ", ".join(unavailable)
        log.warning("Keeping existing constants: unavailable collections (%s)", names)
        return GenerationResult(
            status=GenerationStatus.SKIPPED,
            unavailable=unavailable,
            reason=f"Unavailable collections: {names}",
        )

    entry_sets = resolve_collections(
        records_by_collection,
        canonical_order=generation.canonical_order,
    )
    artifact = render(
        entry_sets,
        now_provider(),
        effective_config.nuxeo.base_url,
        include_descriptions=generation.include_descriptions,
    )

    if check:
        existing = effective_writer.read_existing()
        up_to_date = existing is not None and reproducible_body(existing) == reproducible_body(
            artifact.text
        )
        status = GenerationStatus.UP_TO_DATE if up_to_date else GenerationStatus.OUTDATED
    else:
        outcome = effective_writer.write(artifact)
        status = (
            GenerationStatus.WRITTEN
            if outcome is WriteOutcome.WRITTEN
            else GenerationStatus.UNCHANGED
        )

    result = GenerationResult(
        status=status,
        entry_sets=entry_sets,
        unavailable=unavailable,
        artifact=artifact,
    )
    log.info(
        "Finished constants generation: status=%s, constants=%s, collisions=%s, unavailable=%s",
        result.status,
        result.constant_count,
        result.collision_count,
        len(result.unavailable),
    )
    return result


def resolve_collections(
    records_by_collection: Mapping[Collection, Sequence[RawRecord]],
    *,
    canonical_order: bool = True,
) -> dict[Collection, ResolvedEntrySet]:
    """Resolve each collection independently, verifying name uniqueness."""

    entry_sets: dict[Collection, ResolvedEntrySet] = {}
    for collection in Collection:
        records = records_by_collection.get(collection)
        if records is None:
            continue
        ordered = sorted(records, key=_record_key) if canonical_order else list(records)
        entry_set = resolve(collection, ordered)
        ensure_unique_names(entry_set)
        log.info(
            "Processed %s: records=%s, constants=%s, renamed=%s, aliases=%s",
            collection,
            entry_set.record_count,
            len(entry_set),
            len(entry_set.collisions),
            len(entry_set.aliases),
        )
        entry_sets[collection] = entry_set
    return entry_sets


def probe_server(*, config: AppConfig | None = None) -> bool:
    effective_config = config or get_app_config()
    return NuxeoMetadataFetcher.from_config(effective_config.nuxeo).probe()


def _split_outcomes(
    outcomes: Mapping[Collection, FetchOutcome],
) -> tuple[dict[Collection, tuple[RawRecord, ...]], tuple[Collection, ...]]:
    records: dict[Collection, tuple[RawRecord, ...]] = {}
    unavailable: list[Collection] = []
    for collection in Collection:
        outcome = outcomes.get(collection)
        if isinstance(outcome, CollectionFetched):
            records[collection] = outcome.records
            continue
        reason = outcome.reason if outcome is not None else "not fetched"
        log.warning("Collection %s unavailable, treating it as absent: %s", collection, reason)
        unavailable.append(collection)
    return records, tuple(unavailable)


type _RecordSortKey = tuple[
    str, str, str, str, str, str, tuple[str, ...], tuple[str, ...], tuple[str, ...]
]


def _record_key(record: RawRecord) -> _RecordSortKey:
    # records may share a key, so every field takes part
    return (
        record.key,
        record.label or "",
        record.description or "",
        record.category or "",
        record.prefix or "",
        record.parent or "",
        record.facets,
        record.schemas,
        record.alias_keys,
    )


def _log_fallback(config: AppConfig) -> None:
    log.warning("Nuxeo metadata unavailable; keeping existing constants file %s", config.output.path)
    log.info("To generate fresh constants, ensure the Nuxeo server is running at:")
    log.info("   %s", config.nuxeo.base_url)
    log.info("Or set NUXEO_URL to your server URL")
