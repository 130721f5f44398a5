"""Render resolved entry sets into a Python constants module.

The output is a pure function of its inputs. The only line that changes between
runs over identical metadata is the one starting with
:data:`GENERATED_LINE_PREFIX`; :func:`reproducible_body` drops it for comparisons.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Final

from .grouping import group_by_category
from .types import Collection, CollisionRecord, RenderedArtifact, ResolvedEntry, ResolvedEntrySet

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

GENERATED_LINE_PREFIX: Final[str] = "# Generated: "

TABLE_NAMES: Final[Mapping[Collection, str]] = {
    Collection.OPERATIONS: "NUXEO_OPERATIONS",
    Collection.DOCUMENT_TYPES: "NUXEO_DOCUMENT_TYPES",
    Collection.SCHEMAS: "NUXEO_SCHEMAS",
    Collection.FACETS: "NUXEO_FACETS",
}
ALIAS_TABLE_NAMES: Final[Mapping[Collection, str]] = {
    Collection.OPERATIONS: "NUXEO_OPERATION_ALIASES",
    Collection.DOCUMENT_TYPES: "NUXEO_DOCUMENT_TYPE_ALIASES",
    Collection.SCHEMAS: "NUXEO_SCHEMA_ALIASES",
    Collection.FACETS: "NUXEO_FACET_ALIASES",
}
VALUE_TYPE_NAMES: Final[Mapping[Collection, str]] = {
    Collection.OPERATIONS: "NuxeoOperation",
    Collection.DOCUMENT_TYPES: "NuxeoDocumentType",
    Collection.SCHEMAS: "NuxeoSchema",
    Collection.FACETS: "NuxeoFacet",
}
CATEGORIES_TABLE_NAME: Final[str] = "NUXEO_OPERATION_CATEGORIES"

_INDENT = "    "
_PREAMBLE = "from __future__ import annotations\n\nfrom typing import Final, Literal"
_COLLECTION_ORDER = {collection: index for index, collection in enumerate(Collection)}


def render(
    entry_sets: Mapping[Collection, ResolvedEntrySet],
    generated_at: datetime,
    source_description: str,
    *,
    include_descriptions: bool = True,
) -> RenderedArtifact:
    """Render every non-empty collection plus the derived alias, category and collision blocks."""

    ordered = [entry_sets[collection] for collection in Collection if collection in entry_sets]
    present = [entry_set for entry_set in ordered if entry_set.entries]
    operations = entry_sets.get(Collection.OPERATIONS)
    categories = group_by_category(operations.entries) if operations is not None else {}

    sections = [
        _render_header(ordered, categories, generated_at, source_description),
        _PREAMBLE,
    ]
    exported: list[str] = []

    for entry_set in present:
        name = TABLE_NAMES[entry_set.collection]
        sections.append(
            _render_table(
                name,
                sorted(entry_set.entries, key=_by_final_name),
                include_descriptions=include_descriptions,
            )
        )
        exported.append(name)

    for entry_set in present:
        name = VALUE_TYPE_NAMES[entry_set.collection]
        sections.append(_render_value_type(name, entry_set.entries))
        exported.append(name)

    for entry_set in present:
        aliases = entry_set.aliases
        if not aliases:
            continue
        name = ALIAS_TABLE_NAMES[entry_set.collection]
        sections.append(_render_alias_table(name, sorted(aliases, key=_by_final_name)))
        exported.append(name)

    if len(categories) > 1:
        sections.append(_render_categories(categories))
        exported.append(CATEGORIES_TABLE_NAME)

    sections.append(_render_exports(exported))

    collisions = [record for entry_set in ordered for record in entry_set.collisions]
    if collisions:
        sections.append(_render_collisions(sorted(collisions, key=_collision_sort_key)))

    return RenderedArtifact(text="\n\n".join(sections) + "\n", generated_at=generated_at)


def reproducible_body(text: str) -> str:
    """Return ``text`` without its generation timestamp line."""

    return "\n".join(
        line for line in text.splitlines() if not line.startswith(GENERATED_LINE_PREFIX)
    )


def annotation(entry: ResolvedEntry) -> str | None:
    """Describe an entry using only the fields present on its record."""

    record = entry.record
    summary: list[str] = []
    if record.label:
        summary.append(record.label)
    if record.description and record.description != record.label:
        summary.append(record.description)

    details: list[str] = []
    if record.prefix:
        details.append(f"prefix: {record.prefix}")
    if record.parent:
        details.append(f"parent: {record.parent}")
    if record.facets:
        details.append(f"facets: {', '.join(record.facets)}")
    if record.schemas:
        details.append(f"schemas: {', '.join(record.schemas)}")
    if entry.is_alias and entry.alias_of_key is not None:
        details.append(f"alias for {entry.alias_of_key}")

    text = " - ".join(summary)
    if details:
        joined = "; ".join(details)
        text = f"{text} ({joined})" if text else f"({joined})"
    text = _single_line(text)
    return text or None


def _render_header(
    entry_sets: list[ResolvedEntrySet],
    categories: Mapping[str, tuple[str, ...]],
    generated_at: datetime,
    source_description: str,
) -> str:
    collision_count = sum(len(entry_set.collisions) for entry_set in entry_sets)
    alias_count = sum(len(entry_set.aliases) for entry_set in entry_sets)

    lines = [
        "# Nuxeo repository constants.",
        "#",
        "# Auto-generated from Nuxeo server metadata. DO NOT EDIT MANUALLY;",
        "# run `nuxeo-constants generate` to regenerate.",
        "#",
        f"{GENERATED_LINE_PREFIX}{generated_at.isoformat()}",
        f"# Source: {_single_line(source_description)}",
        "#",
        "# Statistics:",
    ]
    lines.extend(
        f"#   {entry_set.collection.display_name}: "
        f"{entry_set.record_count} records, {len(entry_set)} constants"
        for entry_set in entry_sets
    )
    lines.append(f"#   Collisions resolved: {collision_count}")
    lines.append(f"#   Aliases: {alias_count}")
    lines.append(f"#   Operation categories: {len(categories)}")
    if categories:
        lines.extend(("#", "# Operations by category:"))
        lines.extend(
            f"#   {_single_line(category)}: {len(members)}"
            for category, members in categories.items()
        )
    return "\n".join(lines)


def _render_table(
    name: str,
    entries: Iterable[ResolvedEntry],
    *,
    include_descriptions: bool,
) -> str:
    lines = [f"{name}: Final[dict[str, str]] = {{"]
    for entry in entries:
        if include_descriptions:
            note = annotation(entry)
            if note is not None:
                lines.append(f"{_INDENT}# {note}")
        lines.append(f"{_INDENT}{_literal(entry.final_name)}: {_literal(entry.source_key)},")
    lines.append("}")
    return "\n".join(lines)


def _render_value_type(name: str, entries: Iterable[ResolvedEntry]) -> str:
    values = sorted({entry.source_key for entry in entries})
    lines = [f"type {name} = Literal["]
    lines.extend(f"{_INDENT}{_literal(value)}," for value in values)
    lines.append("]")
    return "\n".join(lines)


def _render_alias_table(name: str, aliases: Iterable[ResolvedEntry]) -> str:
    lines = [f"{name}: Final[dict[str, str]] = {{"]
    lines.extend(
        f"{_INDENT}{_literal(entry.final_name)}: {_literal(entry.source_key)},"
        for entry in aliases
    )
    lines.append("}")
    return "\n".join(lines)


def _render_categories(categories: Mapping[str, tuple[str, ...]]) -> str:
    operations_table = TABLE_NAMES[Collection.OPERATIONS]
    lines = [f"{CATEGORIES_TABLE_NAME}: Final[dict[str, tuple[str, ...]]] = {{"]
    for category, members in categories.items():
        lines.append(f"{_INDENT}{_literal(category)}: (")
        lines.extend(
            f"{_INDENT * 2}{operations_table}[{_literal(member)}]," for member in members
        )
        lines.append(f"{_INDENT}),")
    lines.append("}")
    return "\n".join(lines)


def _render_exports(names: list[str]) -> str:
    if not names:
        return "__all__: list[str] = []"
    lines = ["__all__ = ["]
    lines.extend(f"{_INDENT}{_literal(name)}," for name in names)
    lines.append("]")
    return "\n".join(lines)


def _render_collisions(collisions: list[CollisionRecord]) -> str:
    lines = [
        f"# Collisions resolved ({len(collisions)}):",
        "# The following keys could not keep their sanitized name.",
        "#",
    ]
    lines.extend(
        f"#   - {record.collection}: {_single_line(record.source_key)} -> "
        f"{record.candidate_name or '<empty>'} -> {record.resolved_name} ({record.reason})"
        for record in collisions
    )
    return "\n".join(lines)


def _by_final_name(entry: ResolvedEntry) -> str:
    return entry.final_name


def _collision_sort_key(record: CollisionRecord) -> tuple[str, int, str]:
    return (record.source_key, _COLLECTION_ORDER[record.collection], record.resolved_name)


def _literal(value: str) -> str:
    return json.dumps(value)


def _single_line(text: str) -> str:
    return " ".join(text.split())
