"""Category grouping shared by the categories table and header statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .types import ResolvedEntry

DEFAULT_CATEGORY: Final[str] = "Other"


def category_of(entry: ResolvedEntry) -> str:
    category = entry.record.category
    if category is None or not category.strip():
        return DEFAULT_CATEGORY
    return category.strip()


def group_by_category(entries: Iterable[ResolvedEntry]) -> dict[str, tuple[str, ...]]:
    """Return ``category -> final names``, both levels sorted."""

    groups: dict[str, list[str]] = {}
    for entry in entries:
        groups.setdefault(category_of(entry), []).append(entry.final_name)
    return {category: tuple(sorted(groups[category])) for category in sorted(groups)}
