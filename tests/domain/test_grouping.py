from __future__ import annotations

from typing import TYPE_CHECKING

from nuxeo_constants.domain.grouping import DEFAULT_CATEGORY, category_of, group_by_category
from nuxeo_constants.domain.resolution import resolve
from nuxeo_constants.domain.types import Collection

if TYPE_CHECKING:
    from collections.abc import Callable

    from nuxeo_constants.domain.types import RawRecord


def test_group_by_category_sorts_categories_and_members(
    make_record: Callable[..., RawRecord],
) -> None:
    records = [
        make_record("Document.Update", category="Document"),
        make_record("Blob.Attach", category="Files"),
        make_record("Document.Create", category="Document"),
    ]

    groups = group_by_category(resolve(Collection.OPERATIONS, records).entries)

    assert groups == {
        "Document": ("Document_Create", "Document_Update"),
        "Files": ("Blob_Attach",),
    }
    assert list(groups) == ["Document", "Files"]


def test_missing_or_blank_category_falls_back(make_record: Callable[..., RawRecord]) -> None:
    records = [
        make_record("Context.Fetch"),
        make_record("Context.Pop", category="   "),
        make_record("Context.Push", category=" Execution Context "),
    ]

    entries = resolve(Collection.OPERATIONS, records).entries

    assert [category_of(entry) for entry in entries] == [
        DEFAULT_CATEGORY,
        DEFAULT_CATEGORY,
        "Execution Context",
    ]


def test_aliases_are_grouped_with_their_operation(make_record: Callable[..., RawRecord]) -> None:
    records = [make_record("Blob.Attach", "Blob.AttachOnDocument", category="Files")]

    groups = group_by_category(resolve(Collection.OPERATIONS, records).entries)

    assert groups == {"Files": ("Blob_Attach", "Blob_AttachOnDocument")}


def test_group_by_category_of_nothing_is_empty() -> None:
    assert group_by_category([]) == {}
