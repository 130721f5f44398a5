from __future__ import annotations

import pytest

from nuxeo_constants.domain.naming import sanitize


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("Document.Create", "Document_Create"),
        ("Document-Create", "Document_Create"),
        ("BlobHolder.AttachOnCurrentDocument", "BlobHolder_AttachOnCurrentDocument"),
        ("a..b", "a_b"),
        ("__private__", "private"),
        ("with space/and:colon", "with_space_and_colon"),
        ("Café.Menu", "Caf_Menu"),
        ("###", ""),
        ("", ""),
    ],
)
def test_sanitize(key: str, expected: str) -> None:
    assert sanitize(key) == expected


@pytest.mark.parametrize(
    "key",
    ["Document.Create", "  spaced  out ", "_x__y_", "###", "日本語.Key", "A-B_C.D"],
)
def test_sanitize_is_idempotent(key: str) -> None:
    once = sanitize(key)

    assert sanitize(once) == once


def test_sanitize_only_emits_identifier_characters() -> None:
    result = sanitize("Weird!@#Key.With$Symbols")

    assert result == "Weird_Key_With_Symbols"
    assert all(char.isascii() and (char.isalnum() or char == "_") for char in result)
