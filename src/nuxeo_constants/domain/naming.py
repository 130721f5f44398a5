"""Identifier sanitization for generated constant names."""

from __future__ import annotations

import re

_ILLEGAL_CHARACTERS = re.compile(r"[^A-Za-z0-9_]")
_UNDERSCORE_RUNS = re.compile(r"_+")

DEGENERATE_NAME = "_"


def sanitize(key: str) -> str:
    """Map an arbitrary key to a candidate identifier.

    ``"Document.Create"`` becomes ``"Document_Create"``. The result may be empty
    when the key holds no ASCII letters or digits; callers decide how to name
    such records.
    """

    name = key.replace(".", "_")
    name = _ILLEGAL_CHARACTERS.sub("_", name)
    name = _UNDERSCORE_RUNS.sub("_", name)
    return name.strip("_")
