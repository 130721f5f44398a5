"""Ports for persisting the rendered constants module."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from nuxeo_constants.domain.types import RenderedArtifact


class WriteOutcome(StrEnum):
    WRITTEN = "written"
    UNCHANGED = "unchanged"


@runtime_checkable
class ArtifactWriter(Protocol):
    """Persists artifacts wholesale; a failed write must leave the previous one intact."""

    def read_existing(self) -> str | None: ...

    def write(self, artifact: RenderedArtifact) -> WriteOutcome: ...


__all__ = ["ArtifactWriter", "WriteOutcome"]
