"""File-system persistence for the generated constants module."""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from nuxeo_constants.config.output import BackupConfig
from nuxeo_constants.domain.ports.persistence import WriteOutcome
from nuxeo_constants.domain.rendering import reproducible_body

if TYPE_CHECKING:
    from collections.abc import Callable

    from nuxeo_constants.config.output import OutputConfig
    from nuxeo_constants.domain.types import RenderedArtifact

log = getLogger(__name__)

_BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class FileArtifactWriter:
    """Write artifacts atomically, keeping timestamped backups of replaced files."""

    path: Path
    backup: BackupConfig = field(default_factory=BackupConfig)
    now_provider: Callable[[], datetime] = _utcnow

    @classmethod
    def from_config(cls, config: OutputConfig) -> FileArtifactWriter:
        return cls(path=config.path, backup=config.backup)

    def read_existing(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, artifact: RenderedArtifact) -> WriteOutcome:
        existing = self.read_existing()
        if existing is not None and reproducible_body(existing) == reproducible_body(
            artifact.text
        ):
            log.info("Constants file %s is up to date", self.path)
            return WriteOutcome.UNCHANGED

        self.path.parent.mkdir(parents=True, exist_ok=True)
        if existing is not None and self.backup.enabled:
            self._backup_existing()
        self._replace(artifact.text)
        log.info("Constants file written: %s", self.path)
        return WriteOutcome.WRITTEN

    def backups(self) -> list[Path]:
        """Return existing backups of this artifact, oldest first."""

        directory = self.backup.directory
        if not directory.is_dir():
            return []
        pattern = f"{self.path.stem}.*{self.path.suffix}"
        return sorted(directory.glob(pattern))

    def _backup_existing(self) -> None:
        directory = self.backup.directory
        directory.mkdir(parents=True, exist_ok=True)
        stamp = self.now_provider().astimezone(UTC).strftime(_BACKUP_TIMESTAMP_FORMAT)
        target = directory / f"{self.path.stem}.{stamp}{self.path.suffix}"
        shutil.copy2(self.path, target)
        log.debug("Backed up %s to %s", self.path, target)

        backups = self.backups()
        stale = backups[: max(len(backups) - self.backup.keep_count, 0)]
        for old in stale:
            old.unlink()
            log.debug("Removed old backup %s", old)

    def _replace(self, text: str) -> None:
        fd, temp_name = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(text)
            temp_path.replace(self.path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
