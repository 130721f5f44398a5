"""Output location and backup settings for the generated module."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .env import env_bool, env_int, env_str
from .errors import ConfigurationError
from .profile import Profile

DEFAULT_OUTPUT_PATH: Final[str] = "src/generated/nuxeo_constants.py"
DEFAULT_BACKUP_DIR: Final[str] = "backups/constants"
DEFAULT_BACKUP_KEEP_COUNT: Final[int] = 10
PRODUCTION_BACKUP_KEEP_COUNT: Final[int] = 20


@dataclass(frozen=True, slots=True)
class BackupConfig:
    enabled: bool = True
    directory: Path = field(default_factory=lambda: Path(DEFAULT_BACKUP_DIR))
    keep_count: int = DEFAULT_BACKUP_KEEP_COUNT

    def __post_init__(self) -> None:
        if self.keep_count < 1:
            msg = f"Backup keep count must be at least 1, got {self.keep_count}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class OutputConfig:
    path: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_PATH))
    backup: BackupConfig = field(default_factory=BackupConfig)


def get_output_config(*, profile: Profile = Profile.DEVELOPMENT) -> OutputConfig:
    default_keep = (
        PRODUCTION_BACKUP_KEEP_COUNT if profile is Profile.PRODUCTION else DEFAULT_BACKUP_KEEP_COUNT
    )
    backup = BackupConfig(
        enabled=env_bool("NUXEO_CONSTANTS_BACKUP", True),  # noqa: FBT003
        directory=Path(env_str("NUXEO_CONSTANTS_BACKUP_DIR", DEFAULT_BACKUP_DIR)),
        keep_count=env_int("NUXEO_CONSTANTS_BACKUPS", default_keep, minimum=1),
    )
    return OutputConfig(
        path=Path(env_str("NUXEO_CONSTANTS_OUTPUT", DEFAULT_OUTPUT_PATH)),
        backup=backup,
    )
