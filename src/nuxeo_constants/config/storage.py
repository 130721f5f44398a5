"""Where the generator keeps local state (currently only the HTTP response cache)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .env import env_str

_APP_DIR = "nuxeo-constants"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    cache_database: str = "http_cache.db"

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def http_cache_path(self, *, create: bool = True) -> Path:
        """Path of the sqlite database hishel stores cached metadata responses in."""

        data_dir = self.resolve_data_dir()
        if create:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.cache_database


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = env_str("LOCALAPPDATA", "")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = env_str("XDG_DATA_HOME", "")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    """Read ``NUXEO_DATA_DIR``, falling back to the per-user data directory."""

    override = env_str("NUXEO_DATA_DIR", "")
    data_dir = Path(override) if override else _platform_data_home() / _APP_DIR
    return StorageConfig(data_dir=data_dir)
