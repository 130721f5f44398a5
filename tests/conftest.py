from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from nuxeo_constants.config import (
    AppConfig,
    BackupConfig,
    GenerationConfig,
    OutputConfig,
    Profile,
    ResilienceConfig,
)
from nuxeo_constants.config.nuxeo import NuxeoConfig
from nuxeo_constants.domain.types import RawRecord

if TYPE_CHECKING:
    from collections.abc import Callable

NuxeoPayload = dict[str, object] | list[object]
FIXTURES = Path(__file__).resolve().parent / "data" / "nuxeo"

_NUXEO_ENVIRONMENT = (
    "NUXEO_PROFILE",
    "NUXEO_URL",
    "NUXEO_STAGING_URL",
    "NUXEO_PROD_URL",
    "NUXEO_USERNAME",
    "NUXEO_PASSWORD",
    "NUXEO_TIMEOUT_SECONDS",
    "NUXEO_RETRIES",
    "NUXEO_MAX_REQUESTS_PER_SECOND",
    "NUXEO_HTTP_CACHE",
    "NUXEO_DATA_DIR",
    "NUXEO_CONSTANTS_OUTPUT",
    "NUXEO_CONSTANTS_BACKUP",
    "NUXEO_CONSTANTS_BACKUP_DIR",
    "NUXEO_CONSTANTS_BACKUPS",
    "NUXEO_CONSTANTS_DESCRIPTIONS",
    "NUXEO_CONSTANTS_CANONICAL_ORDER",
    "NUXEO_FAIL_ON_WARNINGS",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _NUXEO_ENVIRONMENT:
        monkeypatch.delenv(name, raising=False)


def load_payload(name: str) -> NuxeoPayload:
    return json.loads((FIXTURES / name).read_text())


@pytest.fixture
def nuxeo_payloads() -> dict[str, NuxeoPayload]:
    return {
        "operations": load_payload("operations.json"),
        "doctypes": load_payload("doctypes.json"),
        "schemas": load_payload("schemas.json"),
        "facets": load_payload("facets.json"),
    }


@pytest.fixture
def make_record() -> Callable[..., RawRecord]:
    def factory(key: str, *aliases: str, **fields: object) -> RawRecord:
        return RawRecord(key=key, alias_keys=tuple(aliases), **fields)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def nuxeo_config() -> NuxeoConfig:
    resilience = ResilienceConfig(
        name="nuxeo-test",
        base_url="http://nuxeo.test/nuxeo",
        basic_auth=("Administrator", "Administrator"),
    )
    return NuxeoConfig(
        base_url="http://nuxeo.test/nuxeo",
        username="Administrator",
        resilience=resilience,
    )


@pytest.fixture
def app_config(tmp_path: Path, nuxeo_config: NuxeoConfig) -> AppConfig:
    return AppConfig(
        profile=Profile.DEVELOPMENT,
        nuxeo=nuxeo_config,
        output=OutputConfig(
            path=tmp_path / "generated" / "nuxeo_constants.py",
            backup=BackupConfig(directory=tmp_path / "backups", keep_count=2),
        ),
        generation=GenerationConfig(),
    )
