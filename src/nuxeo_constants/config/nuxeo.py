"""Nuxeo server configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final
from urllib.parse import urlsplit

from nuxeo_constants import __version__

from .env import env_float, env_int, env_optional_float, env_str, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .profile import Profile
from .storage import get_storage_config

if TYPE_CHECKING:
    from .storage import StorageConfig

DEFAULT_NUXEO_URL: Final[str] = "http://localhost:8080/nuxeo"
DEFAULT_CREDENTIAL: Final[str] = "Administrator"
NUXEO_TIMEOUT_SECONDS: Final[float] = 30.0
NUXEO_RETRIES: Final[int] = 3

_PROFILE_URL_VARIABLES: Final[dict[Profile, str]] = {
    Profile.STAGING: "NUXEO_STAGING_URL",
    Profile.PRODUCTION: "NUXEO_PROD_URL",
}


@dataclass(frozen=True, slots=True)
class NuxeoConfig:
    """Holds the Nuxeo server connection settings."""

    base_url: str
    username: str
    resilience: ResilienceConfig


def get_nuxeo_config(
    *,
    profile: Profile = Profile.DEVELOPMENT,
    storage: StorageConfig | None = None,
) -> NuxeoConfig:
    url_variable = _PROFILE_URL_VARIABLES.get(profile)
    if url_variable is not None:
        base_url = require_env_vars((url_variable,))[url_variable]
    else:
        base_url = env_str("NUXEO_URL", DEFAULT_NUXEO_URL)
    _validate_base_url(base_url)

    username = env_str("NUXEO_USERNAME", DEFAULT_CREDENTIAL)
    password = env_str("NUXEO_PASSWORD", DEFAULT_CREDENTIAL)

    resilience = ResilienceConfig(
        name="nuxeo",
        base_url=base_url,
        timeout_seconds=env_float("NUXEO_TIMEOUT_SECONDS", NUXEO_TIMEOUT_SECONDS),
        retry=RetryPolicy(total=env_int("NUXEO_RETRIES", NUXEO_RETRIES)),
        ratelimit=_rate_limit(),
        cache=_cache_config(storage),
        default_headers={
            "Accept": "application/json",
            "User-Agent": f"nuxeo-constants/{__version__}",
        },
        basic_auth=(username, password),
    )
    return NuxeoConfig(base_url=base_url, username=username, resilience=resilience)


def _validate_base_url(base_url: str) -> None:
    parts = urlsplit(base_url)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise ConfigurationError(f"Nuxeo URL must be an absolute http(s) URL, got {base_url!r}")


def _rate_limit() -> RateLimit | None:
    per_second = env_optional_float("NUXEO_MAX_REQUESTS_PER_SECOND")
    if per_second is None:
        return None
    return RateLimit.per_second(per_second)


def _cache_config(storage: StorageConfig | None) -> CacheConfig | None:
    backend = env_str("NUXEO_HTTP_CACHE", "off").lower()
    if backend == "off":
        return None
    if backend == "memory":
        return CacheConfig(backend="memory")
    if backend == "sqlite":
        storage_config = storage or get_storage_config()
        return CacheConfig(backend="sqlite", sqlite_path=str(storage_config.http_cache_path()))
    raise ConfigurationError(
        f"NUXEO_HTTP_CACHE must be one of off, memory, sqlite; got {backend!r}"
    )
