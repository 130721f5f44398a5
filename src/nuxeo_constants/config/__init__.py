"""Application configuration helpers."""

from __future__ import annotations

from .app import AppConfig, get_app_config
from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .generation import GenerationConfig, get_generation_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .nuxeo import DEFAULT_NUXEO_URL, NuxeoConfig, get_nuxeo_config
from .output import BackupConfig, OutputConfig, get_output_config
from .profile import Profile, get_profile
from .storage import StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_NUXEO_URL",
    "AppConfig",
    "BackupConfig",
    "CacheConfig",
    "ConfigurationError",
    "GenerationConfig",
    "MissingConfigurationError",
    "NuxeoConfig",
    "OutputConfig",
    "Profile",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_app_config",
    "get_generation_config",
    "get_nuxeo_config",
    "get_output_config",
    "get_profile",
    "get_storage_config",
    "require_env_vars",
]
