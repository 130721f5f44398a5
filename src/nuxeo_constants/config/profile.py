"""Deployment profiles that adjust configuration defaults."""

from __future__ import annotations

from enum import StrEnum

from .env import env_str
from .errors import ConfigurationError


class Profile(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def strict(self) -> bool:
        return self is not Profile.DEVELOPMENT


def get_profile(name: str | None = None) -> Profile:
    raw = name if name is not None else env_str("NUXEO_PROFILE", Profile.DEVELOPMENT)
    try:
        return Profile(raw.strip().lower())
    except ValueError as exc:
        choices = ", ".join(profile.value for profile in Profile)
        raise ConfigurationError(f"Unknown profile {raw!r} (expected one of: {choices})") from exc
