"""Aggregate application configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .generation import GenerationConfig, get_generation_config
from .nuxeo import NuxeoConfig, get_nuxeo_config
from .output import OutputConfig, get_output_config
from .profile import Profile, get_profile


@dataclass(frozen=True, slots=True)
class AppConfig:
    profile: Profile
    nuxeo: NuxeoConfig
    output: OutputConfig
    generation: GenerationConfig

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self.profile is Profile.DEVELOPMENT else logging.INFO


def get_app_config(*, profile: str | None = None) -> AppConfig:
    active_profile = get_profile(profile)
    return AppConfig(
        profile=active_profile,
        nuxeo=get_nuxeo_config(profile=active_profile),
        output=get_output_config(profile=active_profile),
        generation=get_generation_config(profile=active_profile),
    )
