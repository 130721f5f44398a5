"""Generation behaviour defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool
from .profile import Profile


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    include_descriptions: bool = True
    # Sort records by raw key before naming so source ordering cannot change the output.
    canonical_order: bool = True
    fail_on_warnings: bool = False


def get_generation_config(*, profile: Profile = Profile.DEVELOPMENT) -> GenerationConfig:
    return GenerationConfig(
        include_descriptions=env_bool("NUXEO_CONSTANTS_DESCRIPTIONS", True),  # noqa: FBT003
        canonical_order=env_bool("NUXEO_CONSTANTS_CANONICAL_ORDER", True),  # noqa: FBT003
        fail_on_warnings=env_bool("NUXEO_FAIL_ON_WARNINGS", profile.strict),
    )
