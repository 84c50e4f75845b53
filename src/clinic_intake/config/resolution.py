"""Tuning knobs for draft approval."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, env_int

GOOGLE_PHOTO_LIMIT: Final[int] = 10
COMBINED_GOOGLE_PHOTO_LIMIT: Final[int] = 5
MAX_APPROVAL_ATTEMPTS: Final[int] = 3


@dataclass(frozen=True, slots=True)
class ResolutionConfig:
    google_photo_limit: int = GOOGLE_PHOTO_LIMIT
    combined_google_photo_limit: int = COMBINED_GOOGLE_PHOTO_LIMIT
    max_attempts: int = MAX_APPROVAL_ATTEMPTS
    fallback_to_first_provider: bool = True


def get_resolution_config() -> ResolutionConfig:
    return ResolutionConfig(
        google_photo_limit=env_int(
            "CLINIC_INTAKE_GOOGLE_PHOTO_LIMIT", GOOGLE_PHOTO_LIMIT, minimum=0
        ),
        combined_google_photo_limit=env_int(
            "CLINIC_INTAKE_COMBINED_PHOTO_LIMIT", COMBINED_GOOGLE_PHOTO_LIMIT, minimum=0
        ),
        max_attempts=env_int("CLINIC_INTAKE_MAX_APPROVAL_ATTEMPTS", MAX_APPROVAL_ATTEMPTS, minimum=1),
        fallback_to_first_provider=env_flag("CLINIC_INTAKE_PROVIDER_FALLBACK", True),  # noqa: FBT003
    )
