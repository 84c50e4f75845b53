"""Google Places configuration values."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Final

import httpx

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryablePayloadError,
    RetryPolicy,
)

PLACES_API_KEY_ENV: Final[str] = "GOOGLE_PLACES_API_KEY"
PLACES_CACHE_ENV: Final[str] = "CLINIC_INTAKE_PLACES_CACHE"
PLACES_BASE_URL: Final[str] = "https://maps.googleapis.com/maps/api/place/"
PLACES_TIMEOUT_SECONDS: Final[float] = 10.0
PHOTO_MAX_WIDTH: Final[int] = 1600
REVIEW_LIMIT: Final[int] = 5
# one day
PLACES_CACHE_TTL_SECONDS: Final[float] = 24 * 60 * 60
THROTTLED_STATUS: Final[str] = "OVER_QUERY_LIMIT"
_CACHE_MODES: Final[frozenset[str]] = frozenset({"memory", "sqlite", "off"})


def cache_successful_payloads(payload: object) -> bool:
    """Only keep Places payloads that report ``status == "OK"``."""

    if not isinstance(payload, dict):
        return False
    return payload.get("status") == "OK"  # pyright: ignore[reportUnknownMemberType]


async def raise_on_throttled_payload(response: httpx.Response) -> None:
    """Turn a ``200`` answer carrying ``OVER_QUERY_LIMIT`` into a retryable error.

    Places reports quota exhaustion inside the JSON body, so the status-code based
    retry never sees it.
    """

    if response.status_code != httpx.codes.OK:
        return
    await response.aread()
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return
    if isinstance(payload, dict) and payload.get("status") == THROTTLED_STATUS:  # pyright: ignore[reportUnknownMemberType]
        raise RetryablePayloadError(f"Places quota exhausted ({THROTTLED_STATUS})", response=response)


def places_cache_config() -> CacheConfig | None:
    mode = (os.getenv(PLACES_CACHE_ENV) or "memory").strip().lower()
    if mode not in _CACHE_MODES:
        options = ", ".join(sorted(_CACHE_MODES))
        raise ConfigurationError(f"{PLACES_CACHE_ENV} must be one of {options}, got {mode!r}")
    if mode == "off":
        return None
    return CacheConfig(
        backend="sqlite" if mode == "sqlite" else "memory",
        default_ttl_seconds=PLACES_CACHE_TTL_SECONDS,
        should_cache=cache_successful_payloads,
    )


@dataclass(frozen=True, slots=True)
class PlacesConfig:
    """Holds Google Places API configuration values."""

    api_key: str
    resilience: ResilienceConfig
    photo_max_width: int = PHOTO_MAX_WIDTH
    review_limit: int = REVIEW_LIMIT


def get_places_config(*, resilience: ResilienceConfig | None = None) -> PlacesConfig:
    values = require_env_vars((PLACES_API_KEY_ENV,))
    return PlacesConfig(
        api_key=values[PLACES_API_KEY_ENV],
        resilience=resilience
        or ResilienceConfig(
            name="google-places",
            base_url=PLACES_BASE_URL,
            timeout_seconds=PLACES_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=places_cache_config(),
            response_hooks=(raise_on_throttled_payload,),
            default_headers={"Accept": "application/json"},
        ),
    )
