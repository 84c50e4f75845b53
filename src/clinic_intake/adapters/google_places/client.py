"""Google Places Details API client."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final

from clinic_intake.adapters.http_resilience import ResilientClient

from .schema import PlaceDetailsResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from clinic_intake.config.http_resilience import ResilienceConfig
    from clinic_intake.config.places import PlacesConfig

log = getLogger(__name__)

DETAILS_PATH: Final[str] = "details/json"
DETAIL_FIELDS: Final[tuple[str, ...]] = (
    "rating",
    "user_ratings_total",
    "reviews",
    "business_status",
)
# statuses that carry a usable answer; anything else is an API failure
ANSWERED_STATUSES: Final[frozenset[str]] = frozenset({"OK", "NOT_FOUND", "ZERO_RESULTS"})


class PlacesAPIError(RuntimeError):
    """Raised when the Places API returns an unexpected response."""


class GooglePlacesClient:
    """Low-level HTTP client for the Places Details endpoint."""

    def __init__(
        self,
        *,
        config: PlacesConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def fetch_details(self, *, place_ref: str, include_photos: bool = False) -> PlaceDetailsResponse:
        return asyncio.run(
            self._fetch_details_async(place_ref=place_ref, include_photos=include_photos)
        )

    async def _fetch_details_async(
        self,
        *,
        place_ref: str,
        include_photos: bool,
    ) -> PlaceDetailsResponse:
        if not place_ref.strip():
            raise PlacesAPIError("A place reference is required")
        if self._resilience.base_url is None:
            raise PlacesAPIError("Missing Places base_url in resilience configuration")

        fields = (*DETAIL_FIELDS, "photos") if include_photos else DETAIL_FIELDS
        params = {
            "place_id": place_ref,
            "fields": ",".join(fields),
            "key": self._config.api_key,
        }
        async with self._client_factory(self._resilience) as client:
            payload = await client.get_json(DETAILS_PATH, params=params)

        response = PlaceDetailsResponse.model_validate(payload)
        if response.status not in ANSWERED_STATUSES:
            detail = f": {response.error_message}" if response.error_message else ""
            raise PlacesAPIError(f"Places API returned {response.status}{detail}")
        if response.status != "OK":
            log.warning("Place not found for place reference %s", place_ref)
        return response
