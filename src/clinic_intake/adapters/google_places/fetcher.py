"""Place-data collaborator backed by the Google Places API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

import httpx
from pydantic import ValidationError

from clinic_intake.domain.errors import DependencyDegradedError

from .client import GooglePlacesClient, PlacesAPIError
from .translator import translate_details, translate_photos

if TYPE_CHECKING:
    from clinic_intake.config.places import PlacesConfig
    from clinic_intake.domain.ports.places import PlaceDetails, PlacePhoto

    from .schema import PlaceDetailsResponse

log = getLogger(__name__)


class PlacesUnavailableError(DependencyDegradedError):
    """The Places API could not answer a lookup."""


class PlaceDetailsLookup(Protocol):
    def fetch_details(
        self, *, place_ref: str, include_photos: bool = False
    ) -> PlaceDetailsResponse: ...


class GooglePlacesDataClient:
    """``PlaceDataClient`` implementation over the Places Details endpoint."""

    def __init__(self, *, config: PlacesConfig, client: PlaceDetailsLookup | None = None) -> None:
        self._config = config
        self._client = client or GooglePlacesClient(config=config)

    def fetch_place_details(self, place_ref: str) -> PlaceDetails | None:
        response = self._lookup(place_ref, include_photos=False)
        return translate_details(
            response,
            place_ref=place_ref,
            review_limit=self._config.review_limit,
        )

    def fetch_place_photos(self, place_ref: str) -> list[PlacePhoto]:
        response = self._lookup(place_ref, include_photos=True)
        return translate_photos(
            response,
            api_key=self._config.api_key,
            max_width=self._config.photo_max_width,
        )

    def _lookup(self, place_ref: str, *, include_photos: bool) -> PlaceDetailsResponse:
        try:
            return self._client.fetch_details(place_ref=place_ref, include_photos=include_photos)
        except (httpx.HTTPError, ValidationError, PlacesAPIError) as exc:
            log.warning("Places lookup for %s failed: %s", place_ref, exc)
            raise PlacesUnavailableError(f"Places lookup for {place_ref} failed: {exc}") from exc
