"""Google Places adapter: live ratings and photos for approvals."""

from __future__ import annotations

from .client import GooglePlacesClient, PlacesAPIError
from .fetcher import GooglePlacesDataClient, PlacesUnavailableError
from .schema import PlaceDetailsResponse

__all__ = [
    "GooglePlacesClient",
    "GooglePlacesDataClient",
    "PlaceDetailsResponse",
    "PlacesAPIError",
    "PlacesUnavailableError",
]
