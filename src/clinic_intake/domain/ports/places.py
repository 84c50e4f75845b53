"""Port for the external place-data collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(slots=True, frozen=True, kw_only=True)
class PlaceReview:
    author_name: str
    rating: float | None = None
    text: str | None = None
    time: datetime | None = None
    relative_time: str | None = None
    profile_photo_url: str | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class PlaceDetails:
    place_ref: str
    rating: float | None = None
    review_count: int | None = None
    reviews: tuple[PlaceReview, ...] = ()
    business_status: str | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class PlacePhoto:
    reference: str
    url: str
    width: int | None = None
    height: int | None = None


@runtime_checkable
class PlaceDataClient(Protocol):
    """Live place lookups.

    Both calls raise ``DependencyDegradedError`` when the collaborator is unavailable.
    An unknown place yields ``None`` details and no photos.
    """

    def fetch_place_details(self, place_ref: str) -> PlaceDetails | None: ...

    def fetch_place_photos(self, place_ref: str) -> list[PlacePhoto]: ...
