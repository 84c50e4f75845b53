"""Photo policies: which photos an approval copies into the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final, Literal

from clinic_intake.domain.errors import DependencyDegradedError
from clinic_intake.domain.model import PhotoOrigin, PhotoSource

if TYPE_CHECKING:
    from clinic_intake.domain.model import Draft
    from clinic_intake.domain.ports.places import PlaceDataClient

log = getLogger(__name__)

GOOGLE_PHOTO_LIMIT: Final[int] = 10
COMBINED_GOOGLE_PHOTO_LIMIT: Final[int] = 5


@dataclass(slots=True, frozen=True, kw_only=True)
class SelectedPhoto:
    url: str
    origin: PhotoOrigin
    photo_type: str = "clinic"
    reference: str | None = None
    width: int | None = None
    height: int | None = None
    caption: str | None = None


def submitted_photos(draft: Draft) -> list[SelectedPhoto]:
    ordered = sorted(
        (photo for photo in draft.photos if photo.origin is not PhotoOrigin.GOOGLE),
        key=lambda photo: photo.display_order,
    )
    return [
        SelectedPhoto(
            url=photo.url,
            origin=PhotoOrigin.USER,
            photo_type=photo.photo_type,
            caption=photo.caption,
        )
        for photo in ordered
    ]


def place_photos(draft: Draft, *, places: PlaceDataClient | None, limit: int) -> list[SelectedPhoto]:
    if not draft.place_ref or places is None or limit <= 0:
        return []
    try:
        photos = places.fetch_place_photos(draft.place_ref)
    except DependencyDegradedError as exc:
        log.warning("Place photos unavailable for draft %s; continuing without: %s", draft.id, exc)
        return []
    return [
        SelectedPhoto(
            url=photo.url,
            origin=PhotoOrigin.GOOGLE,
            reference=photo.reference,
            width=photo.width,
            height=photo.height,
        )
        for photo in photos[:limit]
    ]


@dataclass(slots=True, frozen=True, kw_only=True)
class UserPhotos:
    kind: Literal[PhotoSource.USER] = PhotoSource.USER

    def select(self, draft: Draft, *, places: PlaceDataClient | None) -> list[SelectedPhoto]:
        _ = places
        return submitted_photos(draft)


@dataclass(slots=True, frozen=True, kw_only=True)
class PlacePhotos:
    limit: int = GOOGLE_PHOTO_LIMIT
    kind: Literal[PhotoSource.GOOGLE] = PhotoSource.GOOGLE

    def select(self, draft: Draft, *, places: PlaceDataClient | None) -> list[SelectedPhoto]:
        return place_photos(draft, places=places, limit=self.limit)


@dataclass(slots=True, frozen=True, kw_only=True)
class CombinedPhotos:
    """Submitted photos first, then a capped number of place photos."""

    place_limit: int = COMBINED_GOOGLE_PHOTO_LIMIT
    kind: Literal[PhotoSource.BOTH] = PhotoSource.BOTH

    def select(self, draft: Draft, *, places: PlaceDataClient | None) -> list[SelectedPhoto]:
        return submitted_photos(draft) + place_photos(draft, places=places, limit=self.place_limit)


type PhotoPolicy = UserPhotos | PlacePhotos | CombinedPhotos


def photo_policy_for(
    source: PhotoSource,
    *,
    google_limit: int = GOOGLE_PHOTO_LIMIT,
    combined_google_limit: int = COMBINED_GOOGLE_PHOTO_LIMIT,
) -> PhotoPolicy:
    if source is PhotoSource.GOOGLE:
        return PlacePhotos(limit=google_limit)
    if source is PhotoSource.BOTH:
        return CombinedPhotos(place_limit=combined_google_limit)
    return UserPhotos()
