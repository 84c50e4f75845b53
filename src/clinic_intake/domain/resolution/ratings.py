"""Rating policies: where an approved clinic's rating snapshot comes from."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from clinic_intake.domain.errors import DependencyDegradedError, ValidationFailedError
from clinic_intake.domain.model import RatingSource

if TYPE_CHECKING:
    from clinic_intake.domain.model import Draft
    from clinic_intake.domain.ports.places import PlaceDataClient, PlaceReview

log = getLogger(__name__)

MAX_RATING = 5.0


@dataclass(slots=True, frozen=True, kw_only=True)
class RatingSnapshot:
    rating: float | None
    review_count: int | None
    reviews: tuple[PlaceReview, ...] = ()
    live: bool = False

    def reviews_json(self) -> str | None:
        if not self.reviews:
            return None
        return json.dumps(
            [
                {
                    "author_name": review.author_name,
                    "rating": review.rating,
                    "text": review.text,
                    "time": review.time.isoformat() if review.time else None,
                    "relative_time": review.relative_time,
                    "profile_photo_url": review.profile_photo_url,
                }
                for review in self.reviews
            ]
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class LiveRating:
    """Fetch the rating from the place-data collaborator.

    Falls back to the values cached on the draft when the draft has no place reference,
    the place is unknown, or the collaborator is unavailable.
    """

    kind: Literal[RatingSource.GOOGLE] = RatingSource.GOOGLE

    def resolve(self, draft: Draft, *, places: PlaceDataClient | None) -> RatingSnapshot:
        cached = RatingSnapshot(rating=draft.google_rating, review_count=draft.google_review_count)
        if not draft.place_ref or places is None:
            return cached
        try:
            details = places.fetch_place_details(draft.place_ref)
        except DependencyDegradedError as exc:
            log.warning(
                "Live rating lookup failed for draft %s; using cached values: %s", draft.id, exc
            )
            return cached
        if details is None:
            log.info("Place %s not found; using cached rating for draft %s", draft.place_ref, draft.id)
            return cached
        return RatingSnapshot(
            rating=details.rating,
            review_count=details.review_count,
            reviews=details.reviews,
            live=True,
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class ManualRating:
    """Use operator-supplied values verbatim."""

    rating: float | None = None
    review_count: int | None = None
    kind: Literal[RatingSource.MANUAL] = RatingSource.MANUAL

    def __post_init__(self) -> None:
        if self.rating is not None and not 0 <= self.rating <= MAX_RATING:
            raise ValidationFailedError(f"Manual rating must be between 0 and {MAX_RATING}")
        if self.review_count is not None and self.review_count < 0:
            raise ValidationFailedError("Manual review count must not be negative")

    def resolve(self, draft: Draft, *, places: PlaceDataClient | None) -> RatingSnapshot:
        _ = draft, places
        return RatingSnapshot(rating=self.rating, review_count=self.review_count)


type RatingPolicy = LiveRating | ManualRating


def rating_policy_for(
    source: RatingSource,
    *,
    manual_rating: float | None = None,
    manual_review_count: int | None = None,
) -> RatingPolicy:
    if source is RatingSource.MANUAL:
        return ManualRating(rating=manual_rating, review_count=manual_review_count)
    return LiveRating()
