"""Translate Places payloads into the domain's place-data values."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from clinic_intake.config.places import PLACES_BASE_URL
from clinic_intake.domain.ports.places import PlaceDetails, PlacePhoto, PlaceReview

if TYPE_CHECKING:
    from .schema import PlaceDetailsResponse, PlaceReviewPayload


def photo_url(reference: str, *, api_key: str, max_width: int) -> str:
    query = urlencode({"key": api_key, "photoreference": reference, "maxwidth": max_width})
    return f"{PLACES_BASE_URL}photo?{query}"


def translate_details(
    response: PlaceDetailsResponse,
    *,
    place_ref: str,
    review_limit: int,
) -> PlaceDetails | None:
    result = response.result
    if response.status != "OK" or result is None:
        return None
    return PlaceDetails(
        place_ref=place_ref,
        rating=result.rating,
        review_count=result.user_ratings_total or 0,
        reviews=tuple(_translate_review(review) for review in result.reviews[:review_limit]),
        business_status=result.business_status or "OPERATIONAL",
    )


def translate_photos(
    response: PlaceDetailsResponse,
    *,
    api_key: str,
    max_width: int,
) -> list[PlacePhoto]:
    result = response.result
    if response.status != "OK" or result is None:
        return []
    return [
        PlacePhoto(
            reference=photo.photo_reference,
            url=photo_url(photo.photo_reference, api_key=api_key, max_width=max_width),
            width=photo.width,
            height=photo.height,
        )
        for photo in result.photos
    ]


def _translate_review(review: PlaceReviewPayload) -> PlaceReview:
    return PlaceReview(
        author_name=review.author_name or "Anonymous",
        rating=review.rating,
        text=review.text or "",
        time=datetime.fromtimestamp(review.time, tz=UTC) if review.time else None,
        relative_time=review.relative_time_description,
        profile_photo_url=review.profile_photo_url,
    )
