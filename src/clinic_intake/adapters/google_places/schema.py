"""Google Places Details response schemas."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class PlacesBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Google Places %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class PlaceReviewPayload(PlacesBaseModel):
    author_name: str | None = None
    author_url: str | None = None
    language: str | None = None
    original_language: str | None = None
    rating: float | None = None
    text: str | None = None
    time: int | None = None  # unix seconds
    relative_time_description: str | None = None
    profile_photo_url: str | None = None
    translated: bool | None = None


class PlacePhotoPayload(PlacesBaseModel):
    photo_reference: str
    width: int | None = None
    height: int | None = None
    html_attributions: list[str] = Field(default_factory=list[str])


class PlaceDetailsResult(PlacesBaseModel):
    rating: float | None = None
    user_ratings_total: int | None = None
    reviews: list[PlaceReviewPayload] = Field(default_factory=list[PlaceReviewPayload])
    business_status: str | None = None
    photos: list[PlacePhotoPayload] = Field(default_factory=list[PlacePhotoPayload])


class PlaceDetailsResponse(PlacesBaseModel):
    status: str
    result: PlaceDetailsResult | None = None
    error_message: str | None = None
    info_messages: list[str] = Field(default_factory=list[str])
    html_attributions: list[str] = Field(default_factory=list[str])
