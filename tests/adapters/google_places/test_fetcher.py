from __future__ import annotations

import logging
from datetime import UTC, datetime
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from clinic_intake.adapters.google_places import (
    GooglePlacesDataClient,
    PlaceDetailsResponse,
    PlacesAPIError,
    PlacesUnavailableError,
)
from clinic_intake.adapters.http_resilience import ResilienceConfig
from clinic_intake.config.places import PlacesConfig
from clinic_intake.domain.errors import DependencyDegradedError
from clinic_intake.domain.ports.places import PlaceDataClient

REVIEW_TIME = datetime(2024, 6, 1, 12, tzinfo=UTC)


def _review(index: int) -> dict[str, object]:
    return {
        "author_name": f"Reviewer {index}",
        "rating": 5,
        "text": f"Review {index}",
        "time": int(REVIEW_TIME.timestamp()),
        "relative_time_description": "a month ago",
    }


class FakeLookup:
    def __init__(self, payload: dict[str, object] | None = None, error: Exception | None = None):
        self.payload = payload or {"status": "OK", "result": {}}
        self.error = error
        self.calls: list[tuple[str, bool]] = []

    def fetch_details(self, *, place_ref: str, include_photos: bool = False) -> PlaceDetailsResponse:
        self.calls.append((place_ref, include_photos))
        if self.error is not None:
            raise self.error
        return PlaceDetailsResponse.model_validate(self.payload)


def _client(lookup: FakeLookup, *, review_limit: int = 5) -> GooglePlacesDataClient:
    config = PlacesConfig(
        api_key="test-key",
        resilience=ResilienceConfig(name="google-places"),
        photo_max_width=800,
        review_limit=review_limit,
    )
    return GooglePlacesDataClient(config=config, client=lookup)


def test_details_are_translated_with_review_limit() -> None:
    lookup = FakeLookup(
        {
            "status": "OK",
            "result": {
                "rating": 4.7,
                "user_ratings_total": 88,
                "reviews": [_review(index) for index in range(7)],
            },
        }
    )

    details = _client(lookup).fetch_place_details("ChIJ-glow")

    assert details is not None
    assert isinstance(_client(lookup), PlaceDataClient)
    assert (details.rating, details.review_count) == (4.7, 88)
    assert details.business_status == "OPERATIONAL"
    assert [review.author_name for review in details.reviews] == [
        f"Reviewer {index}" for index in range(5)
    ]
    assert details.reviews[0].time == REVIEW_TIME
    assert lookup.calls == [("ChIJ-glow", False)]


def test_sparse_details_get_defaults() -> None:
    lookup = FakeLookup({"status": "OK", "result": {"reviews": [{"rating": 3}]}})

    details = _client(lookup).fetch_place_details("ChIJ-glow")

    assert details is not None
    assert details.rating is None
    assert details.review_count == 0
    [review] = details.reviews
    assert (review.author_name, review.text, review.time) == ("Anonymous", "", None)


def test_unknown_place_yields_nothing() -> None:
    lookup = FakeLookup({"status": "NOT_FOUND"})
    client = _client(lookup)

    assert client.fetch_place_details("ChIJ-missing") is None
    assert client.fetch_place_photos("ChIJ-missing") == []


def test_photos_become_signed_urls() -> None:
    lookup = FakeLookup(
        {
            "status": "OK",
            "result": {
                "photos": [
                    {"photo_reference": "ref-a", "width": 1024, "height": 768},
                    {"photo_reference": "ref-b"},
                ]
            },
        }
    )

    photos = _client(lookup).fetch_place_photos("ChIJ-glow")

    assert [photo.reference for photo in photos] == ["ref-a", "ref-b"]
    assert (photos[0].width, photos[0].height) == (1024, 768)
    url = urlsplit(photos[0].url)
    assert url.path.endswith("/photo")
    assert parse_qs(url.query) == {
        "key": ["test-key"],
        "photoreference": ["ref-a"],
        "maxwidth": ["800"],
    }
    assert lookup.calls == [("ChIJ-glow", True)]


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("connection refused"),
        httpx.DecodingError("not json"),
        PlacesAPIError("Places API returned OVER_QUERY_LIMIT"),
    ],
    ids=["transport", "decoding", "api-status"],
)
def test_failures_degrade(error: Exception, caplog: pytest.LogCaptureFixture) -> None:
    client = _client(FakeLookup(error=error))

    with caplog.at_level(logging.WARNING), pytest.raises(PlacesUnavailableError) as excinfo:
        client.fetch_place_details("ChIJ-glow")

    assert isinstance(excinfo.value, DependencyDegradedError)
    assert "ChIJ-glow" in caplog.text


def test_invalid_payload_degrades() -> None:
    client = _client(FakeLookup({"result": {}}))

    with pytest.raises(PlacesUnavailableError):
        client.fetch_place_photos("ChIJ-glow")


def test_unmodeled_keys_are_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    payload = {"status": "OK", "result": {"formatted_phone_number_xyz": "1"}}

    with caplog.at_level(logging.WARNING):
        PlaceDetailsResponse.model_validate(payload)
        PlaceDetailsResponse.model_validate(payload)

    messages = [record.message for record in caplog.records if "unmodeled" in record.message]
    assert messages == ["Google Places PlaceDetailsResult: unmodeled keys: formatted_phone_number_xyz"]
