from __future__ import annotations

import asyncio
from pathlib import Path  # noqa: TC003

import httpx
import pytest

from clinic_intake.config import (
    ConfigurationError,
    MissingConfigurationError,
    ResolutionConfig,
    get_database_config,
    get_places_config,
    get_resolution_config,
    get_storage_config,
)
from clinic_intake.config.http_resilience import RetryablePayloadError
from clinic_intake.config.places import (
    PLACES_BASE_URL,
    cache_successful_payloads,
    raise_on_throttled_payload,
)
from clinic_intake.config.storage import DEFAULT_DB_FILENAME


def test_storage_prefers_explicit_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("CLINIC_INTAKE_DATA_DIR", str(custom))

    assert get_storage_config().resolve_data_dir() == custom.resolve()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_uri_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("CLINIC_INTAKE_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_config().uri

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_places_config_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GOOGLE_PLACES_API_KEY", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_places_config()


def test_places_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "secret")
    monkeypatch.delenv("CLINIC_INTAKE_PLACES_CACHE", raising=False)

    config = get_places_config()

    assert config.api_key == "secret"
    assert config.review_limit == 5
    assert config.resilience.base_url == PLACES_BASE_URL
    assert config.resilience.cache is not None
    assert config.resilience.cache.backend == "memory"
    assert config.resilience.response_hooks == (raise_on_throttled_payload,)
    assert config.resilience.default_headers == {"Accept": "application/json"}


@pytest.mark.parametrize(("mode", "backend"), [("sqlite", "sqlite"), (" Memory ", "memory")])
def test_places_cache_backend_is_selectable(
    monkeypatch: pytest.MonkeyPatch,
    mode: str,
    backend: str,
) -> None:
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "secret")
    monkeypatch.setenv("CLINIC_INTAKE_PLACES_CACHE", mode)

    cache = get_places_config().resilience.cache

    assert cache is not None
    assert cache.backend == backend
    assert cache.should_cache is cache_successful_payloads


def test_places_cache_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "secret")
    monkeypatch.setenv("CLINIC_INTAKE_PLACES_CACHE", "off")

    assert get_places_config().resilience.cache is None


def test_places_cache_rejects_unknown_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "secret")
    monkeypatch.setenv("CLINIC_INTAKE_PLACES_CACHE", "redis")

    with pytest.raises(ConfigurationError):
        get_places_config()


def test_throttled_payload_raises_retryable_error() -> None:
    response = httpx.Response(200, json={"status": "OVER_QUERY_LIMIT"})

    with pytest.raises(RetryablePayloadError) as excinfo:
        asyncio.run(raise_on_throttled_payload(response))

    assert excinfo.value.response is response


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"status": "OK"}),
        httpx.Response(200, content=b"not json"),
        httpx.Response(503, json={"status": "OVER_QUERY_LIMIT"}),
    ],
)
def test_other_responses_pass_the_throttle_hook(response: httpx.Response) -> None:
    asyncio.run(raise_on_throttled_payload(response))


@pytest.mark.parametrize(
    ("payload", "expected"),
    [({"status": "OK"}, True), ({"status": "OVER_QUERY_LIMIT"}, False), (["OK"], False)],
)
def test_only_successful_payloads_are_cached(payload: object, expected: bool) -> None:  # noqa: FBT001
    assert cache_successful_payloads(payload) is expected


def test_resolution_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CLINIC_INTAKE_GOOGLE_PHOTO_LIMIT",
        "CLINIC_INTAKE_COMBINED_PHOTO_LIMIT",
        "CLINIC_INTAKE_MAX_APPROVAL_ATTEMPTS",
        "CLINIC_INTAKE_PROVIDER_FALLBACK",
    ):
        monkeypatch.delenv(name, raising=False)

    assert get_resolution_config() == ResolutionConfig()


def test_resolution_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLINIC_INTAKE_GOOGLE_PHOTO_LIMIT", "4")
    monkeypatch.setenv("CLINIC_INTAKE_MAX_APPROVAL_ATTEMPTS", "5")
    monkeypatch.setenv("CLINIC_INTAKE_PROVIDER_FALLBACK", "off")

    config = get_resolution_config()

    assert config.google_photo_limit == 4
    assert config.max_attempts == 5
    assert not config.fallback_to_first_provider


def test_resolution_config_rejects_zero_attempts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLINIC_INTAKE_MAX_APPROVAL_ATTEMPTS", "0")

    with pytest.raises(ConfigurationError):
        get_resolution_config()
