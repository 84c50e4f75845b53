from __future__ import annotations

import asyncio

import httpx
import pytest

from clinic_intake.adapters.http_resilience import (
    ResilienceConfig,
    ResilientClient,
    RetryablePayloadError,
    RetryPolicy,
)
from clinic_intake.config.places import raise_on_throttled_payload

_NO_WAIT = RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0)


def _config(**overrides: object) -> ResilienceConfig:
    values: dict[str, object] = {
        "name": "test",
        "base_url": "https://api.test/",
        "retry": _NO_WAIT,
        "cache": None,
        "response_hooks": (raise_on_throttled_payload,),
    }
    values.update(overrides)
    return ResilienceConfig(**values)  # pyright: ignore[reportArgumentType]


def _get_json(client: ResilientClient) -> dict[str, object]:
    async def run() -> dict[str, object]:
        async with client:
            return await client.get_json("details/json")

    return asyncio.run(run())


def test_throttled_payload_is_retried() -> None:
    answers = [{"status": "OVER_QUERY_LIMIT"}, {"status": "OK", "result": {}}]
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=answers[len(calls) - 1])

    client = ResilientClient(_config(), transport=httpx.MockTransport(handler))

    payload = _get_json(client)

    assert payload["status"] == "OK"
    assert len(calls) == 2


def test_throttling_that_persists_surfaces_as_http_error() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"status": "OVER_QUERY_LIMIT"})

    client = ResilientClient(_config(), transport=httpx.MockTransport(handler))

    with pytest.raises(RetryablePayloadError):
        _get_json(client)
    assert len(calls) == 3


def test_hooks_leave_other_answers_alone() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"status": "ZERO_RESULTS"})

    client = ResilientClient(_config(), transport=httpx.MockTransport(handler))

    payload = _get_json(client)

    assert payload == {"status": "ZERO_RESULTS"}
    assert len(calls) == 1


def test_default_headers_are_sent() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "OK"})

    client = ResilientClient(
        _config(default_headers={"Accept": "application/json"}),
        transport=httpx.MockTransport(handler),
    )

    _get_json(client)

    [request] = seen
    assert request.headers["Accept"] == "application/json"
