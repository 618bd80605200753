"""Tests for ResilientHttpClient using an in-process mock transport."""

import json

import httpx
import pytest

from glossia.core import ApiError, HttpError, NetworkError, ParseError
from glossia.services.http import (
    CircuitBreaker,
    CircuitState,
    OPEN_CIRCUIT_MESSAGE,
    RateLimiter,
    RequestTracker,
    ResilientHttpClient,
    RetryConfig,
)

URL = "https://api.test/v1/thing"


class ScriptedTransport:
    """Returns queued responses (or raises queued exceptions) and records requests."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_client(script, recording_sleep, **kwargs):
    kwargs.setdefault("retry_config", RetryConfig(max_retries=2, jitter=False))
    kwargs.setdefault("rate_limiter", RateLimiter(max_tokens=100))
    return ResilientHttpClient(transport=httpx.MockTransport(script), sleep=recording_sleep, **kwargs)


class TestResilientHttpClientBasics:
    @pytest.mark.asyncio
    async def test_get_json_returns_object(self, recording_sleep):
        script = ScriptedTransport(httpx.Response(200, json={"value": 1}))
        async with make_client(script, recording_sleep) as client:
            assert await client.get_json(URL) == {"value": 1}
        assert script.requests[0].method == "GET"

    @pytest.mark.asyncio
    async def test_post_sends_json_body_and_headers(self, recording_sleep):
        script = ScriptedTransport(httpx.Response(200, json={"ok": True}))
        async with make_client(script, recording_sleep).with_headers({"X-Key": "secret"}) as client:
            await client.post_json(URL, {"q": "sea"})

        request = script.requests[0]
        assert request.headers["X-Key"] == "secret"
        assert json.loads(request.content) == {"q": "sea"}

    @pytest.mark.asyncio
    async def test_non_object_body_is_parse_error(self, recording_sleep):
        script = ScriptedTransport(httpx.Response(200, json=[1, 2, 3]))
        async with make_client(script, recording_sleep) as client:
            with pytest.raises(ParseError):
                await client.get_json(URL)

    @pytest.mark.asyncio
    async def test_copies_share_resilience_state(self, recording_sleep):
        client = make_client(ScriptedTransport(httpx.Response(200)), recording_sleep)
        copy = client.with_headers({"A": "b"}).with_timeout(5.0)
        assert copy.circuit_breaker is client.circuit_breaker
        assert copy.rate_limiter is client.rate_limiter
        assert copy.request_tracker is client.request_tracker
        assert copy.timeout == 5.0
        await copy.aclose()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_closing_a_copy_closes_the_shared_pool(self, recording_sleep):
        """Providers close their own copy; the base client must not be left open."""
        client = make_client(ScriptedTransport(httpx.Response(200)), recording_sleep)
        copy = client.with_headers({"Authorization": "Bearer sk-test"})

        await copy.aclose()

        assert client.is_closed

    @pytest.mark.asyncio
    async def test_copy_timeout_applies_per_request(self, recording_sleep):
        script = ScriptedTransport(httpx.Response(200, json={"ok": True}))
        async with make_client(script, recording_sleep).with_timeout(5.0) as client:
            await client.get(URL)
        assert script.requests[0].extensions["timeout"]["read"] == 5.0


class TestRetries:
    """Tests for retry behaviour through the transport."""

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self, recording_sleep):
        script = ScriptedTransport(httpx.Response(503), httpx.Response(200, json={"ok": 1}))
        async with make_client(script, recording_sleep) as client:
            assert await client.get(URL) == {"ok": 1}
        assert len(script.requests) == 2
        assert len(recording_sleep.delays) == 1

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_network_error(self, recording_sleep):
        script = ScriptedTransport(httpx.ConnectError("refused"))
        async with make_client(script, recording_sleep) as client:
            with pytest.raises(NetworkError):
                await client.get(URL)
        assert len(script.requests) == 3

    @pytest.mark.asyncio
    async def test_timeout_becomes_network_error(self, recording_sleep):
        script = ScriptedTransport(httpx.ReadTimeout("slow"))
        async with make_client(script, recording_sleep, retry_config=RetryConfig(max_retries=0)) as client:
            with pytest.raises(NetworkError):
                await client.get(URL)

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self, recording_sleep):
        script = ScriptedTransport(httpx.Response(404, json={"message": "gone"}))
        async with make_client(script, recording_sleep) as client:
            with pytest.raises(HttpError) as excinfo:
                await client.get(URL)
        assert excinfo.value.status == 404
        assert len(script.requests) == 1


class TestCircuitBreakerIntegration:
    @pytest.mark.asyncio
    async def test_open_breaker_blocks_post_without_network(self, recording_sleep, fake_clock):
        script = ScriptedTransport(httpx.Response(401, text="denied"))
        breaker = CircuitBreaker(failure_threshold=2, clock=fake_clock)
        async with make_client(script, recording_sleep, circuit_breaker=breaker) as client:
            for _ in range(2):
                with pytest.raises(HttpError):
                    await client.post(URL, {"n": 1})
            assert breaker.state is CircuitState.OPEN
            sent = len(script.requests)

            with pytest.raises(ApiError) as excinfo:
                await client.post(URL, {"n": 1})

        assert excinfo.value.message == OPEN_CIRCUIT_MESSAGE
        assert len(script.requests) == sent == 2

    @pytest.mark.asyncio
    async def test_get_bypasses_breaker(self, recording_sleep, fake_clock):
        breaker = CircuitBreaker(failure_threshold=1, clock=fake_clock)
        script = ScriptedTransport(httpx.Response(401, text="denied"))
        async with make_client(script, recording_sleep, circuit_breaker=breaker) as client:
            for _ in range(3):
                with pytest.raises(HttpError):
                    await client.get(URL)
        assert breaker.state is CircuitState.CLOSED


class TestDuplicateTracking:
    @pytest.mark.asyncio
    async def test_duplicate_posts_are_tracked_but_both_sent(self, recording_sleep, fake_clock):
        tracker = RequestTracker(clock=fake_clock)
        script = ScriptedTransport(httpx.Response(200, json={"ok": True}))
        async with make_client(script, recording_sleep, request_tracker=tracker) as client:
            await client.post(URL, {"prompt": "same"})
            fake_clock.advance(0.5)
            await client.post(URL, {"prompt": "same"})

        assert len(script.requests) == 2
        stats = tracker.get_stats()
        assert stats.total_requests == 2
        assert stats.duplicate_requests == 1
