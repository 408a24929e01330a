"""Tests for call_with_backoff."""

import asyncio

import pytest

from nutripal.l1_entities.errors import (
    ConnectionFailedError,
    RateLimitExhausted,
    RetryableUpstreamError,
    TransportFailure,
    UpstreamRejected,
)
from nutripal.l2_use_cases.utils.backoff import call_with_backoff
from tests.conftest import RecordingSleep


def scripted(*results):
    """Async callable returning/raising *results* in order; counts calls."""
    queue = list(results)
    calls = []

    async def attempt():
        calls.append(1)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return attempt, calls


class TestCallWithBackoff:
    @pytest.mark.asyncio
    async def test_first_try_no_sleep(self):
        attempt, calls = scripted('ok')
        sleep = RecordingSleep()
        assert await call_with_backoff(attempt, sleep=sleep) == 'ok'
        assert len(calls) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_delays_double(self):
        attempt, calls = scripted(RetryableUpstreamError(500), RetryableUpstreamError(502), 'ok')
        sleep = RecordingSleep()
        assert await call_with_backoff(attempt, initial_delay=1.0, sleep=sleep) == 'ok'
        assert sleep.delays == [1.0, 2.0]
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_last_failure_decides_error_type(self):
        attempt, _ = scripted(ConnectionFailedError('refused'), RetryableUpstreamError(429))
        with pytest.raises(RateLimitExhausted) as exc_info:
            await call_with_backoff(attempt, max_attempts=2, sleep=RecordingSleep())
        assert exc_info.value.last_status == 429

    @pytest.mark.asyncio
    async def test_connection_failures_exhaust(self):
        attempt, _ = scripted(RetryableUpstreamError(503), ConnectionFailedError('timeout'))
        with pytest.raises(TransportFailure) as exc_info:
            await call_with_backoff(attempt, max_attempts=2, sleep=RecordingSleep())
        assert exc_info.value.attempts == 2
        assert isinstance(exc_info.value.__cause__, ConnectionFailedError)

    @pytest.mark.asyncio
    async def test_non_retryable_propagates(self):
        attempt, calls = scripted(UpstreamRejected('bad request', status=400), 'never')
        sleep = RecordingSleep()
        with pytest.raises(UpstreamRejected):
            await call_with_backoff(attempt, sleep=sleep)
        assert len(calls) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_single_attempt_never_sleeps(self):
        attempt, _ = scripted(RetryableUpstreamError(429))
        sleep = RecordingSleep()
        with pytest.raises(RateLimitExhausted):
            await call_with_backoff(attempt, max_attempts=1, sleep=sleep)
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_zero_attempts_rejected(self):
        attempt, _ = scripted('ok')
        with pytest.raises(ValueError, match='max_attempts'):
            await call_with_backoff(attempt, max_attempts=0)

    @pytest.mark.asyncio
    async def test_cancel_during_backoff_wait(self):
        attempt, calls = scripted(RetryableUpstreamError(429), 'never reached')
        waiting = asyncio.Event()
        release = asyncio.Event()

        async def blocking_sleep(seconds: float) -> None:
            waiting.set()
            await release.wait()

        task = asyncio.create_task(call_with_backoff(attempt, sleep=blocking_sleep))
        await waiting.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(calls) == 1
