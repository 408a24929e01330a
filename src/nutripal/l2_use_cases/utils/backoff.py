"""Sequential retry with exponential backoff for one text-generation call."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from nutripal.l1_entities.errors import (
    ConnectionFailedError,
    RateLimitExhausted,
    RetryableUpstreamError,
    TransportFailure,
)

log = logging.getLogger('nutripal.llm')

T = TypeVar('T')

Sleep = Callable[[float], Awaitable[None]]


async def call_with_backoff(
    attempt: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 5,
    initial_delay: float = 1.0,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Await attempt() until it succeeds or max_attempts is reached.

    Retries RetryableUpstreamError (429/5xx) and ConnectionFailedError; anything
    else propagates on the spot. The delay doubles after every failed attempt
    (1s, 2s, 4s, ...) and no sleep follows the last one. Raises
    RateLimitExhausted or TransportFailure depending on how the last attempt failed.
    """
    if max_attempts < 1:
        raise ValueError(f'max_attempts must be >= 1, got {max_attempts}')
    delay = initial_delay
    for n in range(1, max_attempts + 1):
        try:
            return await attempt()
        except (RetryableUpstreamError, ConnectionFailedError) as e:
            if n == max_attempts:
                log.error('Attempt %d/%d failed, giving up: %s', n, max_attempts, e)
                if isinstance(e, RetryableUpstreamError):
                    raise RateLimitExhausted(attempts=n, last_status=e.status) from e
                raise TransportFailure(attempts=n, cause=e) from e
            log.warning('Attempt %d/%d failed (%s). Retrying in %.1fs', n, max_attempts, e, delay)
            await sleep(delay)
            delay *= 2
    raise AssertionError('unreachable')  # pragma: no cover
