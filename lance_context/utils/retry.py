"""HTTP request helper with exponential-backoff retry.

Embedding APIs fail transiently in a few well-known ways: rate limiting
(429), request timeouts (408), server errors (5xx) and dropped connections.
:func:`request_with_retry` retries those with a doubling delay capped at
``max_delay``; every other response is handed back immediately so the
calling backend can turn it into a descriptive error.

On the last attempt the response is returned even when its status is still
retryable, and a transport error is re-raised unchanged.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from lance_context.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_RETRYABLE_STATUSES = frozenset({408, 429})


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry and how long to wait between attempts (seconds)."""

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0

    def delay_for(self, attempt: int) -> float:
        """Backoff before retry number ``attempt + 1`` (attempt is 0-based)."""
        return min(self.base_delay * (2**attempt), self.max_delay)


DEFAULT_RETRY_POLICY = RetryPolicy()


def is_retryable_status(status_code: int) -> bool:
    return status_code in _RETRYABLE_STATUSES or 500 <= status_code < 600


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    **kwargs: Any,
) -> httpx.Response:
    """Send ``method url`` through *client*, retrying transient failures.

    Parameters
    ----------
    client:
        The async client to send the request with.
    method, url:
        Passed straight to :meth:`httpx.AsyncClient.request`.
    policy:
        Retry count and backoff bounds.
    **kwargs:
        Extra request arguments (``json``, ``headers``, ``timeout`` ...).

    Returns
    -------
    httpx.Response
        The first non-retryable response, or the last response received.

    Raises
    ------
    httpx.TransportError
        If the final attempt fails at the network level.
    """
    for attempt in range(policy.max_retries + 1):
        is_last = attempt == policy.max_retries
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            if is_last:
                raise
            delay = policy.delay_for(attempt)
            _logger.warning(
                "http_retry_scheduled",
                url=url,
                error=str(exc),
                delay=delay,
                attempt=attempt + 1,
                max_retries=policy.max_retries,
            )
            await asyncio.sleep(delay)
            continue

        if not is_retryable_status(response.status_code) or is_last:
            return response

        delay = policy.delay_for(attempt)
        _logger.warning(
            "http_retry_scheduled",
            url=url,
            status_code=response.status_code,
            delay=delay,
            attempt=attempt + 1,
            max_retries=policy.max_retries,
        )
        await asyncio.sleep(delay)

    # Unreachable: the loop always returns or raises on its last attempt.
    raise RuntimeError("request_with_retry exhausted without a result")
