"""Unit tests for the HTTP retry helper."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from lance_context.utils.retry import RetryPolicy, is_retryable_status, request_with_retry

_SLEEP = "lance_context.utils.retry.asyncio.sleep"


def _sequence_client(outcomes: list) -> tuple[httpx.AsyncClient, list[httpx.Request]]:
    """Client whose n-th request yields outcomes[n] (a status code or an exception)."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        outcome = outcomes[len(requests)]
        requests.append(request)
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, text=f"status {outcome}")

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), requests


class TestRetryPolicy:
    def test_exponential_backoff_capped(self) -> None:
        policy = RetryPolicy(max_retries=5, base_delay=1.0, max_delay=10.0)
        assert [policy.delay_for(a) for a in range(5)] == [1.0, 2.0, 4.0, 8.0, 10.0]

    @pytest.mark.parametrize("status", [408, 429, 500, 502, 503, 599])
    def test_retryable_statuses(self, status: int) -> None:
        assert is_retryable_status(status) is True

    @pytest.mark.parametrize("status", [200, 400, 401, 403, 404, 422])
    def test_non_retryable_statuses(self, status: int) -> None:
        assert is_retryable_status(status) is False


class TestRequestWithRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self) -> None:
        client, requests = _sequence_client([200])
        with patch(_SLEEP, new=AsyncMock()) as sleep:
            async with client:
                response = await request_with_retry(client, "GET", "http://svc/x")

        assert response.status_code == 200
        assert len(requests) == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_server_errors_then_succeeds(self) -> None:
        client, requests = _sequence_client([503, 429, 200])
        with patch(_SLEEP, new=AsyncMock()) as sleep:
            async with client:
                response = await request_with_retry(client, "POST", "http://svc/x", json={"a": 1})

        assert response.status_code == 200
        assert len(requests) == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_non_retryable_status_returned_immediately(self) -> None:
        client, requests = _sequence_client([401])
        with patch(_SLEEP, new=AsyncMock()) as sleep:
            async with client:
                response = await request_with_retry(client, "GET", "http://svc/x")

        assert response.status_code == 401
        assert len(requests) == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_returns_last_response_when_exhausted(self) -> None:
        client, requests = _sequence_client([500, 500, 500])
        policy = RetryPolicy(max_retries=2, base_delay=0.5, max_delay=10.0)
        with patch(_SLEEP, new=AsyncMock()):
            async with client:
                response = await request_with_retry(client, "GET", "http://svc/x", policy=policy)

        assert response.status_code == 500
        assert len(requests) == 3

    @pytest.mark.asyncio
    async def test_retries_transport_errors(self) -> None:
        client, requests = _sequence_client([httpx.ConnectError("refused"), 200])
        with patch(_SLEEP, new=AsyncMock()):
            async with client:
                response = await request_with_retry(client, "GET", "http://svc/x")

        assert response.status_code == 200
        assert len(requests) == 2

    @pytest.mark.asyncio
    async def test_reraises_final_transport_error(self) -> None:
        client, _ = _sequence_client([httpx.ConnectError("refused")] * 2)
        policy = RetryPolicy(max_retries=1)
        with patch(_SLEEP, new=AsyncMock()):
            async with client:
                with pytest.raises(httpx.ConnectError):
                    await request_with_retry(client, "GET", "http://svc/x", policy=policy)
