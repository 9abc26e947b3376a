"""Unit tests for the lance-context exception hierarchy."""

from __future__ import annotations

import pytest

from lance_context.providers.embedding.factory import CandidateOutcome, CandidateStatus
from lance_context.utils.errors import (
    AllBackendsFailedError,
    AuthenticationError,
    ConfigurationError,
    EmbeddingAPIError,
    LanceContextError,
    ProviderUnavailableError,
    api_error_for_status,
)


class TestLanceContextError:
    def test_str_without_provider(self) -> None:
        assert str(LanceContextError("boom")) == "boom"

    def test_str_prefixes_provider(self) -> None:
        err = LanceContextError("boom", provider_name="jina")
        assert str(err) == "[jina] boom"
        assert err.message == "boom"
        assert err.provider_name == "jina"

    @pytest.mark.parametrize(
        "error_cls",
        [ConfigurationError, ProviderUnavailableError, AllBackendsFailedError],
    )
    def test_subclasses_share_base(self, error_cls: type[LanceContextError]) -> None:
        assert issubclass(error_cls, LanceContextError)


class TestEmbeddingAPIError:
    def test_default_message_carries_status_and_body(self) -> None:
        err = EmbeddingAPIError(status_code=502, body="bad gateway", provider_name="ollama")
        assert err.status_code == 502
        assert err.body == "bad gateway"
        assert str(err) == "[ollama] API error: 502 - bad gateway"

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses_map_to_authentication_error(self, status: int) -> None:
        err = api_error_for_status(status, "nope", message="denied")
        assert isinstance(err, AuthenticationError)
        assert isinstance(err, EmbeddingAPIError)
        assert err.status_code == status

    def test_other_statuses_map_to_api_error(self) -> None:
        err = api_error_for_status(500, "oops", message="server error", provider_name="jina")
        assert type(err) is EmbeddingAPIError
        assert str(err) == "[jina] server error"


class TestAllBackendsFailedError:
    def test_message_without_outcomes(self) -> None:
        message = str(AllBackendsFailedError())
        assert "OPENAI_API_KEY" in message
        assert "Ollama" in message

    def test_message_lists_each_failure(self) -> None:
        outcomes = [
            CandidateOutcome(name="jina", status=CandidateStatus.FAILED, error=ValueError("401")),
            CandidateOutcome(name="ollama", status=CandidateStatus.FAILED, error=OSError("refused")),
        ]
        err = AllBackendsFailedError(outcomes=outcomes)

        assert "jina: 401" in str(err)
        assert "ollama: refused" in str(err)
        assert err.outcomes == tuple(outcomes)
