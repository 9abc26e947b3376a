"""Custom exception hierarchy for lance-context.

All application exceptions inherit from :class:`LanceContextError`, which
carries an optional ``provider_name`` so error handlers can identify which
embedding backend (e.g. "jina", "openai", "ollama") caused the failure.

    LanceContextError  (base -- catch-all for any lance-context error)
    +-- ConfigurationError        (missing credential / invalid config)
    +-- ProviderUnavailableError  (backend unreachable or misconfigured)
    +-- EmbeddingAPIError         (non-2xx HTTP response)
    |   +-- AuthenticationError   (401 / 403)
    +-- AllBackendsFailedError    (every fallback candidate failed)

The backend factory treats any error raised while a candidate is being
constructed or initialized as "try the next candidate".  Once a backend is
selected, its errors reach the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from lance_context.providers.embedding.factory import CandidateOutcome


class LanceContextError(Exception):
    """Base exception for all lance-context errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[jina] Jina API error: 401``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Construction / initialization errors
# ---------------------------------------------------------------------------

class ConfigurationError(LanceContextError):
    """Raised when a backend is constructed without a required setting (API key)."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(LanceContextError):
    """Raised when a backend fails ``initialize()``.

    The backend factory catches this to try the next candidate in the
    fallback chain.
    """

    def __init__(
        self,
        message: str = "Embedding backend is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# HTTP errors
# ---------------------------------------------------------------------------

class EmbeddingAPIError(LanceContextError):
    """Raised when an embedding API answers with a non-success status.

    Carries the HTTP ``status_code`` and raw response ``body`` so callers
    can log or inspect what the service actually said.
    """

    def __init__(
        self,
        status_code: int,
        body: str = "",
        message: str | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._status_code = status_code
        self._body = body
        if message is None:
            message = f"API error: {status_code} - {body}"
        super().__init__(message=message, provider_name=provider_name)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def body(self) -> str:
        return self._body


class AuthenticationError(EmbeddingAPIError):
    """Raised when the API rejects the configured credentials (401/403)."""


def api_error_for_status(
    status_code: int,
    body: str,
    message: str,
    provider_name: str | None = None,
) -> EmbeddingAPIError:
    """Build the right :class:`EmbeddingAPIError` subclass for *status_code*."""
    error_cls = AuthenticationError if status_code in (401, 403) else EmbeddingAPIError
    return error_cls(
        status_code=status_code,
        body=body,
        message=message,
        provider_name=provider_name,
    )


# ---------------------------------------------------------------------------
# Fallback chain errors
# ---------------------------------------------------------------------------

class AllBackendsFailedError(LanceContextError):
    """Raised by the backend factory when every candidate failed.

    ``outcomes`` holds one :class:`CandidateOutcome` per candidate tried, in
    priority order, each with the error that disqualified it.
    """

    def __init__(
        self,
        outcomes: Sequence[CandidateOutcome] = (),
        message: str = (
            "No embedding backend available. Set OPENAI_API_KEY or JINA_API_KEY, "
            "or install and start Ollama (https://ollama.com)."
        ),
    ) -> None:
        self._outcomes = tuple(outcomes)
        if self._outcomes:
            details = "; ".join(f"{o.name}: {o.error}" for o in self._outcomes)
            message = f"{message} Tried: {details}"
        super().__init__(message=message)

    @property
    def outcomes(self) -> tuple[CandidateOutcome, ...]:
        return self._outcomes
