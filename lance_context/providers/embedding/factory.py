"""Embedding backend selection: an ordered fallback chain.

Candidates are tried strictly in priority order, one at a time:

    OpenAI  (only if an OpenAI API key is configured)
    Jina    (only if a Jina API key is configured)
    Ollama  (always -- needs no credentials, so it is the terminal candidate)

Each candidate moves ``NOT_TRIED -> TRYING -> SELECTED | FAILED``.  The
first candidate that both constructs and initializes wins and is returned
immediately; a failure is logged and the next candidate is tried.  When
every candidate fails, :class:`AllBackendsFailedError` carries all the
outcomes.  There is no parallel trial and no retry at this level.

The factory never reads the process environment.  :class:`Settings` is the
outer adapter that does, and callers pass a resolved instance in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

import httpx
import structlog

from lance_context.config.settings import Settings
from lance_context.interfaces.embedding_backend import IEmbeddingBackend
from lance_context.models.embedding import EmbeddingBackendType, EmbeddingConfig
from lance_context.providers.embedding.jina_backend import JinaEmbeddingBackend
from lance_context.providers.embedding.ollama_backend import OllamaEmbeddingBackend
from lance_context.providers.embedding.openai_backend import OpenAIEmbeddingBackend
from lance_context.utils.errors import AllBackendsFailedError
from lance_context.utils.logging import get_logger
from lance_context.utils.retry import DEFAULT_RETRY_POLICY, RetryPolicy

logger: structlog.BoundLogger = get_logger(__name__)


class CandidateStatus(str, Enum):
    NOT_TRIED = "not_tried"
    TRYING = "trying"
    SELECTED = "selected"
    FAILED = "failed"


@dataclass(frozen=True)
class BackendCandidate:
    """A named, zero-argument supplier of an (uninitialized) backend."""

    name: str
    build: Callable[[], IEmbeddingBackend]


@dataclass
class CandidateOutcome:
    """What happened when a candidate was tried."""

    name: str
    status: CandidateStatus = CandidateStatus.NOT_TRIED
    backend: IEmbeddingBackend | None = None
    error: BaseException | None = None


async def select_backend(candidates: Sequence[BackendCandidate]) -> IEmbeddingBackend:
    """Return the first candidate that constructs and initializes.

    Raises
    ------
    AllBackendsFailedError
        If every candidate failed (or *candidates* is empty).
    """
    outcomes = [CandidateOutcome(name=c.name) for c in candidates]

    for candidate, outcome in zip(candidates, outcomes):
        outcome.status = CandidateStatus.TRYING
        backend: IEmbeddingBackend | None = None
        try:
            backend = candidate.build()
            await backend.initialize()
        except Exception as exc:  # noqa: BLE001 - any failure means "try the next one"
            outcome.status = CandidateStatus.FAILED
            outcome.error = exc
            logger.warning("embedding_backend_failed", backend=candidate.name, error=str(exc))
            if backend is not None:
                try:
                    await backend.aclose()
                except Exception as close_exc:  # noqa: BLE001 - keep walking the chain
                    logger.warning(
                        "embedding_backend_close_failed",
                        backend=candidate.name,
                        error=str(close_exc),
                    )
            continue

        outcome.status = CandidateStatus.SELECTED
        outcome.backend = backend
        logger.info(
            "embedding_backend_selected",
            backend=backend.name,
            dimensions=backend.get_dimensions(),
        )
        return backend

    logger.error("embedding_backend_unavailable", tried=[o.name for o in outcomes])
    raise AllBackendsFailedError(outcomes=outcomes)


def build_candidates(
    settings: Settings,
    overrides: EmbeddingConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
    retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
) -> list[BackendCandidate]:
    """Build the fallback chain from resolved *settings*.

    *overrides* targets one backend: its ``api_key``, ``model``, ``base_url``
    and ``batch_size`` win over *settings* for the backend named by
    ``overrides.backend``.  ``LOCAL`` overrides apply to the local fallback
    (Ollama).  An override key for OpenAI or Jina puts that backend in the
    chain even when *settings* has no key for it.
    """

    def _override(*backends: EmbeddingBackendType) -> EmbeddingConfig | None:
        if overrides is not None and overrides.backend in backends:
            return overrides
        return None

    timeout = settings.http_timeout
    candidates: list[BackendCandidate] = []

    # Priority 1: OpenAI (if an API key is available)
    openai_override = _override(EmbeddingBackendType.OPENAI)
    openai_config = EmbeddingConfig(
        backend=EmbeddingBackendType.OPENAI,
        api_key=(openai_override and openai_override.api_key) or settings.openai_api_key or None,
        model=(openai_override and openai_override.model) or settings.openai_embedding_model or None,
        base_url=(openai_override and openai_override.base_url) or settings.openai_base_url or None,
    )
    if openai_config.api_key:
        candidates.append(
            BackendCandidate(
                name="openai",
                build=lambda: OpenAIEmbeddingBackend(openai_config, http_client=http_client),
            )
        )

    # Priority 2: Jina (if an API key is available)
    jina_override = _override(EmbeddingBackendType.JINA)
    jina_config = EmbeddingConfig(
        backend=EmbeddingBackendType.JINA,
        api_key=(jina_override and jina_override.api_key) or settings.jina_api_key or None,
        model=(jina_override and jina_override.model) or settings.jina_embedding_model or None,
        base_url=jina_override.base_url if jina_override else None,
    )
    if jina_config.api_key:
        candidates.append(
            BackendCandidate(
                name="jina",
                build=lambda: JinaEmbeddingBackend(
                    jina_config,
                    http_client=http_client,
                    retry_policy=retry_policy,
                    timeout=timeout,
                ),
            )
        )

    # Priority 3: Ollama (local fallback, always present)
    ollama_override = _override(EmbeddingBackendType.OLLAMA, EmbeddingBackendType.LOCAL)
    ollama_config = EmbeddingConfig(
        backend=EmbeddingBackendType.OLLAMA,
        model=(ollama_override and ollama_override.model) or settings.ollama_embedding_model or None,
        base_url=(ollama_override and ollama_override.base_url) or settings.ollama_url or None,
        batch_size=(ollama_override and ollama_override.batch_size) or settings.ollama_batch_size,
    )
    candidates.append(
        BackendCandidate(
            name="ollama",
            build=lambda: OllamaEmbeddingBackend(
                ollama_config,
                http_client=http_client,
                retry_policy=retry_policy,
                timeout=timeout,
            ),
        )
    )

    return candidates


async def create_embedding_backend(
    settings: Settings,
    overrides: EmbeddingConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
    retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
) -> IEmbeddingBackend:
    """Select an embedding backend: OpenAI -> Jina -> Ollama, first success wins.

    Errors raised by the returned backend's embed calls are not caught here;
    fallback only applies while selecting.

    Raises
    ------
    AllBackendsFailedError
        If no backend could be constructed and initialized.
    """
    candidates = build_candidates(
        settings,
        overrides=overrides,
        http_client=http_client,
        retry_policy=retry_policy,
    )
    logger.debug(
        "embedding_backend_candidates",
        configured=settings.get_available_embedding_backends(),
        candidates=[c.name for c in candidates],
    )
    return await select_backend(candidates)
