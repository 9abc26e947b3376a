"""Jina AI embedding backend.

Wraps ``POST https://api.jina.ai/v1/embeddings`` to implement
:class:`IEmbeddingBackend` using ``jina-embeddings-v3`` (1024 dimensions).
Requires an API key; Jina's free tier is enough for indexing a small
codebase.
"""

from __future__ import annotations

import httpx
import structlog

from lance_context.interfaces.embedding_backend import IEmbeddingBackend
from lance_context.models.embedding import EmbeddingConfig
from lance_context.utils.errors import (
    ConfigurationError,
    ProviderUnavailableError,
    api_error_for_status,
)
from lance_context.utils.logging import get_logger
from lance_context.utils.retry import DEFAULT_RETRY_POLICY, RetryPolicy, request_with_retry

logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_JINA_BASE_URL = "https://api.jina.ai/v1"
DEFAULT_JINA_MODEL = "jina-embeddings-v3"
_JINA_DIMENSIONS = 1024


class JinaEmbeddingBackend(IEmbeddingBackend):
    """Embedding backend backed by the Jina AI embeddings API.

    Single and batch embeds hit the same endpoint; a batch simply sends
    several inputs in one request.  Jina returns vectors in request order.
    """

    def __init__(
        self,
        config: EmbeddingConfig,
        http_client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        timeout: float | None = 120.0,
    ) -> None:
        if not config.api_key:
            raise ConfigurationError(
                message="Jina API key is required. Set JINA_API_KEY environment variable.",
                provider_name="jina",
            )
        self._api_key = config.api_key
        self._model = config.model or DEFAULT_JINA_MODEL
        self._base_url = (config.base_url or DEFAULT_JINA_BASE_URL).rstrip("/")
        self._retry_policy = retry_policy
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    # ------------------------------------------------------------------
    # IEmbeddingBackend implementation
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "jina"

    @property
    def base_url(self) -> str:
        return self._base_url

    async def initialize(self) -> None:
        """Validate the API key with a one-word embedding request.

        Any failure (rejected key, server error, unreadable body, network)
        becomes :class:`ProviderUnavailableError`; the original error is kept
        as ``__cause__``.
        """
        try:
            await self.embed("test")
        except Exception as exc:  # noqa: BLE001 - every failure means "unavailable"
            raise ProviderUnavailableError(
                message=f"Failed to initialize Jina backend: {exc}",
                provider_name=self.name,
            ) from exc
        logger.info("jina_backend_initialized", model=self._model)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        response = await request_with_retry(
            self._client,
            "POST",
            f"{self._base_url}/embeddings",
            policy=self._retry_policy,
            headers={"Authorization": f"Bearer {self._api_key}"},
            json={"model": self._model, "input": texts},
        )
        if not response.is_success:
            raise api_error_for_status(
                response.status_code,
                response.text,
                message=f"Jina API error: {response.status_code} - {response.text}",
                provider_name=self.name,
            )

        data = response.json()
        embeddings = [item["embedding"] for item in data["data"]]
        logger.debug("jina_embedding_batch", model=self._model, batch_size=len(texts))
        return embeddings

    def get_dimensions(self) -> int:
        return _JINA_DIMENSIONS

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
