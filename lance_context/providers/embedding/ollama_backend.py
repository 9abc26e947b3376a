"""Ollama embedding backend (local, no API key).

Talks to a local Ollama server through its native HTTP API:
``GET /api/tags`` to check the server is up and the model is pulled, and
``POST /api/embed`` for batched embeddings.  This is the terminal
candidate of the fallback chain because it needs no credentials.

Setup: install Ollama (https://ollama.com), then ``ollama pull nomic-embed-text``.
"""

from __future__ import annotations

import httpx
import structlog

from lance_context.interfaces.embedding_backend import IEmbeddingBackend
from lance_context.models.embedding import EmbeddingConfig, chunk_texts
from lance_context.utils.errors import (
    EmbeddingAPIError,
    ProviderUnavailableError,
    api_error_for_status,
)
from lance_context.utils.logging import get_logger
from lance_context.utils.retry import DEFAULT_RETRY_POLICY, RetryPolicy, request_with_retry

logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "nomic-embed-text"
DEFAULT_OLLAMA_BATCH_SIZE = 50
_DEFAULT_DIMENSIONS = 1024

# Model dimension defaults; Ollama does not report them up front.
_MODEL_DIMENSIONS: dict[str, int] = {
    "nomic-embed-text": 768,
    "mxbai-embed-large": 1024,
    "all-minilm": 384,
    "qwen3-embedding:0.6b": 1024,
    "qwen3-embedding:4b": 1024,
    "qwen3-embedding:8b": 1024,
}


class OllamaEmbeddingBackend(IEmbeddingBackend):
    """Embedding backend backed by a local Ollama server.

    Batches larger than ``batch_size`` are split and sent one request at a
    time; Ollama processes requests sequentially anyway.  The model is kept
    loaded for ten minutes between requests.
    """

    def __init__(
        self,
        config: EmbeddingConfig,
        http_client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        timeout: float | None = 120.0,
    ) -> None:
        self._model = config.model or DEFAULT_OLLAMA_MODEL
        self._base_url = (config.base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self._batch_size = config.batch_size or DEFAULT_OLLAMA_BATCH_SIZE
        self._dimensions = _MODEL_DIMENSIONS.get(self._model, _DEFAULT_DIMENSIONS)
        self._retry_policy = retry_policy
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # IEmbeddingBackend implementation
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "ollama"

    async def initialize(self) -> None:
        """Check the server is reachable and the model has been pulled."""
        try:
            response = await request_with_retry(
                self._client,
                "GET",
                f"{self._base_url}/api/tags",
                policy=self._retry_policy,
            )
        except httpx.TransportError as exc:
            raise ProviderUnavailableError(
                message=(
                    f"Failed to connect to Ollama at {self._base_url}. "
                    "Make sure Ollama is installed (https://ollama.com) and running, "
                    f"then pull the embedding model: ollama pull {self._model}. "
                    f"Original error: {exc}"
                ),
                provider_name=self.name,
            ) from exc

        if not response.is_success:
            raise api_error_for_status(
                response.status_code,
                response.text,
                message=f"Ollama server returned {response.status_code}",
                provider_name=self.name,
            )

        available = [m["name"] for m in response.json().get("models") or []]
        if not any(self._matches_model(name) for name in available):
            raise ProviderUnavailableError(
                message=(
                    f"Model '{self._model}' not found in Ollama. "
                    f"To install it, run: ollama pull {self._model}. "
                    f"Available models: {', '.join(available) if available else 'none'}"
                ),
                provider_name=self.name,
            )
        logger.info("ollama_backend_initialized", model=self._model, base_url=self._base_url)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts* in sequential chunks of ``batch_size``, preserving order."""
        if not texts:
            return []

        batches = chunk_texts(texts, self._batch_size)
        logger.info(
            "ollama_embedding_started",
            model=self._model,
            text_count=len(texts),
            batch_count=len(batches),
            batch_size=self._batch_size,
        )

        all_embeddings: list[list[float]] = []
        for number, batch in enumerate(batches, start=1):
            response = await request_with_retry(
                self._client,
                "POST",
                f"{self._base_url}/api/embed",
                policy=self._retry_policy,
                json={"model": self._model, "input": batch, "keep_alive": "10m"},
            )
            if not response.is_success:
                raise api_error_for_status(
                    response.status_code,
                    response.text,
                    message=f"Ollama embedding failed: {response.status_code} - {response.text}",
                    provider_name=self.name,
                )

            embeddings = response.json().get("embeddings") or []
            if len(embeddings) != len(batch):
                raise EmbeddingAPIError(
                    status_code=response.status_code,
                    body=response.text,
                    message=(
                        f"Ollama returned {len(embeddings)} embeddings "
                        f"for {len(batch)} inputs"
                    ),
                    provider_name=self.name,
                )
            all_embeddings.extend(embeddings)
            logger.debug(
                "ollama_embedding_batch",
                batch=number,
                batch_count=len(batches),
                batch_size=len(batch),
            )
        return all_embeddings

    def get_dimensions(self) -> int:
        return self._dimensions

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _matches_model(self, name: str) -> bool:
        # "nomic-embed-text" matches "nomic-embed-text:latest"
        return name == self._model or name.startswith(f"{self._model}:")
