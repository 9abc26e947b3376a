"""OpenAI-compatible embedding backend.

Wraps the ``openai`` async client to implement :class:`IEmbeddingBackend`.
Works against api.openai.com or any OpenAI-compatible service via a custom
base URL.  The API key is validated with a cheap ``GET /models`` call so
start-up never spends tokens.
"""

from __future__ import annotations

from typing import Any

import httpx
import openai
import structlog

from lance_context.interfaces.embedding_backend import IEmbeddingBackend
from lance_context.models.embedding import EmbeddingConfig
from lance_context.utils.errors import (
    ConfigurationError,
    ProviderUnavailableError,
    api_error_for_status,
)
from lance_context.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_OPENAI_MODEL = "text-embedding-3-small"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
_DEFAULT_DIMENSIONS = 1536

# Known embedding model dimensions.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbeddingBackend(IEmbeddingBackend):
    """Embedding backend backed by an OpenAI-compatible embeddings API.

    Uses ``text-embedding-3-small`` (1536 dims) by default.  Models missing
    from the dimension table are assumed to produce 1536 dimensions.
    """

    def __init__(
        self,
        config: EmbeddingConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not config.api_key:
            raise ConfigurationError(
                message="OpenAI API key is required. Set OPENAI_API_KEY environment variable.",
                provider_name="openai",
            )
        self._model = config.model or DEFAULT_OPENAI_MODEL
        self._dimensions = _MODEL_DIMENSIONS.get(self._model, _DEFAULT_DIMENSIONS)
        self._base_url = config.base_url or DEFAULT_OPENAI_BASE_URL

        self._owns_client = http_client is None
        client_kwargs: dict[str, Any] = {"api_key": config.api_key, "base_url": self._base_url}
        if http_client is not None:
            client_kwargs["http_client"] = http_client
        self._client = openai.AsyncOpenAI(**client_kwargs)

    # ------------------------------------------------------------------
    # IEmbeddingBackend implementation
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "openai"

    async def initialize(self) -> None:
        """Validate the API key by listing models (no embedding is generated)."""
        try:
            await self._client.models.list()
        except openai.APIStatusError as exc:
            raise api_error_for_status(
                exc.status_code,
                exc.response.text,
                message=f"OpenAI API error: {exc.status_code} {exc.message}",
                provider_name=self.name,
            ) from exc
        except openai.APIConnectionError as exc:
            raise ProviderUnavailableError(
                message=f"Failed to reach OpenAI at {self._base_url}: {exc}",
                provider_name=self.name,
            ) from exc
        logger.info("openai_backend_initialized", model=self._model, base_url=self._base_url)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed all *texts* in one request, re-ordered by the returned ``index``."""
        if not texts:
            return []

        try:
            response = await self._client.embeddings.create(input=texts, model=self._model)
        except openai.APIStatusError as exc:
            raise api_error_for_status(
                exc.status_code,
                exc.response.text,
                message=f"OpenAI embedding error: {exc.status_code} {exc.response.text}",
                provider_name=self.name,
            ) from exc

        ordered = sorted(response.data, key=lambda item: item.index)
        logger.debug(
            "openai_embedding_batch",
            model=self._model,
            batch_size=len(texts),
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return [item.embedding for item in ordered]

    def get_dimensions(self) -> int:
        return self._dimensions

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.close()
