"""Abstract base class for text-embedding backends.

Defines the contract every embedding provider implements.  Concrete
backends wrap the Jina, OpenAI and Ollama HTTP APIs; the backend factory
tries them in priority order and hands the first one that initializes to
the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations (lance_context/providers/embedding/):
#   OpenAIEmbeddingBackend: text-embedding-3-small (requires API key)
#   JinaEmbeddingBackend: jina-embeddings-v3 (requires API key)
#   OllamaEmbeddingBackend: nomic-embed-text via local Ollama server
class IEmbeddingBackend(ABC):
    """Contract for text-embedding services.

    A backend is constructed with its credentials and endpoint, validated
    once with :meth:`initialize`, then used for any number of embed calls.
    Each embed call is an independent request; backends keep no shared
    mutable state and do no internal locking.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier of the backend, e.g. ``"jina"`` or ``"ollama"``."""

    @abstractmethod
    async def initialize(self) -> None:
        """Validate credentials and connectivity.

        Raises
        ------
        lance_context.utils.errors.LanceContextError
            If the backend is unreachable, misconfigured, or rejects the
            credentials.
        """

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            Text strings to embed.  An empty list returns ``[]`` without
            calling the API.

        Returns
        -------
        list[list[float]]
            One vector per input, in the same order as *texts*, each of
            length :meth:`get_dimensions`.

        Raises
        ------
        lance_context.utils.errors.EmbeddingAPIError
            If the API answers with a non-success status.
        """

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Equivalent to ``(await self.embed_batch([text]))[0]``.
        """
        result = await self.embed_batch([text])
        return result[0]

    @abstractmethod
    def get_dimensions(self) -> int:
        """Return the dimensionality of the embedding vectors.

        Fixed per backend/model for the lifetime of the instance.  Example
        values: ``1024`` (Jina v3), ``1536`` (OpenAI ``text-embedding-3-small``),
        ``768`` (``nomic-embed-text``).
        """

    async def aclose(self) -> None:
        """Release network resources owned by the backend.  No-op by default."""
