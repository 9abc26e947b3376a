"""Embedding configuration models.

:class:`EmbeddingConfig` is the per-backend configuration handed to a
provider constructor.  It is frozen: a backend reads it once in
``__init__`` and never sees it change afterwards.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

_T = TypeVar("_T")


class EmbeddingBackendType(str, Enum):
    """Known embedding backends.

    ``LOCAL`` is reserved for an in-process embedding path.  No backend is
    registered for it yet; the factory's local fallback is ``OLLAMA``.
    """

    JINA = "jina"
    LOCAL = "local"
    OLLAMA = "ollama"
    OPENAI = "openai"


class EmbeddingConfig(BaseModel):
    """Configuration for a single embedding backend."""

    model_config = ConfigDict(frozen=True)

    backend: EmbeddingBackendType = Field(description="Which embedding backend to use.")
    model: str | None = Field(
        default=None,
        description="Model name/identifier (backend-specific). None = backend default.",
    )
    api_key: str | None = Field(
        default=None,
        repr=False,
        description="API key for cloud backends (Jina, OpenAI).",
    )
    base_url: str | None = Field(
        default=None,
        description="Base URL of the embedding API (Ollama server, OpenAI-compatible endpoint).",
    )
    batch_size: int | None = Field(
        default=None,
        ge=1,
        description="Maximum texts per request for backends that chunk batches.",
    )


DEFAULT_EMBEDDING_CONFIG = EmbeddingConfig(
    backend=EmbeddingBackendType.OLLAMA,
    model="nomic-embed-text",
    base_url="http://localhost:11434",
)


def chunk_texts(items: Sequence[_T], size: int) -> list[list[_T]]:
    """Split *items* into consecutive slices of at most *size* elements."""
    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]
