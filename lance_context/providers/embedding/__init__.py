"""Embedding backend implementations.

Embeddings convert text into fixed-length numeric vectors that capture
semantic meaning; the vector store indexes them for similarity search.

Three implementations of IEmbeddingBackend (listed in fallback order):
    1. OpenAIEmbeddingBackend -- text-embedding-3-small (1536 dims).
       Requires OPENAI_API_KEY.
    2. JinaEmbeddingBackend   -- jina-embeddings-v3 (1024 dims).
       Requires JINA_API_KEY.
    3. OllamaEmbeddingBackend -- nomic-embed-text via a local Ollama server
       (768 dims).  Free and local; the guaranteed last resort.

``create_embedding_backend`` walks that chain and returns the first backend
that initializes.
"""

from lance_context.providers.embedding.factory import (
    BackendCandidate,
    CandidateOutcome,
    CandidateStatus,
    build_candidates,
    create_embedding_backend,
    select_backend,
)
from lance_context.providers.embedding.jina_backend import JinaEmbeddingBackend
from lance_context.providers.embedding.ollama_backend import OllamaEmbeddingBackend
from lance_context.providers.embedding.openai_backend import OpenAIEmbeddingBackend

__all__ = [
    "BackendCandidate",
    "CandidateOutcome",
    "CandidateStatus",
    "JinaEmbeddingBackend",
    "OllamaEmbeddingBackend",
    "OpenAIEmbeddingBackend",
    "build_candidates",
    "create_embedding_backend",
    "select_backend",
]
