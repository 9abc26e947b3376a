"""Public interface definitions for embedding providers.

Concrete adapters in ``lance_context/providers/`` implement these abstract
base classes and are chosen at runtime by the backend factory, so callers
depend only on the contract and tests can inject fakes.

Re-exports
----------
IEmbeddingBackend
    Text-embedding generation contract.
"""

from lance_context.interfaces.embedding_backend import IEmbeddingBackend

__all__ = ["IEmbeddingBackend"]
