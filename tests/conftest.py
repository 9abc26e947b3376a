"""Shared pytest fixtures for the lance-context test suite."""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field
from unittest.mock import AsyncMock, MagicMock

import pytest

from lance_context.interfaces.embedding_backend import IEmbeddingBackend
from lance_context.utils.retry import RetryPolicy

# ---------------------------------------------------------------------------
# Embedding fixtures
# ---------------------------------------------------------------------------

_EMBEDDING_DIM = 128


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic unit-length vector by hashing *text*."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    raw = digest
    while len(raw) < dim * 4:
        raw += hashlib.sha256(raw).digest()
    raw = raw[: dim * 4]
    # Unpack as unsigned ints so no NaN/inf can sneak in, then centre on 0.
    values = [v / 2**31 - 1.0 for v in struct.unpack(f"<{dim}I", raw)]
    magnitude = max(sum(v * v for v in values) ** 0.5, 1e-10)
    return [v / magnitude for v in values]


class MockEmbeddingBackend(IEmbeddingBackend):
    """In-memory deterministic embedding backend for tests."""

    def __init__(self, dim: int = _EMBEDDING_DIM) -> None:
        self._dim = dim
        self.initialized = False

    @property
    def name(self) -> str:
        return "mock"

    async def initialize(self) -> None:
        self.initialized = True

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [_hash_to_vector(t, self._dim) for t in texts]

    def get_dimensions(self) -> int:
        return self._dim


@pytest.fixture
def mock_embedding_backend() -> MockEmbeddingBackend:
    return MockEmbeddingBackend()


@pytest.fixture
def failing_embedding_backend() -> IEmbeddingBackend:
    """Backend whose every call fails, as if the service were down."""
    error = ConnectionError("connection refused")
    mock = MagicMock(spec=IEmbeddingBackend)
    mock.name = "failing-mock"
    mock.initialize = AsyncMock(side_effect=error)
    mock.embed = AsyncMock(side_effect=error)
    mock.embed_batch = AsyncMock(side_effect=error)
    mock.aclose = AsyncMock(return_value=None)
    mock.get_dimensions.return_value = 1536
    return mock


@pytest.fixture
def no_retry() -> RetryPolicy:
    """Retry policy that never sleeps, for tests exercising error paths."""
    return RetryPolicy(max_retries=0, base_delay=0.0, max_delay=0.0)


# ---------------------------------------------------------------------------
# Vector store fixtures
# ---------------------------------------------------------------------------


@dataclass
class CodeChunkRow:
    """One indexed code chunk, as stored in the vector table."""

    id: str
    filepath: str
    content: str
    start_line: int
    end_line: int
    language: str
    vector: list[float] = field(default_factory=list)
    symbol_type: str | None = None
    symbol_name: str | None = None


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = (sum(x * x for x in a) ** 0.5) * (sum(y * y for y in b) ** 0.5)
    return dot / norm if norm else 0.0


class MockVectorTable:
    """In-memory stand-in for a vector database table.

    Search ranks rows by cosine similarity against the query vector.
    """

    def __init__(self, rows: list[CodeChunkRow] | None = None) -> None:
        self._rows: list[CodeChunkRow] = list(rows or [])

    async def add(self, rows: list[CodeChunkRow]) -> None:
        self._rows.extend(rows)

    async def delete_by_filepath(self, filepath: str) -> int:
        before = len(self._rows)
        self._rows = [r for r in self._rows if r.filepath != filepath]
        return before - len(self._rows)

    async def count_rows(self) -> int:
        return len(self._rows)

    async def to_list(self) -> list[CodeChunkRow]:
        return list(self._rows)

    async def search(self, vector: list[float], limit: int = 10) -> list[tuple[float, CodeChunkRow]]:
        scored = [(_cosine(vector, row.vector), row) for row in self._rows]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return scored[:limit]


class MockVectorConnection:
    """In-memory stand-in for a vector database connection (a set of named tables)."""

    def __init__(self, tables: dict[str, MockVectorTable] | None = None) -> None:
        self._tables: dict[str, MockVectorTable] = dict(tables or {})

    async def table_names(self) -> list[str]:
        return list(self._tables)

    async def open_table(self, name: str) -> MockVectorTable:
        if name not in self._tables:
            raise KeyError(f"Table {name} not found")
        return self._tables[name]

    async def create_table(self, name: str, rows: list[CodeChunkRow]) -> MockVectorTable:
        table = MockVectorTable(rows)
        self._tables[name] = table
        return table

    async def drop_table(self, name: str) -> None:
        self._tables.pop(name, None)


@pytest.fixture
def vector_connection() -> MockVectorConnection:
    return MockVectorConnection()


@pytest.fixture
def chunk_row() -> type[CodeChunkRow]:
    """The row type stored in :class:`MockVectorTable`."""
    return CodeChunkRow
