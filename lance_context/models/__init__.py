"""Pydantic data models for lance-context.

- **embedding** -- EmbeddingConfig and the backend enum.
- **worktree** -- request/result types for git worktree lifecycle management.
"""

from lance_context.models.embedding import (
    DEFAULT_EMBEDDING_CONFIG,
    EmbeddingBackendType,
    EmbeddingConfig,
    chunk_texts,
)
from lance_context.models.worktree import (
    BranchPrefix,
    CreateWorktreeOptions,
    CreateWorktreeResult,
    ListWorktreesResult,
    PackageManager,
    RemoveWorktreeOptions,
    RemoveWorktreeResult,
    WorktreeInfo,
)

__all__ = [
    "DEFAULT_EMBEDDING_CONFIG",
    "BranchPrefix",
    "CreateWorktreeOptions",
    "CreateWorktreeResult",
    "EmbeddingBackendType",
    "EmbeddingConfig",
    "ListWorktreesResult",
    "PackageManager",
    "RemoveWorktreeOptions",
    "RemoveWorktreeResult",
    "WorktreeInfo",
    "chunk_texts",
]
