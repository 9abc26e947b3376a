"""Git worktree lifecycle models.

Types describing isolated per-agent worktrees: what exists on disk
(:class:`WorktreeInfo`), and the request/result shapes for creating,
removing and listing them.  Worktree names follow
``<issue_id>-<short_name>`` (or just ``<short_name>``) and branches follow
``<prefix>/<worktree name>``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BranchPrefix(str, Enum):
    """Branch name prefixes allowed for agent worktrees."""

    FEATURE = "feature"
    FIX = "fix"
    REFACTOR = "refactor"
    DOCS = "docs"
    TEST = "test"


class PackageManager(str, Enum):
    """Package managers that can install dependencies in a fresh worktree."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"


class WorktreeInfo(BaseModel):
    """State of one git worktree."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Directory name within the worktrees root.")
    path: str = Field(description="Absolute path of the worktree directory.")
    branch: str = Field(description="Branch checked out in the worktree.")
    commit: str = Field(description="Short hash of the current HEAD commit.")
    valid: bool = Field(description="Whether the worktree directory exists and is usable.")
    dirty: bool = Field(default=False, description="Whether there are uncommitted changes.")
    ahead: int = Field(default=0, ge=0, description="Commits ahead of the base branch.")
    behind: int = Field(default=0, ge=0, description="Commits behind the base branch.")
    created_at: datetime | None = Field(default=None, description="When the worktree was created.")


class CreateWorktreeOptions(BaseModel):
    """Request to create a worktree on a new branch."""

    model_config = ConfigDict(frozen=True)

    issue_id: str | None = Field(default=None, description='Issue ID used for naming, e.g. "bd-123".')
    short_name: str = Field(min_length=1, description='Short descriptive name, e.g. "add-auth".')
    prefix: BranchPrefix = BranchPrefix.FEATURE
    base_branch: str | None = Field(
        default=None,
        description="Branch to create from. None = current branch or main.",
    )
    install_deps: bool = True
    package_manager: PackageManager | None = Field(
        default=None,
        description="Package manager for dependency install. None = auto-detect.",
    )

    @property
    def worktree_name(self) -> str:
        if self.issue_id:
            return f"{self.issue_id}-{self.short_name}"
        return self.short_name

    @property
    def branch_name(self) -> str:
        return f"{self.prefix.value}/{self.worktree_name}"


class CreateWorktreeResult(BaseModel):
    """Outcome of a create request."""

    success: bool
    worktree: WorktreeInfo | None = None
    error: str | None = None
    deps_installed: bool | None = None
    deps_install_time_ms: int | None = Field(default=None, ge=0)


class RemoveWorktreeOptions(BaseModel):
    """Request to remove a worktree."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    delete_branch: bool = False
    force: bool = Field(default=False, description="Remove even when the worktree is dirty.")


class RemoveWorktreeResult(BaseModel):
    """Outcome of a remove request."""

    success: bool
    branch: str | None = None
    branch_deleted: bool | None = None
    error: str | None = None


class ListWorktreesResult(BaseModel):
    """All known worktrees."""

    worktrees: list[WorktreeInfo] = Field(default_factory=list)
    count: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _default_count(cls, data: object) -> object:
        if isinstance(data, dict) and "count" not in data:
            data = {**data, "count": len(data.get("worktrees") or [])}
        return data

    @model_validator(mode="after")
    def _count_matches(self) -> ListWorktreesResult:
        if self.count != len(self.worktrees):
            raise ValueError(
                f"count ({self.count}) does not match number of worktrees ({len(self.worktrees)})"
            )
        return self
