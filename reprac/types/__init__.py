"""Type definitions for reprac data models."""

from reprac.types.github import (
    ComparedCommit,
    Comparison,
    GitObject,
    Release,
    RepositoryInfo,
    Tag,
)
from reprac.types.repos import RepositoryEntry, RepositoryRef
from reprac.types.status import (
    MAX_RECENT_COMMITS,
    CommitSummary,
    RefKind,
    RepoStatus,
    Status,
)

__all__ = [
    # Repositories
    "RepositoryRef",
    "RepositoryEntry",
    # Status
    "Status",
    "RefKind",
    "CommitSummary",
    "RepoStatus",
    "MAX_RECENT_COMMITS",
    # GitHub API
    "RepositoryInfo",
    "Release",
    "Tag",
    "GitObject",
    "ComparedCommit",
    "Comparison",
]
