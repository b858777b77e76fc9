"""Deploy status data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from reprac.types.repos import RepositoryRef

MAX_RECENT_COMMITS = 5
SHORT_ID_LENGTH = 7
ERROR_MESSAGE_LIMIT = 40


class Status(str, Enum):
    """Deploy state of one repository."""

    LOADING = "loading"
    CLEAN = "clean"  # up to date
    BEHIND = "behind"  # has unreleased commits
    NO_RELEASE = "no_release"  # no tags/releases yet
    ERROR = "error"


class RefKind(str, Enum):
    """What the last release point is."""

    NONE = ""
    TAG = "tag"
    RELEASE = "release"


def short_id(sha: str) -> str:
    """Cut a commit id to its short form."""
    return sha[:SHORT_ID_LENGTH]


def headline(message: str) -> str:
    """Return the first line of a commit message."""
    return message.split("\n", 1)[0]


def truncate_error(message: str) -> str:
    """Cut an error message so it fits inline in a table row."""
    return message[:ERROR_MESSAGE_LIMIT]


@dataclass(frozen=True)
class CommitSummary:
    """One unreleased commit."""

    short_id: str
    headline: str
    timestamp: datetime | None = None

    @classmethod
    def from_commit(
        cls, sha: str, message: str, timestamp: datetime | None = None
    ) -> "CommitSummary":
        return cls(short_id=short_id(sha), headline=headline(message), timestamp=timestamp)


@dataclass(frozen=True)
class RepoStatus:
    """
    Resolved snapshot of one repository at one point in time.

    Build instances through ``error``, ``no_release`` or ``compared`` so the
    state always agrees with the other fields:

    - BEHIND iff commits_ahead > 0 and a tag or release was found
    - NO_RELEASE iff no tag or release exists
    - ERROR iff error_message is not empty
    """

    ref: RepositoryRef
    state: Status
    default_branch: str = ""
    ref_name: str = ""
    ref_kind: RefKind = RefKind.NONE
    commits_ahead: int = 0
    recent_commits: tuple[CommitSummary, ...] = ()
    error_message: str = ""
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> str:
        return self.ref.key

    @classmethod
    def error(
        cls,
        ref: RepositoryRef,
        message: str,
        default_branch: str = "",
    ) -> "RepoStatus":
        return cls(
            ref=ref,
            state=Status.ERROR,
            default_branch=default_branch,
            error_message=truncate_error(message) or "unknown error",
        )

    @classmethod
    def no_release(cls, ref: RepositoryRef, default_branch: str) -> "RepoStatus":
        return cls(ref=ref, state=Status.NO_RELEASE, default_branch=default_branch)

    @classmethod
    def compared(
        cls,
        ref: RepositoryRef,
        default_branch: str,
        ref_name: str,
        ref_kind: RefKind,
        commits_ahead: int,
        commits: list[CommitSummary] | tuple[CommitSummary, ...] = (),
    ) -> "RepoStatus":
        """Status for a repository whose branch was compared to a release point."""
        if ref_kind is RefKind.NONE:
            raise ValueError("compared status needs a tag or release")
        ahead = max(commits_ahead, 0)
        return cls(
            ref=ref,
            state=Status.BEHIND if ahead > 0 else Status.CLEAN,
            default_branch=default_branch,
            ref_name=ref_name,
            ref_kind=ref_kind,
            commits_ahead=ahead,
            recent_commits=tuple(commits[:MAX_RECENT_COMMITS]) if ahead > 0 else (),
        )
