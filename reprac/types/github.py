"""GitHub REST API response models.

Only the fields the status resolver reads are kept.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class RepositoryInfo:
    """Repository metadata."""

    full_name: str
    default_branch: str


@dataclass
class Release:
    """Latest published release."""

    tag_name: str
    name: str = ""


@dataclass
class Tag:
    """Entry of the tag listing."""

    name: str
    commit_sha: str


@dataclass
class GitObject:
    """Object a ref or annotated tag points to."""

    type: str  # "commit" or "tag"
    sha: str


@dataclass
class ComparedCommit:
    """Commit in a comparison, oldest first as the API returns them."""

    sha: str
    message: str
    authored_at: datetime | None = None


@dataclass
class Comparison:
    """Result of comparing a base commit with a branch head."""

    ahead_by: int
    commits: list[ComparedCommit] = field(default_factory=list)
