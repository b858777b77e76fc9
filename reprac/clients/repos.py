"""Repositories resource client.

Wraps the repository metadata, release, tag listing and compare endpoints.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from reprac.exceptions import DecodeError, NotFoundError
from reprac.types.github import (
    ComparedCommit,
    Comparison,
    Release,
    RepositoryInfo,
    Tag,
)

if TYPE_CHECKING:
    from reprac.transport import HTTPTransport

DEFAULT_BRANCH = "main"


def _expect_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"malformed {what} response")
    return data


def _nested_dict(data: dict[str, Any], key: str, what: str) -> dict[str, Any]:
    """Return the object under ``key``; absent or null counts as empty."""
    value = data.get(key)
    if value is None:
        return {}
    return _expect_dict(value, what)


def _parse_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_compared_commit(data: Any) -> ComparedCommit:
    data = _expect_dict(data, "commit")
    commit = _nested_dict(data, "commit", "commit")
    author = _nested_dict(commit, "author", "commit")
    sha = data.get("sha")
    message = commit.get("message") or ""
    if not isinstance(sha, str) or not isinstance(message, str):
        raise DecodeError("malformed commit response")
    return ComparedCommit(
        sha=sha,
        message=message,
        authored_at=_parse_datetime(author.get("date")),
    )


class ReposClient:
    """Client for repository-level endpoints."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    async def get(self, owner: str, repo: str) -> RepositoryInfo:
        """
        Get repository metadata.

        Returns:
            RepositoryInfo; the default branch falls back to "main" when absent

        Raises:
            NotFoundError: If the repository does not exist or is not visible
        """
        data = _expect_dict(
            await self.transport.get(f"/repos/{owner}/{repo}"), "repository"
        )
        branch = data.get("default_branch") or DEFAULT_BRANCH
        if not isinstance(branch, str):
            raise DecodeError("malformed repository response")
        return RepositoryInfo(
            full_name=data.get("full_name") or f"{owner}/{repo}",
            default_branch=branch,
        )

    async def latest_release(self, owner: str, repo: str) -> Release | None:
        """
        Get the latest published release.

        Returns:
            Release, or None when the repository has no release
        """
        try:
            data = await self.transport.get(f"/repos/{owner}/{repo}/releases/latest")
        except NotFoundError:
            return None

        data = _expect_dict(data, "release")
        tag_name = data.get("tag_name") or ""
        if not isinstance(tag_name, str):
            raise DecodeError("malformed release response")
        if not tag_name:
            return None
        return Release(tag_name=tag_name, name=data.get("name") or "")

    async def latest_tag(self, owner: str, repo: str) -> Tag | None:
        """
        Get the first entry of the tag listing.

        Returns:
            Tag, or None when the repository has no tags
        """
        data = await self.transport.get(
            f"/repos/{owner}/{repo}/tags", params={"per_page": 1}
        )
        if not isinstance(data, list):
            raise DecodeError("malformed tags response")
        if not data:
            return None

        first = _expect_dict(data[0], "tag")
        commit = _nested_dict(first, "commit", "tag")
        name = first.get("name")
        sha = commit.get("sha") or ""
        if not isinstance(name, str) or not isinstance(sha, str):
            raise DecodeError("malformed tag response")
        return Tag(name=name, commit_sha=sha)

    async def compare(self, owner: str, repo: str, base: str, head: str) -> Comparison:
        """
        Compare a base commit with a branch head.

        Args:
            base: Commit id of the release point
            head: Branch name

        Returns:
            Comparison with ahead_by and the commits in between, oldest first
        """
        data = _expect_dict(
            await self.transport.get(f"/repos/{owner}/{repo}/compare/{base}...{head}"),
            "compare",
        )
        ahead_by = data.get("ahead_by", 0)
        if not isinstance(ahead_by, int):
            raise DecodeError("malformed compare response")
        commits = data.get("commits") or []
        if not isinstance(commits, list):
            raise DecodeError("malformed compare response")
        return Comparison(
            ahead_by=ahead_by,
            commits=[_parse_compared_commit(c) for c in commits],
        )
