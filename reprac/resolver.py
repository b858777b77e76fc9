"""
Deploy status resolution.

Reduces a short, strictly sequential series of GitHub API calls to one
``RepoStatus`` for a repository:

1. repository metadata, for the default branch
2. latest release, falling back to the newest tag
3. comparison of the release point with the default branch head
"""

from typing import TYPE_CHECKING

import httpx

from reprac.exceptions import DecodeError, RepracError
from reprac.logging import get_logger
from reprac.types.repos import RepositoryRef
from reprac.types.status import (
    MAX_RECENT_COMMITS,
    CommitSummary,
    RefKind,
    RepoStatus,
)

if TYPE_CHECKING:
    from reprac.client import GitHubClient
    from reprac.types.github import Comparison

logger = get_logger("resolver")


def recent_commits(comparison: "Comparison", limit: int = MAX_RECENT_COMMITS) -> list[CommitSummary]:
    """Keep the newest ``limit`` commits of an oldest-first comparison, newest first."""
    tail = comparison.commits[-limit:] if limit > 0 else []
    return [
        CommitSummary.from_commit(c.sha, c.message, c.authored_at)
        for c in reversed(tail)
    ]


def _error_text(error: Exception) -> str:
    if isinstance(error, RepracError):
        return error.message
    return str(error) or type(error).__name__


class StatusResolver:
    """Resolve the deploy status of repositories through a GitHubClient."""

    def __init__(self, client: "GitHubClient") -> None:
        self.client = client

    @property
    def has_auth(self) -> bool:
        return self.client.has_auth

    async def resolve(self, ref: RepositoryRef) -> RepoStatus:
        """
        Resolve the deploy status of one repository.

        Never raises for API failures: transport, HTTP status and decode
        errors come back as a status in the ERROR state.
        """
        try:
            return await self._resolve(ref)
        except (RepracError, httpx.HTTPError) as e:
            logger.info("resolving %s failed: %s", ref.key, e)
            return RepoStatus.error(ref, _error_text(e))

    async def _resolve(self, ref: RepositoryRef) -> RepoStatus:
        owner, repo = ref.owner, ref.repo

        info = await self.client.repos.get(owner, repo)
        branch = info.default_branch

        try:
            release_point = await self._latest_release_point(owner, repo)
        except (RepracError, httpx.HTTPError) as e:
            return RepoStatus.error(ref, _error_text(e), default_branch=branch)

        if release_point is None:
            logger.debug("%s has no release or tag", ref.key)
            return RepoStatus.no_release(ref, branch)

        sha, name, kind = release_point
        try:
            comparison = await self.client.repos.compare(owner, repo, sha, branch)
        except (RepracError, httpx.HTTPError) as e:
            return RepoStatus.error(ref, _error_text(e), default_branch=branch)

        status = RepoStatus.compared(
            ref,
            default_branch=branch,
            ref_name=name,
            ref_kind=kind,
            commits_ahead=comparison.ahead_by,
            commits=recent_commits(comparison),
        )
        logger.debug("%s is %s (%d ahead of %s)", ref.key, status.state.value, status.commits_ahead, name)
        return status

    async def _latest_release_point(
        self, owner: str, repo: str
    ) -> tuple[str, str, RefKind] | None:
        """
        Find the commit id of the latest release, or of the newest tag.

        Returns:
            (commit id, tag name, kind), or None when there is no release or tag
        """
        try:
            release = await self.client.repos.latest_release(owner, repo)
            if release is not None:
                sha = await self.client.git.resolve_tag(owner, repo, release.tag_name)
                return sha, release.tag_name, RefKind.RELEASE
        except RepracError as e:
            logger.debug("release lookup for %s/%s failed, using tags: %s", owner, repo, e)

        tag = await self.client.repos.latest_tag(owner, repo)
        if tag is None:
            return None

        sha = tag.commit_sha
        try:
            sha = await self.client.git.resolve_tag(owner, repo, tag.name)
        except RepracError as e:
            logger.debug("could not resolve tag %s in %s/%s: %s", tag.name, owner, repo, e)

        if not sha:
            raise DecodeError(f"tag {tag.name} has no commit")
        return sha, tag.name, RefKind.TAG
