"""Git database resource client.

Resolves tag names to commit ids through the refs and tag object endpoints.
"""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from reprac.exceptions import DecodeError, RepracError
from reprac.logging import get_logger
from reprac.types.github import GitObject

if TYPE_CHECKING:
    from reprac.transport import HTTPTransport

logger = get_logger("clients.git")


def _parse_object(data: Any, what: str) -> GitObject:
    if not isinstance(data, dict) or not isinstance(data.get("object"), dict):
        raise DecodeError(f"malformed {what} response")
    obj = data["object"]
    sha = obj.get("sha")
    if not isinstance(sha, str) or not sha:
        raise DecodeError(f"malformed {what} response")
    return GitObject(type=obj.get("type") or "commit", sha=sha)


class GitDataClient:
    """Client for git refs and tag objects."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    async def get_tag_ref(self, owner: str, repo: str, tag: str) -> GitObject:
        """Get the object ``refs/tags/<tag>`` points to."""
        data = await self.transport.get(
            f"/repos/{owner}/{repo}/git/ref/tags/{quote(tag, safe='/')}"
        )
        return _parse_object(data, "ref")

    async def get_tag_object(self, owner: str, repo: str, sha: str) -> GitObject:
        """Get the object an annotated tag points to."""
        data = await self.transport.get(f"/repos/{owner}/{repo}/git/tags/{sha}")
        return _parse_object(data, "tag object")

    async def resolve_tag(self, owner: str, repo: str, tag: str) -> str:
        """
        Resolve a tag name to a commit id.

        Annotated tags are dereferenced one level. When that dereference
        fails the tag object's own id is returned.

        Raises:
            RepracError: If the tag ref itself cannot be fetched
        """
        ref = await self.get_tag_ref(owner, repo, tag)
        if ref.type != "tag":
            return ref.sha

        try:
            target = await self.get_tag_object(owner, repo, ref.sha)
        except RepracError as e:
            logger.debug("could not dereference tag %s in %s/%s: %s", tag, owner, repo, e)
            return ref.sha
        return target.sha
