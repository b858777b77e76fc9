"""Tracked repository data models."""

from dataclasses import dataclass

GITHUB_WEB_URL = "https://github.com"


@dataclass(frozen=True)
class RepositoryRef:
    """Identity of a GitHub repository."""

    owner: str
    repo: str

    @property
    def key(self) -> str:
        """Lookup key used for every per-repository map."""
        return f"{self.owner}/{self.repo}"

    @property
    def url(self) -> str:
        return f"{GITHUB_WEB_URL}/{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, key: str) -> "RepositoryRef":
        """Build a ref from an ``owner/repo`` string."""
        owner, _, repo = key.partition("/")
        return cls(owner=owner, repo=repo)

    def __str__(self) -> str:
        return self.key


@dataclass
class RepositoryEntry:
    """A repository in the registry, with the operator's notes."""

    ref: RepositoryRef
    notes: str = ""

    @property
    def key(self) -> str:
        return self.ref.key
