"""
Registry of tracked repositories.

The registry is the single source of truth for which repositories exist.
Every successful mutation writes the whole config file before returning.
"""

from collections.abc import Iterator
from pathlib import Path

from reprac import config as config_store
from reprac.exceptions import ConfigPersistError, DuplicateRepositoryError, ValidationError
from reprac.logging import get_logger
from reprac.types.repos import RepositoryEntry, RepositoryRef

logger = get_logger("registry")


class Registry:
    """Ordered, persisted list of tracked repositories."""

    def __init__(self, path: Path, config: config_store.Config | None = None) -> None:
        """
        Args:
            path: Config file the registry is persisted to
            config: Loaded config; an empty one when None
        """
        self.path = path
        self.config = config or config_store.Config()
        self.last_persist_error: ConfigPersistError | None = None

    @classmethod
    def load(cls, path: Path) -> "Registry":
        """
        Load the registry from a config file.

        Raises:
            ConfigMissingError: If the file does not exist
            ConfigParseError: If it is invalid
        """
        return cls(path, config_store.load(path))

    @property
    def settings(self) -> config_store.Settings:
        return self.config.settings

    def entries(self) -> list[RepositoryEntry]:
        """Return a copy of the entries, in order."""
        return list(self.config.repos)

    def keys(self) -> list[str]:
        return [entry.key for entry in self.config.repos]

    def __iter__(self) -> Iterator[RepositoryEntry]:
        return iter(list(self.config.repos))

    def __len__(self) -> int:
        return len(self.config.repos)

    def __getitem__(self, index: int) -> RepositoryEntry:
        return self.config.repos[index]

    def __contains__(self, key: object) -> bool:
        return any(entry.key == key for entry in self.config.repos)

    def add(self, ref: RepositoryRef, notes: str = "") -> RepositoryEntry:
        """
        Append a repository and persist.

        Raises:
            ValidationError: If owner or repo is empty
            DuplicateRepositoryError: If the key is already tracked
        """
        owner, repo = ref.owner.strip(), ref.repo.strip()
        if not owner or not repo:
            raise ValidationError("Owner and repo are required")

        ref = RepositoryRef(owner=owner, repo=repo)
        if ref.key in self:
            raise DuplicateRepositoryError(ref.key)

        entry = RepositoryEntry(ref=ref, notes=notes.strip())
        self.config.repos.append(entry)
        logger.info("added %s", ref.key)
        self._persist()
        return entry

    def remove(self, index: int) -> RepositoryEntry:
        """
        Remove the repository at ``index`` and persist.

        Dropping cached status for the removed key is the caller's job.

        Raises:
            IndexError: If index is out of range
        """
        if not 0 <= index < len(self.config.repos):
            raise IndexError(f"no repository at index {index}")

        entry = self.config.repos.pop(index)
        logger.info("removed %s", entry.key)
        self._persist()
        return entry

    def save(self) -> None:
        """
        Persist the registry.

        Raises:
            ConfigPersistError: If the config file cannot be written
        """
        config_store.save(self.path, self.config)

    def _persist(self) -> None:
        try:
            self.save()
        except ConfigPersistError as e:
            # The in-memory change stands for the rest of the session.
            logger.warning("could not persist registry: %s", e.message)
            self.last_persist_error = e
        else:
            self.last_persist_error = None
