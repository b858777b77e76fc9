"""
reprac configuration file.

The config file is YAML with a ``repos`` list of ``{owner, repo, notes}``
entries and an optional ``settings`` mapping:

    repos:
      - owner: acme
        repo: web
        notes: "Production app"
    settings:
      refresh_interval: 300
"""

import os
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from reprac.exceptions import ConfigMissingError, ConfigParseError, ConfigPersistError
from reprac.logging import get_logger
from reprac.types.repos import RepositoryEntry, RepositoryRef

CONFIG_ENV_VAR = "REPRAC_CONFIG"

EXAMPLE_CONFIG = """\
# reprac config: list of repos to track
# Each entry must have owner and repo. notes is optional.
repos:
  - owner: your-org
    repo: your-app
    notes: "Production app"
  - owner: your-org
    repo: your-api
    notes: "Backend API"
"""

logger = get_logger("config")


@dataclass
class Settings:
    """Tunables read from the optional ``settings`` section."""

    refresh_interval: float = 0.0  # seconds between automatic refreshes, 0 disables
    timeout: float = 15.0
    max_retries: int = 0
    api_url: str = "https://api.github.com"


@dataclass
class Config:
    """Root config file structure."""

    repos: list[RepositoryEntry] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)


def default_path() -> Path:
    """Return the config path: $REPRAC_CONFIG, else <user config dir>/reprac/repos.yaml."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()

    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "reprac" / "repos.yaml"


def _parse_entry(index: int, item: Any) -> RepositoryEntry:
    if not isinstance(item, dict):
        raise ConfigParseError(f"repos[{index}] must be a mapping with owner and repo")

    owner = item.get("owner")
    repo = item.get("repo")
    notes = item.get("notes") or ""
    if not isinstance(owner, str) or not owner.strip():
        raise ConfigParseError(f"repos[{index}] is missing owner")
    if not isinstance(repo, str) or not repo.strip():
        raise ConfigParseError(f"repos[{index}] is missing repo")
    if not isinstance(notes, str):
        notes = str(notes)

    return RepositoryEntry(
        ref=RepositoryRef(owner=owner.strip(), repo=repo.strip()),
        notes=notes.strip(),
    )


def _parse_settings(data: Any) -> Settings:
    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigParseError("settings must be a mapping")

    defaults = Settings()
    unknown = set(data) - set(asdict(defaults))
    if unknown:
        raise ConfigParseError(f"unknown settings: {', '.join(sorted(unknown))}")

    try:
        settings = Settings(
            refresh_interval=float(data.get("refresh_interval", defaults.refresh_interval)),
            timeout=float(data.get("timeout", defaults.timeout)),
            max_retries=int(data.get("max_retries", defaults.max_retries)),
            api_url=str(data.get("api_url", defaults.api_url)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigParseError(f"invalid settings: {e}") from e

    if settings.refresh_interval < 0:
        raise ConfigParseError("settings.refresh_interval must not be negative")
    if settings.timeout <= 0:
        raise ConfigParseError("settings.timeout must be positive")
    if settings.max_retries < 0:
        raise ConfigParseError("settings.max_retries must not be negative")
    return settings


def parse(text: str) -> Config:
    """
    Parse config file contents.

    Raises:
        ConfigParseError: If the YAML is invalid or has the wrong shape
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"parsing config: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigParseError("config must be a mapping with a repos list")

    repos = data.get("repos") or []
    if not isinstance(repos, list):
        raise ConfigParseError("repos must be a list")

    entries = []
    seen: set[str] = set()
    for i, item in enumerate(repos):
        entry = _parse_entry(i, item)
        if entry.key in seen:
            raise ConfigParseError(f"repos[{i}]: {entry.key} is listed more than once")
        seen.add(entry.key)
        entries.append(entry)

    return Config(repos=entries, settings=_parse_settings(data.get("settings")))


def load(path: Path) -> Config:
    """
    Read and parse a config file.

    Raises:
        ConfigMissingError: If the file does not exist
        ConfigParseError: If it cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigMissingError(
            f"config file not found: {path}\n\n"
            "Create it with `reprac init`, or by hand:\n\n"
            "repos:\n"
            "  - owner: your-org\n"
            "    repo: your-repo\n"
            '    notes: "Optional description"'
        ) from e
    except OSError as e:
        raise ConfigParseError(f"reading config: {e}") from e

    config = parse(text)
    logger.info("loaded %d repos from %s", len(config.repos), path)
    return config


def dump(config: Config) -> str:
    """Serialize a config to YAML. Settings are written only when changed."""
    data: dict[str, Any] = {
        "repos": [
            {"owner": e.ref.owner, "repo": e.ref.repo, **({"notes": e.notes} if e.notes else {})}
            for e in config.repos
        ]
    }
    settings = asdict(config.settings)
    if settings != asdict(Settings()):
        data["settings"] = settings
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def _write_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def save(path: Path, config: Config) -> None:
    """
    Write the config back to disk, replacing the file atomically.

    Raises:
        ConfigPersistError: If the directory or file cannot be written
    """
    try:
        _write_atomic(path, dump(config))
    except OSError as e:
        raise ConfigPersistError(f"saving config to {path}: {e}") from e
    logger.debug("saved %d repos to %s", len(config.repos), path)


def init_example(path: Path) -> None:
    """
    Create a sample config file.

    Raises:
        ConfigPersistError: If the file cannot be written
    """
    try:
        _write_atomic(path, EXAMPLE_CONFIG)
    except OSError as e:
        raise ConfigPersistError(f"creating config at {path}: {e}") from e
