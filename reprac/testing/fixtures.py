"""
Pytest fixtures for reprac testing.

Provides fakes, sample statuses and an on-disk registry.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest

from reprac import config as config_store
from reprac.registry import Registry
from reprac.testing.mock import FakeGitHubAPI, MockResolver
from reprac.types.repos import RepositoryEntry, RepositoryRef
from reprac.types.status import CommitSummary, RefKind, RepoStatus


# ============================================================================
# Fakes
# ============================================================================


@pytest.fixture
def fake_api() -> FakeGitHubAPI:
    """Provide an empty FakeGitHubAPI."""
    return FakeGitHubAPI()


@pytest.fixture
def mock_resolver() -> Generator[MockResolver, None, None]:
    """Provide a MockResolver; held resolutions are released on teardown."""
    resolver = MockResolver()
    yield resolver
    for key in list(resolver._gates):
        resolver.release(key)


# ============================================================================
# Registry Fixtures
# ============================================================================


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Path of a config file inside a directory that does not exist yet."""
    return tmp_path / "reprac" / "repos.yaml"


@pytest.fixture
def registry(config_path: Path) -> Registry:
    """Registry tracking acme/web and acme/api, already saved to disk."""
    config = config_store.Config(
        repos=[
            RepositoryEntry(ref=RepositoryRef("acme", "web"), notes="Production app"),
            RepositoryEntry(ref=RepositoryRef("acme", "api"), notes="Backend API"),
        ]
    )
    config_store.save(config_path, config)
    return Registry(config_path, config)


# ============================================================================
# Status Fixtures
# ============================================================================


@pytest.fixture
def clean_status() -> RepoStatus:
    """acme/web released at v1.2.0 with nothing unreleased."""
    return RepoStatus.compared(
        RepositoryRef("acme", "web"),
        default_branch="main",
        ref_name="v1.2.0",
        ref_kind=RefKind.RELEASE,
        commits_ahead=0,
    )


@pytest.fixture
def behind_status() -> RepoStatus:
    """acme/api with three commits since tag v0.9.0."""
    commits = [
        CommitSummary(
            short_id=f"c{i}c{i}c{i}c",
            headline=f"change {i}",
            timestamp=datetime(2024, 5, i, tzinfo=timezone.utc),
        )
        for i in (3, 2, 1)
    ]
    return RepoStatus.compared(
        RepositoryRef("acme", "api"),
        default_branch="main",
        ref_name="v0.9.0",
        ref_kind=RefKind.TAG,
        commits_ahead=3,
        commits=commits,
    )
