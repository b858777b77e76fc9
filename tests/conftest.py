"""Shared fixtures for the reprac test suite."""

from reprac.testing.conftest import (  # noqa: F401
    behind_status,
    clean_status,
    config_path,
    fake_api,
    mock_resolver,
    registry,
)
