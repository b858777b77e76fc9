"""
Pytest plugin for reprac testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["reprac.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from reprac.testing.fixtures import (
    behind_status,
    clean_status,
    config_path,
    fake_api,
    mock_resolver,
    registry,
)

__all__ = [
    "fake_api",
    "mock_resolver",
    "config_path",
    "registry",
    "clean_status",
    "behind_status",
]
