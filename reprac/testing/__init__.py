"""
reprac testing utilities.

Provides fakes and pytest fixtures for testing code built on reprac.
"""

from reprac.testing.mock import FakeGitHubAPI, MockCall, MockResolver, commit_json

__all__ = [
    "FakeGitHubAPI",
    "MockResolver",
    "MockCall",
    "commit_json",
]
