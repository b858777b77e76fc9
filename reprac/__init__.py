"""reprac - track unreleased commits on GitHub repositories."""

from reprac.client import GitHubClient
from reprac.exceptions import (
    AuthenticationError,
    ConfigMissingError,
    ConfigParseError,
    ConfigPersistError,
    ConfigurationError,
    DecodeError,
    DuplicateRepositoryError,
    HTTPStatusError,
    NotFoundError,
    RateLimitedError,
    RepracError,
    ServerError,
    TransportError,
    ValidationError,
)
from reprac.logging import configure_logging, get_logger
from reprac.orchestrator import Orchestrator, ResolutionCompleted, RowView, Summary
from reprac.registry import Registry
from reprac.resolver import StatusResolver
from reprac.transport import HTTPTransport, RetryConfig
from reprac.types import (
    CommitSummary,
    RefKind,
    RepositoryEntry,
    RepositoryRef,
    RepoStatus,
    Status,
)

__version__ = "0.1.2"

__all__ = [
    "__version__",
    # Client and resolution
    "GitHubClient",
    "StatusResolver",
    # State
    "Registry",
    "Orchestrator",
    "ResolutionCompleted",
    "RowView",
    "Summary",
    # Types
    "RepositoryRef",
    "RepositoryEntry",
    "CommitSummary",
    "RepoStatus",
    "Status",
    "RefKind",
    # Exceptions
    "RepracError",
    "ConfigurationError",
    "ConfigMissingError",
    "ConfigParseError",
    "ConfigPersistError",
    "TransportError",
    "HTTPStatusError",
    "NotFoundError",
    "AuthenticationError",
    "RateLimitedError",
    "ServerError",
    "DecodeError",
    "ValidationError",
    "DuplicateRepositoryError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
