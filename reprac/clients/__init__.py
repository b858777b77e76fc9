"""Resource clients for reprac."""

from reprac.clients.git import GitDataClient
from reprac.clients.repos import ReposClient

__all__ = [
    "GitDataClient",
    "ReposClient",
]
