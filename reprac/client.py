"""
reprac GitHub client.

Aggregates the transport and the resource clients the status resolver uses.
"""

from typing import Any

from reprac.auth import resolve_token
from reprac.clients import GitDataClient, ReposClient
from reprac.transport import HTTPTransport, RetryConfig


class GitHubClient:
    """
    Async client for the parts of the GitHub REST API reprac reads.

    Example:
        ```python
        import asyncio
        from reprac.client import GitHubClient

        async def main():
            async with GitHubClient.from_env() as client:
                info = await client.repos.get("acme", "web")
                print(info.default_branch)

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 15.0

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: GitHub token; None for unauthenticated calls
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Per-request timeout in seconds (default: 15.0)
            retry_config: Configuration for retry behavior (optional)
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
        )

        self.repos = ReposClient(self._transport)
        self.git = GitDataClient(self._transport)

    @classmethod
    def from_env(
        cls,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "GitHubClient":
        """
        Create a client with a token found in the environment.

        Checks ``GITHUB_TOKEN``, ``GH_TOKEN`` and then ``gh auth token``. No
        token is not an error; check ``has_auth`` to warn the operator.
        """
        return cls(
            token=resolve_token(),
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
        )

    @property
    def has_auth(self) -> bool:
        return self._transport.has_auth

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
