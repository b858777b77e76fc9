"""
GitHub token discovery.

Sources are checked in order until one yields a non-empty token:
``GITHUB_TOKEN``, ``GH_TOKEN``, then ``gh auth token``.
"""

import os
import subprocess

from reprac.logging import get_logger

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")
GH_TOKEN_COMMAND = ("gh", "auth", "token")

logger = get_logger("auth")


def token_from_gh_cli(timeout: float = 5.0) -> str | None:
    """Ask the GitHub CLI for its stored token."""
    try:
        result = subprocess.run(
            GH_TOKEN_COMMAND,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("gh credential helper unavailable: %s", e)
        return None

    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_token() -> str | None:
    """
    Find a GitHub token.

    Returns:
        The first non-empty token, or None when no source has one. A missing
        token is not an error; API calls are then unauthenticated.
    """
    for name in TOKEN_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            logger.debug("using token from %s", name)
            return value

    token = token_from_gh_cli()
    if token:
        logger.debug("using token from gh auth token")
    else:
        logger.info("no GitHub token found, API calls are unauthenticated")
    return token
