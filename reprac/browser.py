"""Open URLs in the operator's browser."""

import subprocess
import sys

from reprac.logging import get_logger

logger = get_logger("browser")


def open_command(url: str, platform: str | None = None) -> list[str]:
    """Return the platform's "open URL" command."""
    platform = platform or sys.platform
    if platform == "darwin":
        return ["open", url]
    if platform.startswith("win"):
        return ["cmd", "/c", "start", "", url]
    return ["xdg-open", url]


def open_url(url: str) -> bool:
    """
    Open ``url`` without waiting for the viewer. Best-effort.

    Returns:
        True when the viewer process was started
    """
    try:
        subprocess.Popen(
            open_command(url),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        logger.info("could not open %s: %s", url, e)
        return False
    return True
