"""CLI interface using Typer."""
import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from reprac import __version__
from reprac import config as config_store
from reprac.client import GitHubClient
from reprac.exceptions import ConfigurationError
from reprac.logging import configure_logging, get_logger
from reprac.orchestrator import Orchestrator
from reprac.registry import Registry
from reprac.resolver import StatusResolver
from reprac.transport import RetryConfig

app = typer.Typer(
    help=(
        "reprac: never forget to deploy again.\n\n"
        "Tracks your GitHub repositories and shows which ones have commits "
        "on the default branch that haven't been released/tagged yet."
    ),
    add_completion=False,
    invoke_without_command=True,
)

console = Console(stderr=True)
logger = get_logger("cli")

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="Path to repos.yaml config file (default: ~/.config/reprac/repos.yaml)",
    ),
]


def _setup_logging(log_file: Path | None, verbose: bool) -> None:
    handler: logging.Handler = (
        logging.FileHandler(log_file, encoding="utf-8") if log_file else logging.NullHandler()
    )
    configure_logging(level=logging.DEBUG if verbose else logging.INFO, handler=handler)


async def _run_dashboard(registry: Registry) -> None:
    # Imported here so `reprac init` / `reprac version` do not load textual.
    from reprac.ui import DashboardApp

    settings = registry.settings
    client = GitHubClient.from_env(
        base_url=settings.api_url,
        timeout=settings.timeout,
        retry_config=RetryConfig(max_retries=settings.max_retries),
    )
    async with client:
        orchestrator = Orchestrator(registry, StatusResolver(client))
        if not client.has_auth:
            orchestrator.status_message = (
                "No GitHub token found: set GITHUB_TOKEN or run `gh auth login` (rate limits apply)"
            )
        try:
            await DashboardApp(orchestrator).run_async()
        finally:
            orchestrator.close()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: ConfigOption = None,
    log_file: Annotated[
        Optional[Path],
        typer.Option("--log-file", help="Write logs to this file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output, including HTTP requests"),
    ] = False,
) -> None:
    """Run the dashboard.

    Examples:

        reprac

        reprac --config ~/repos.yaml

        reprac init
    """
    ctx.obj = config_path
    if ctx.invoked_subcommand is not None:
        return

    _setup_logging(log_file, verbose)
    path = config_path or config_store.default_path()
    try:
        registry = Registry.load(path)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}", highlight=False)
        raise typer.Exit(code=1)

    asyncio.run(_run_dashboard(registry))


@app.command()
def init(
    ctx: typer.Context,
    config_path: ConfigOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config without asking"),
    ] = False,
) -> None:
    """Create a sample repos.yaml config file."""
    path = config_path or ctx.obj or config_store.default_path()

    if path.exists() and not force:
        typer.echo(f"Config already exists at {path}")
        if not typer.confirm("Overwrite?", default=False):
            typer.echo("Aborted.")
            return

    try:
        config_store.init_example(path)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}", highlight=False)
        raise typer.Exit(code=1)

    typer.echo(f"✅ Created sample config at: {path}")
    typer.echo("   Edit it, then run: reprac")


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(f"reprac v{__version__}")
