"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from checkpoint.adapters.checkpoint_client import CheckpointClient
from checkpoint.core.config import CheckpointSettings, get_user_env_file, write_user_env_vars
from checkpoint.core.domain.errors import CheckpointError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_identity(settings: CheckpointSettings) -> tuple[bool, str]:
    try:
        async with CheckpointClient.from_settings(settings) as client:
            identity = await client.get_current_identity()
    except (CheckpointError, httpx.HTTPError) as exc:
        return False, str(exc)
    if identity is None:
        return True, "Reachable, no current identity (HTTP 412)"
    return True, "Reachable, session resolves to an identity"


@app.command()
def run() -> None:
    """Show the effective configuration and check the identities endpoint."""

    settings = CheckpointSettings()

    table = Table(title="Checkpoint Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Base URL", "OK", settings.base_url)
    if settings.session:
        table.add_row("Session", "OK", "Session token configured")
    else:
        table.add_row("Session", "OPTIONAL", "No session -> requests are anonymous")
    table.add_row("User config", "OK" if get_user_env_file().exists() else "MISSING", str(get_user_env_file()))

    ok, detail = asyncio.run(_check_identity(settings))
    table.add_row("Identities endpoint", "OK" if ok else "FAIL", escape(detail))

    _console.print(table)
    if not ok:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = CheckpointSettings()
    scheme = typer.prompt("Scheme", default=settings.scheme, show_default=True).strip().lower()
    host = typer.prompt("Host", default=settings.host, show_default=True).strip()
    session = typer.prompt("Session token (empty to skip)", default="", hide_input=True, show_default=False).strip()

    if scheme not in ("http", "https"):
        raise typer.BadParameter("scheme must be http or https")
    if not host:
        raise typer.BadParameter("host is required")

    env_path = write_user_env_vars(
        {
            "CHECKPOINT_SCHEME": scheme,
            "CHECKPOINT_HOST": host,
            "CHECKPOINT_SESSION": session or None,
        }
    )

    _console.print(f"[green]Saved Checkpoint config to:[/green] {env_path}")
