"""CLI de Checkpoint (Typer).

Comandos:
- `whoami`: identidad y perfil de la sesión configurada.
- `doctor`: diagnóstico de configuración y conectividad.
"""

from __future__ import annotations

import asyncio
import json
import logging

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from checkpoint.adapters.checkpoint_client import CheckpointClient
from checkpoint.cli import doctor
from checkpoint.cli.ui_components import build_identity_panel, print_banner
from checkpoint.core.config import CheckpointSettings
from checkpoint.core.domain.errors import CheckpointError
from checkpoint.core.domain.models import Identity, Profile

app = typer.Typer(no_args_is_help=True, help="Checkpoint identity client.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP access to stderr.")) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")


async def _fetch_user(settings: CheckpointSettings) -> tuple[Identity | None, Profile | None]:
    async with CheckpointClient.from_settings(settings) as client:
        return await client.get_current_user()


@app.command()
def whoami(
    session: str | None = typer.Option(None, "--session", "-s", help="Session token (overrides CHECKPOINT_SESSION)."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw identity/profile JSON."),
) -> None:
    """Show the identity and profile behind the current session."""

    settings = CheckpointSettings()
    if session:
        settings = settings.model_copy(update={"session": session})

    try:
        identity, profile = asyncio.run(_fetch_user(settings))
    except (CheckpointError, httpx.HTTPError) as exc:
        _console.print(f"[red]Request failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    if identity is None:
        _console.print("[yellow]No current identity for this session.[/yellow]")
        raise typer.Exit(code=1)

    if as_json:
        payload = {
            "identity": identity.model_dump(),
            "profile": profile.model_dump() if profile is not None else None,
        }
        typer.echo(json.dumps(payload, ensure_ascii=False))
        return

    print_banner(_console, settings.base_url)
    _console.print(build_identity_panel(identity, profile))


def run() -> None:
    app()
