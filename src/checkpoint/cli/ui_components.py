"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `whoami` y `doctor`.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from checkpoint.core.domain.models import Identity, Profile


def print_banner(console: Console, base_url: str) -> None:
    title = Text("Checkpoint", style="bold cyan")
    subtitle = Text(base_url, style="dim")
    console.print(Panel(Text.assemble(title, "  ", subtitle), border_style="cyan"))


def _fields_table(title: str, data: dict[str, Any]) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key in sorted(data):
        table.add_row(key, str(data[key]))
    return table


def build_identity_panel(identity: Identity, profile: Profile | None) -> Panel:
    """Panel con identidad y perfil (todos los campos que devolvió Checkpoint)."""

    grid = Table.grid(padding=(0, 2))
    grid.add_column()
    grid.add_row(_fields_table("Identity", identity.model_dump()))
    if profile is not None:
        grid.add_row(_fields_table("Profile", profile.model_dump()))
    return Panel(grid, title=Text("Current user", style="bold green"), border_style="green")
