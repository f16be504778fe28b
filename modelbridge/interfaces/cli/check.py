"""Validate the models configured in ``config.json``.

Runs the same setup the web application performs at startup and reports
which record class and manager each model resolved to.
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from modelbridge.app.models import ModelRegistry
from modelbridge.services.model import ModelError
from modelbridge.services.registry import GENERIC_MANAGER

console = Console()


@click.command()
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to config.json (defaults to the project root).",
)
@click.pass_context
def check(ctx: click.Context, config_path: str | None) -> None:
    """Set up every configured model and show what it resolved to."""

    try:
        registry = ModelRegistry.from_config(config_path)
    except ModelError as exc:
        console.print(f"[red]Model configuration failed:[/red] {exc}")
        ctx.exit(1)

    if not len(registry):
        console.print("[yellow]No models configured.[/yellow]")
        return

    table = Table(title="Models")
    table.add_column("Key", style="bold")
    table.add_column("Record class")
    table.add_column("Manager")
    table.add_column("Load with")
    for key, model in registry.items():
        manager = model.manager
        if manager == GENERIC_MANAGER:
            manager = f"{manager} [dim](fallback)[/dim]"
        table.add_row(key, model.name, manager, ", ".join(model.load_with or ()))
    console.print(table)
