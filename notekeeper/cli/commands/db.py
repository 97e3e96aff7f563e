"""
Database Commands.

Commands for database migrations using Alembic.
"""

import subprocess
import sys
from pathlib import Path

import typer
from rich.console import Console

from notekeeper.backend.core.config import find_project_root

app = typer.Typer(help="Database migration commands")
console = Console()


def _alembic_ini() -> Path:
    ini = find_project_root() / "alembic.ini"
    if not ini.exists():
        console.print("[red]Error: alembic.ini not found at the project root[/red]")
        raise typer.Exit(1)
    return ini


def _run_alembic(args: list[str]) -> None:
    ini = _alembic_ini()
    cmd = [sys.executable, "-m", "alembic", "-c", str(ini)] + args

    result = subprocess.run(cmd, cwd=ini.parent)
    if result.returncode != 0:
        raise typer.Exit(result.returncode)


@app.command()
def upgrade(
    revision: str = typer.Option("head", "--revision", "-r", help="Target revision"),
) -> None:
    """
    Upgrade database to a revision.

    Examples:
        notekeeper db upgrade
        notekeeper db upgrade -r 0001
    """
    console.print(f"[bold]Upgrading database to revision: {revision}[/bold]\n")
    _run_alembic(["upgrade", revision])
    console.print("\n[green]Upgrade completed[/green]")


@app.command()
def downgrade(
    revision: str = typer.Option(..., "--revision", "-r", help="Target revision"),
) -> None:
    """
    Downgrade database to a revision.

    Examples:
        notekeeper db downgrade --revision base
    """
    console.print(f"[bold]Downgrading database to revision: {revision}[/bold]\n")
    _run_alembic(["downgrade", revision])
    console.print("\n[green]Downgrade completed[/green]")


@app.command()
def current() -> None:
    """Show current database revision."""
    console.print("[bold]Current database revision:[/bold]\n")
    _run_alembic(["current"])


@app.command()
def history() -> None:
    """Show migration history."""
    console.print("[bold]Migration history:[/bold]\n")
    _run_alembic(["history", "--verbose"])
