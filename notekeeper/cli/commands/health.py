"""
Health Check Commands.

Commands for checking that the notes server is up (requires a running server).
"""

import asyncio
from typing import Any

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from notekeeper.cli.client import APIClient

app = typer.Typer(help="Health check commands")
console = Console()


def _display_health(data: dict[str, Any]) -> None:
    status = data.get("status", "unknown")
    status_color = "green" if status == "healthy" else "red" if status == "unhealthy" else "yellow"

    console.print(Panel(f"[{status_color}]{status.upper()}[/{status_color}]", title="Backend Status"))

    checks = data.get("checks", {})
    if not checks:
        return

    table = Table(show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("Details")
    for component, check in checks.items():
        check_status = check.get("status", "unknown")
        color = "green" if check_status == "healthy" else "red"
        details = []
        if "latency_ms" in check:
            details.append(f"latency: {check['latency_ms']}ms")
        if "error" in check:
            details.append(f"error: {check['error']}")
        table.add_row(component, f"[{color}]{check_status}[/{color}]", ", ".join(details) or "-")
    console.print(table)


@app.command()
def status() -> None:
    """
    Check server readiness, database included.

    Examples:
        notekeeper health status
    """
    asyncio.run(_status())


async def _status() -> None:
    client = APIClient()
    try:
        response = await client.get("/health/ready")
    except httpx.HTTPError as e:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: notekeeper server start[/dim]")
        raise typer.Exit(1) from e
    finally:
        await client.close()

    if response.status_code not in (200, 503):
        console.print(f"[red]Unexpected response: {response.status_code}[/red]")
        raise typer.Exit(1)

    data = response.json()
    _display_health(data.get("detail", data) if response.status_code == 503 else data)
    if response.status_code == 503:
        raise typer.Exit(1)


@app.command()
def ping() -> None:
    """Check that the server answers at all."""
    asyncio.run(_ping())


async def _ping() -> None:
    client = APIClient()
    try:
        response = await client.get("/health")
    except httpx.HTTPError as e:
        console.print("[red]✗ Backend is not reachable[/red]")
        raise typer.Exit(1) from e
    finally:
        await client.close()

    if response.status_code == 200:
        console.print("[green]✓ Backend is reachable[/green]")
    else:
        console.print(f"[yellow]Backend responded with status {response.status_code}[/yellow]")
