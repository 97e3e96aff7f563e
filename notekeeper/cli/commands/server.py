"""
Server Commands.

Commands for starting the notes API server.
"""

import subprocess
import sys
from typing import Optional

import typer
from rich.console import Console

from notekeeper.backend.core.config import get_app_config

app = typer.Typer(help="Server management commands")
console = Console()


@app.command()
def start(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Server host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Server port"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """
    Start the notes API server.

    Host and port default to config/settings/application.yaml.

    Examples:
        notekeeper server start
        notekeeper server start --reload
        notekeeper server start --host 0.0.0.0 --port 8080
    """
    try:
        server = get_app_config().application.server
    except Exception as e:
        console.print("[red]Error: Could not load config/settings/application.yaml[/red]")
        console.print(f"[dim]Error: {e}[/dim]")
        raise typer.Exit(1) from e

    server_host = host or server.host
    server_port = port or server.port

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notekeeper.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    console.print(f"[bold]Starting server at http://{server_host}:{server_port}[/bold]")
    if reload:
        console.print("[dim]Auto-reload enabled[/dim]")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        console.print("\n[dim]Server stopped[/dim]")
    except subprocess.CalledProcessError as e:
        console.print(f"[red]Server failed to start (exit code: {e.returncode})[/red]")
        raise typer.Exit(e.returncode) from e
