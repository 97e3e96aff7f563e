"""
CLI Commands.

Organized by domain/feature area.
"""

from notekeeper.cli.commands.db import app as db_app
from notekeeper.cli.commands.folders import app as folders_app
from notekeeper.cli.commands.health import app as health_app
from notekeeper.cli.commands.labels import app as labels_app
from notekeeper.cli.commands.notes import app as notes_app
from notekeeper.cli.commands.server import app as server_app

__all__ = [
    "db_app",
    "folders_app",
    "health_app",
    "labels_app",
    "notes_app",
    "server_app",
]
