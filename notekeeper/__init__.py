"""
Notekeeper.

- organizer/: Folder hierarchy, note filtering, mutations, drag-and-drop, local storage
- backend/: REST server, database, configuration, logging
- cli/: Command-line client (Typer + Rich)
"""

__version__ = "0.1.0"
