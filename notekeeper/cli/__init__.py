"""
CLI Client Module.

Command-line client built with Typer and Rich. It stands in for the
notes UI: it issues user actions, renders the folder tree and the
visible note list, and works against either persistence mode.

Architecture:
- Local mode drives a Workspace flushed to JSON files
- Remote mode calls the REST API via HTTP (httpx)
- Remote requests send X-Frontend-ID: cli for log routing

Usage:
    notekeeper --help
    notekeeper folders tree
    notekeeper --remote notes list --folder 2
"""
