"""
Organizer Package.

The note organization model shared by both persistence modes:

- entities: Folder, Label, Note, Snapshot value objects
- hierarchy: folder tree building
- filters: visible note computation
- mutations: pure state transitions over a Snapshot
- dragdrop: drag id parsing and drop resolution
- storage: JSON key-value store for client-only mode
- workspace: managed store applying mutations and flushing them
- textstats, export: content statistics and download rendering
"""
