# Database models package
from notekeeper.backend.models.base import Base
from notekeeper.backend.models.folder import Folder
from notekeeper.backend.models.label import Label
from notekeeper.backend.models.note import Note, note_labels

__all__ = [
    "Base",
    "Folder",
    "Label",
    "Note",
    "note_labels",
]
