# Importing the models registers them on Base.metadata
from studyshare.backend.models.base import Base
from studyshare.backend.models.code import ANONYMOUS_OWNER, SavedCode, Snippet
from studyshare.backend.models.note import Note, NoteRating
from studyshare.backend.models.user import Admin, User

__all__ = [
    "ANONYMOUS_OWNER",
    "Admin",
    "Base",
    "Note",
    "NoteRating",
    "SavedCode",
    "Snippet",
    "User",
]
