"""
Document store for epictrack.

Loads the whole tracker document, applies one epic/story mutation and
persists the result only when every reference checks out.
"""

from epictrack.db.errors import (
    EpicNotFound,
    IntegrityError,
    ReadFailure,
    StorageError,
    StoryNotFound,
    StoryNotInEpic,
    TrackerError,
    WriteFailure,
)
from epictrack.db.integrity import find_integrity_issues
from epictrack.db.models import Document, Epic, Status, Story
from epictrack.db.storage import Database, JSONFileDatabase, MemoryDatabase
from epictrack.db.store import IssueStore

__all__ = [
    "Document",
    "Epic",
    "Story",
    "Status",
    "Database",
    "JSONFileDatabase",
    "MemoryDatabase",
    "IssueStore",
    "find_integrity_issues",
    "TrackerError",
    "StorageError",
    "ReadFailure",
    "WriteFailure",
    "IntegrityError",
    "EpicNotFound",
    "StoryNotFound",
    "StoryNotInEpic",
]
