"""
Error types raised by the tracker store.

StorageError subclasses mean the backend could not do its job and the
requested operation is lost. IntegrityError subclasses mean the caller
referred to something that isn't there (usually a stale id) and can be
reported and retried.
"""

from pathlib import Path


class TrackerError(Exception):
    """Base class for all store errors."""
    pass


class StorageError(TrackerError):
    """Backend read or write failed."""

    action = "Storage operation"

    def __init__(self, path: Path | str | None, reason: str):
        self.path = path
        self.reason = reason
        where = f" for {path}" if path else ""
        super().__init__(f"{self.action} failed{where}: {reason}")


class ReadFailure(StorageError):
    """Document could not be located or decoded."""

    action = "Read"


class WriteFailure(StorageError):
    """Document could not be persisted."""

    action = "Write"


class IntegrityError(TrackerError):
    """A referenced epic or story does not exist where expected."""
    pass


class EpicNotFound(IntegrityError):

    def __init__(self, epic_id: int):
        self.epic_id = epic_id
        super().__init__(f"Epic {epic_id} not found")


class StoryNotFound(IntegrityError):

    def __init__(self, story_id: int):
        self.story_id = story_id
        super().__init__(f"Story {story_id} not found")


class StoryNotInEpic(IntegrityError):

    def __init__(self, epic_id: int, story_id: int):
        self.epic_id = epic_id
        self.story_id = story_id
        super().__init__(f"Story {story_id} does not belong to epic {epic_id}")
