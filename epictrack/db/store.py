"""
Issue store: one method per user command over a whole-document backend.

Every mutation follows the same cycle:

  1. read the current document from the backend
  2. build the candidate document on a private working copy
  3. if building it raised (missing epic, story not in epic, ...), stop
     without writing
  4. write the candidate and return the new id, if any

Nothing is cached between calls; the backend is the only state.
"""

import copy
import logging
from pathlib import Path
from typing import Callable, TypeVar

from epictrack.db.errors import EpicNotFound, StoryNotFound, StoryNotInEpic
from epictrack.db.integrity import find_dangling_story_ids
from epictrack.db.models import Document, Epic, Status, Story
from epictrack.db.storage import Database, JSONFileDatabase

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _next_id(document: Document) -> int:
    return document.last_item_id + 1


def _epic_or_raise(document: Document, epic_id: int) -> Epic:
    epic = document.epics.get(epic_id)
    if epic is None:
        raise EpicNotFound(epic_id)
    return epic


# Transforms. Each receives a working copy it may mutate freely and returns
# the value the store hands back to the caller.

def _add_epic(document: Document, epic: Epic) -> int:
    new_id = _next_id(document)
    stored = copy.deepcopy(epic)
    if stored.stories:
        # Stories join an epic only through create_story.
        logger.warning(
            f"Ignoring story ids {stored.stories} passed with new epic {new_id}"
        )
        stored.stories = []
    document.epics[new_id] = stored
    document.last_item_id = new_id
    return new_id


def _add_story(document: Document, story: Story, epic_id: int) -> int:
    new_id = _next_id(document)
    document.stories[new_id] = copy.deepcopy(story)
    document.last_item_id = new_id
    _epic_or_raise(document, epic_id).stories.append(new_id)
    return new_id


def _remove_epic(document: Document, epic_id: int) -> None:
    epic = _epic_or_raise(document, epic_id)

    dangling = find_dangling_story_ids(document, epic_id)
    if dangling:
        logger.warning(
            f"Epic {epic_id} references missing stories {dangling}; "
            f"skipping them during delete"
        )

    for story_id in epic.stories:
        document.stories.pop(story_id, None)
    del document.epics[epic_id]


def _remove_story(document: Document, epic_id: int, story_id: int) -> None:
    epic = _epic_or_raise(document, epic_id)
    if story_id not in epic.stories:
        raise StoryNotInEpic(epic_id, story_id)

    document.stories.pop(story_id, None)
    epic.stories = [sid for sid in epic.stories if sid != story_id]


def _set_epic_status(document: Document, epic_id: int, status: Status) -> None:
    _epic_or_raise(document, epic_id).status = status


def _set_story_status(document: Document, story_id: int, status: Status) -> None:
    story = document.stories.get(story_id)
    if story is None:
        raise StoryNotFound(story_id)
    story.status = status


class IssueStore:
    """Epic/story operations with validate-before-persist semantics.

    The backend is injected; use IssueStore.from_path for the JSON file
    backend.
    """

    def __init__(self, database: Database):
        self.database = database

    @classmethod
    def from_path(cls, file_path: Path | str) -> "IssueStore":
        return cls(JSONFileDatabase(file_path))

    def read(self) -> Document:
        """Return the current full document (read-only use)."""
        return self.database.read()

    def _apply(self, transform: Callable[[Document], T]) -> T:
        # The backend hands out a fresh object on every read, so the
        # transform's mutations never reach persisted state unless written.
        working = self.database.read()
        result = transform(working)
        self.database.write(working)
        return result

    def create_epic(self, epic: Epic) -> int:
        """Add an epic; returns its new id."""
        epic_id = self._apply(lambda doc: _add_epic(doc, epic))
        logger.info(f"Created epic {epic_id}: {epic.name}")
        return epic_id

    def create_story(self, story: Story, epic_id: int) -> int:
        """Add a story to an epic; returns its new id.

        Raises:
            EpicNotFound: if epic_id doesn't exist (no id is consumed)
        """
        story_id = self._apply(lambda doc: _add_story(doc, story, epic_id))
        logger.info(f"Created story {story_id} in epic {epic_id}: {story.name}")
        return story_id

    def delete_epic(self, epic_id: int) -> None:
        """Remove an epic together with every story it lists.

        Raises:
            EpicNotFound: if epic_id doesn't exist
        """
        self._apply(lambda doc: _remove_epic(doc, epic_id))
        logger.info(f"Deleted epic {epic_id}")

    def delete_story(self, epic_id: int, story_id: int) -> None:
        """Remove a story from an epic and from the document.

        Raises:
            EpicNotFound: if epic_id doesn't exist
            StoryNotInEpic: if the epic doesn't list story_id
        """
        self._apply(lambda doc: _remove_story(doc, epic_id, story_id))
        logger.info(f"Deleted story {story_id} from epic {epic_id}")

    def update_epic_status(self, epic_id: int, status: Status) -> None:
        """Raises EpicNotFound if epic_id doesn't exist."""
        self._apply(lambda doc: _set_epic_status(doc, epic_id, status))
        logger.info(f"Epic {epic_id} status -> {status.value}")

    def update_story_status(self, story_id: int, status: Status) -> None:
        """Raises StoryNotFound if story_id doesn't exist."""
        self._apply(lambda doc: _set_story_status(doc, story_id, status))
        logger.info(f"Story {story_id} status -> {status.value}")
