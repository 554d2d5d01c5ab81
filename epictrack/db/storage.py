"""
Storage backends for the tracker document.

A backend loads the whole Document and writes the whole Document back.
JSONFileDatabase persists to a JSON file; MemoryDatabase keeps the last
written document in memory and stands in for the file in tests.
"""

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from epictrack.db.errors import ReadFailure, WriteFailure
from epictrack.db.models import Document
from epictrack.lib.validate import ValidationError, validate, validate_before_write

logger = logging.getLogger(__name__)

DOCUMENT_SCHEMA = "document"


class Database(ABC):
    """Whole-document persistence contract."""

    @abstractmethod
    def read(self) -> Document:
        """Load the full document.

        Raises:
            ReadFailure: if the target is missing or can't be decoded
        """

    @abstractmethod
    def write(self, document: Document) -> None:
        """Replace the persisted document.

        Raises:
            WriteFailure: if the document can't be fully written
        """


class JSONFileDatabase(Database):
    """Document stored as a single JSON file."""

    def __init__(self, file_path: Path | str):
        self.file_path = Path(file_path)

    def exists(self) -> bool:
        return self.file_path.exists()

    def read(self) -> Document:
        try:
            raw = self.file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ReadFailure(self.file_path, str(e)) from e
        except UnicodeDecodeError as e:
            raise ReadFailure(self.file_path, f"Not valid UTF-8: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ReadFailure(self.file_path, f"Invalid JSON: {e}") from e

        try:
            validate(data, DOCUMENT_SCHEMA)
            document = Document.from_dict(data)
        except ValidationError as e:
            raise ReadFailure(self.file_path, str(e)) from e
        except (KeyError, ValueError, TypeError) as e:
            raise ReadFailure(self.file_path, f"Malformed document: {e}") from e

        logger.debug(
            f"Loaded {self.file_path}: {len(document.epics)} epics, "
            f"{len(document.stories)} stories, last id {document.last_item_id}"
        )
        return document

    def write(self, document: Document) -> None:
        data = document.to_dict()
        try:
            validate_before_write(data, DOCUMENT_SCHEMA, self.file_path)
        except ValidationError as e:
            raise WriteFailure(self.file_path, str(e)) from e

        try:
            self._atomic_write(json.dumps(data, indent=2) + "\n")
        except OSError as e:
            raise WriteFailure(self.file_path, str(e)) from e

        logger.debug(f"Wrote {self.file_path} (last id {document.last_item_id})")

    def _atomic_write(self, content: str) -> None:
        """Write to a temp file beside the target, then rename over it."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.file_path.parent),
            prefix=f".{self.file_path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.file_path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise


class MemoryDatabase(Database):
    """In-memory backend returning whatever was last written.

    Counts reads and writes so callers can check how a store used it.
    """

    def __init__(self, initial: Document | None = None):
        self._document = copy.deepcopy(initial) if initial is not None else Document.empty()
        self.reads = 0
        self.writes = 0

    def read(self) -> Document:
        self.reads += 1
        return copy.deepcopy(self._document)

    def write(self, document: Document) -> None:
        self.writes += 1
        self._document = copy.deepcopy(document)
