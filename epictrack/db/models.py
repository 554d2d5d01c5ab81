"""
Data models for the tracker document.

The whole persisted state is one Document: a shared id counter plus the
epic and story maps. Conversion to and from the JSON-ready dict form lives
here so the storage backends stay format-agnostic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class Status(Enum):
    """Workflow status shared by epics and stories.

    Values are the tokens written to disk.
    """

    OPEN = "Open"
    IN_PROGRESS = "InProgress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"

    @property
    def label(self) -> str:
        """Upper-case name shown in tables and prompts."""
        return _LABELS[self]

    @classmethod
    def parse(cls, text: str) -> "Status":
        """Parse a token, a label, or a loose spelling like 'in-progress'.

        Raises:
            ValueError: if text names no status
        """
        key = "".join(ch for ch in text.lower() if ch.isalnum())
        for status in cls:
            if key == status.value.lower():
                return status
        raise ValueError(
            f"Unknown status '{text}'. Expected one of: "
            + ", ".join(s.label.lower().replace(" ", "-") for s in cls)
        )


_LABELS = {
    Status.OPEN: "OPEN",
    Status.IN_PROGRESS: "IN PROGRESS",
    Status.RESOLVED: "RESOLVED",
    Status.CLOSED: "CLOSED",
}


@dataclass
class Epic:
    """Top-level work item owning an ordered list of story ids."""
    name: str
    description: str
    status: Status = Status.OPEN
    stories: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "stories": list(self.stories),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Epic":
        return cls(
            name=data["name"],
            description=data["description"],
            status=Status(data["status"]),
            stories=[int(s) for s in data["stories"]],
        )


@dataclass
class Story:
    """Leaf work item; belongs to exactly one epic."""
    name: str
    description: str
    status: Status = Status.OPEN

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Story":
        return cls(
            name=data["name"],
            description=data["description"],
            status=Status(data["status"]),
        )


@dataclass
class Document:
    """Complete persisted tracker state.

    last_item_id is the most recently issued id; ids start at 1 and are
    shared between epics and stories.
    """
    last_item_id: int = 0
    epics: dict[int, Epic] = field(default_factory=dict)
    stories: dict[int, Story] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "Document":
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Encode to the on-disk shape (string keys)."""
        return {
            "last_item_id": self.last_item_id,
            "epics": {str(k): v.to_dict() for k, v in self.epics.items()},
            "stories": {str(k): v.to_dict() for k, v in self.stories.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Document":
        """Decode from the on-disk shape.

        Expects data that already passed schema validation; raises
        KeyError/ValueError/TypeError otherwise.
        """
        return cls(
            last_item_id=int(data["last_item_id"]),
            epics=_decode_keyed(data["epics"], Epic.from_dict),
            stories=_decode_keyed(data["stories"], Story.from_dict),
        )


def _decode_keyed(items: dict[str, Any], decode: Callable[[dict[str, Any]], T]) -> dict[int, T]:
    """Convert string keys to ids; spellings of the same id ("1", "01") clash."""
    result: dict[int, T] = {}
    for key, value in items.items():
        item_id = int(key)
        if item_id in result:
            raise ValueError(f"Duplicate id {item_id} (key '{key}')")
        result[item_id] = decode(value)
    return result
