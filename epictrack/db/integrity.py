"""
Referential integrity checks over a whole Document.

The store keeps these invariants by construction; this module exists to
audit documents edited by hand or written by older tools.
"""

from epictrack.db.models import Document


def find_dangling_story_ids(document: Document, epic_id: int) -> list[int]:
    """Story ids listed by the epic that have no entry in stories."""
    epic = document.epics.get(epic_id)
    if epic is None:
        return []
    return [sid for sid in epic.stories if sid not in document.stories]


def find_integrity_issues(document: Document) -> list[str]:
    """Describe every invariant violation in the document.

    Returns an empty list for a consistent document.
    """
    issues: list[str] = []
    owners: dict[int, int] = {}

    all_ids = list(document.epics) + list(document.stories)
    for item_id in sorted(set(all_ids)):
        if item_id <= 0:
            issues.append(f"Invalid id {item_id} (ids start at 1)")
        elif item_id > document.last_item_id:
            issues.append(
                f"Id {item_id} is above last_item_id {document.last_item_id}"
            )

    for item_id in sorted(set(document.epics) & set(document.stories)):
        issues.append(f"Id {item_id} is used by both an epic and a story")

    for epic_id in sorted(document.epics):
        epic = document.epics[epic_id]
        seen: set[int] = set()
        for story_id in epic.stories:
            if story_id in seen:
                issues.append(f"Epic {epic_id} lists story {story_id} more than once")
                continue
            seen.add(story_id)

            if story_id not in document.stories:
                issues.append(f"Epic {epic_id} references missing story {story_id}")

            if story_id in owners:
                issues.append(
                    f"Story {story_id} is listed by epics {owners[story_id]} and {epic_id}"
                )
            else:
                owners[story_id] = epic_id

    for story_id in sorted(document.stories):
        if story_id not in owners:
            issues.append(f"Story {story_id} does not belong to any epic")

    return issues
