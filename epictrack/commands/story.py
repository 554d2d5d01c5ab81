"""
et story - Story commands.
"""

from epictrack.commands.epic import parse_status_arg
from epictrack.db import IssueStore, Story


def _find_owner(document, story_id: int) -> int | None:
    for epic_id, epic in document.epics.items():
        if story_id in epic.stories:
            return epic_id
    return None


def cmd_story_show(args, store: IssueStore) -> int:
    document = store.read()
    story = document.stories.get(args.id)

    if story is None:
        print(f"ERROR: Story {args.id} not found")
        return 2

    owner = _find_owner(document, args.id)

    print(f"Story: {args.id}")
    print("=" * 60)
    print(f"Name:    {story.name}")
    print(f"Status:  {story.status.label}")
    print(f"Epic:    {owner if owner is not None else '(none)'}")
    print()

    if story.description:
        print("Description")
        print("-" * 40)
        print(story.description)
        print()

    return 0


def cmd_story_create(args, store: IssueStore) -> int:
    story = Story(name=args.name, description=args.description or "")
    story_id = store.create_story(story, args.epic)
    print(f"Created story {story_id} in epic {args.epic}: {args.name}")
    return 0


def cmd_story_status(args, store: IssueStore) -> int:
    status = parse_status_arg(args.status)
    if status is None:
        return 2

    store.update_story_status(args.id, status)
    print(f"Story {args.id} is now {status.label}")
    return 0


def cmd_story_delete(args, store: IssueStore) -> int:
    store.delete_story(args.epic, args.id)
    print(f"Deleted story {args.id} from epic {args.epic}")
    return 0
