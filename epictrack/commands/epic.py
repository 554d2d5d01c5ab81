"""
et list / et epic - Epic commands.
"""

from epictrack.db import Epic, IssueStore, Status
from epictrack.lib.columns import format_row

LIST_WIDTHS = [8, 32, 14, 7]


def parse_status_arg(text: str) -> Status | None:
    try:
        return Status.parse(text)
    except ValueError as e:
        print(f"ERROR: {e}")
        return None


def cmd_list(args, store: IssueStore) -> int:
    """List all epics."""
    document = store.read()

    if not document.epics:
        print("No epics found")
        print()
        print("Create one with: et epic create <name>")
        return 0

    header = format_row(["ID", "NAME", "STATUS", "STORIES"], LIST_WIDTHS)
    print(header)
    print("-" * len(header))

    for epic_id in sorted(document.epics):
        epic = document.epics[epic_id]
        print(format_row(
            [str(epic_id), epic.name, epic.status.label, str(len(epic.stories))],
            LIST_WIDTHS,
        ))

    count = len(document.epics)
    print("-" * len(header))
    print(f"{count} {'epic' if count == 1 else 'epics'}")
    return 0


def cmd_epic_show(args, store: IssueStore) -> int:
    """Show an epic and its stories."""
    document = store.read()
    epic = document.epics.get(args.id)

    if epic is None:
        print(f"ERROR: Epic {args.id} not found")
        return 2

    print(f"Epic: {args.id}")
    print("=" * 60)
    print(f"Name:    {epic.name}")
    print(f"Status:  {epic.status.label}")
    print()

    if epic.description:
        print("Description")
        print("-" * 40)
        print(epic.description)
        print()

    print("Stories")
    print("-" * 40)
    if not epic.stories:
        print("  (none)")
    for story_id in epic.stories:
        story = document.stories.get(story_id)
        if story is None:
            print(f"  {story_id:<6} <missing>")
        else:
            print(f"  {story_id:<6} {story.status.label:<12} {story.name}")

    return 0


def cmd_epic_create(args, store: IssueStore) -> int:
    epic_id = store.create_epic(Epic(name=args.name, description=args.description or ""))
    print(f"Created epic {epic_id}: {args.name}")
    return 0


def cmd_epic_status(args, store: IssueStore) -> int:
    status = parse_status_arg(args.status)
    if status is None:
        return 2

    store.update_epic_status(args.id, status)
    print(f"Epic {args.id} is now {status.label}")
    return 0


def cmd_epic_delete(args, store: IssueStore) -> int:
    """Delete an epic and all of its stories."""
    store.delete_epic(args.id)
    print(f"Deleted epic {args.id} and its stories")
    return 0
