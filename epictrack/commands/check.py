"""
et init / et check - Database setup and integrity audit.
"""

from epictrack.db import Document, IssueStore, JSONFileDatabase, find_integrity_issues


def cmd_init(args, store: IssueStore) -> int:
    """Write an empty document to the configured path."""
    database = store.database
    if isinstance(database, JSONFileDatabase) and database.exists() and not args.force:
        print(f"ERROR: {database.file_path} already exists (use --force to overwrite)")
        return 1

    database.write(Document.empty())
    target = database.file_path if isinstance(database, JSONFileDatabase) else "database"
    print(f"Initialized empty tracker at {target}")
    return 0


def cmd_check(args, store: IssueStore) -> int:
    """Report invariant violations; exit 1 if there are any."""
    document = store.read()
    issues = find_integrity_issues(document)

    print(f"Epics: {len(document.epics)}  Stories: {len(document.stories)}  "
          f"Last id: {document.last_item_id}")

    if not issues:
        print("OK: no integrity issues")
        return 0

    print(f"Found {len(issues)} integrity {'issue' if len(issues) == 1 else 'issues'}:")
    for issue in issues:
        print(f"  - {issue}")
    return 1
