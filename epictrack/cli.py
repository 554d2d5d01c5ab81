#!/usr/bin/env python3
"""epictrack CLI entrypoint."""

import argparse
import logging
import sys
from pathlib import Path

from epictrack.db import IntegrityError, IssueStore, StorageError
from epictrack.lib.config import TrackerConfig, load_config
from epictrack.commands import check as cmd_check_module
from epictrack.commands import epic as cmd_epic_module
from epictrack.commands import story as cmd_story_module

logger = logging.getLogger(__name__)


def get_config(args) -> TrackerConfig:
    """Load config from --config (or tracker.env), applying --db."""
    try:
        config = load_config(Path(args.config) if args.config else None)
    except (OSError, ValueError) as e:
        print(f"ERROR: Invalid config: {e}", file=sys.stderr)
        sys.exit(2)

    if args.db:
        config.db_path = Path(args.db)
    return config


def cmd_tui(args, store: IssueStore) -> int:
    # textual is only imported when the TUI is requested
    from epictrack.commands import tui as cmd_tui_module
    return cmd_tui_module.cmd_tui(args, store)


def run_command(args, store: IssueStore) -> int:
    """Run the selected command, mapping store errors to exit codes."""
    try:
        return args.func(args, store)
    except IntegrityError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except StorageError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if isinstance(e.path, Path) and not e.path.exists():
            print("Run 'et init' to create a new tracker.", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='et', description='Local epic/story tracker')
    parser.add_argument('--config', '-c', help='Path to tracker.env (default: ./tracker.env)')
    parser.add_argument('--db', help='Path to the JSON database (overrides DB_PATH)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # et init
    p_init = subparsers.add_parser('init', help='Create an empty tracker database')
    p_init.add_argument('--force', action='store_true', help='Overwrite an existing database')
    p_init.set_defaults(func=cmd_check_module.cmd_init)

    # et list
    p_list = subparsers.add_parser('list', help='List epics')
    p_list.set_defaults(func=cmd_epic_module.cmd_list)

    # et check
    p_check = subparsers.add_parser('check', help='Check the database for integrity issues')
    p_check.set_defaults(func=cmd_check_module.cmd_check)

    # et tui
    p_tui = subparsers.add_parser('tui', help='Interactive browser')
    p_tui.set_defaults(func=cmd_tui)

    # et epic
    p_epic = subparsers.add_parser('epic', help='Epic commands')
    epic_sub = p_epic.add_subparsers(dest='epic_cmd', required=True)

    p_epic_show = epic_sub.add_parser('show', help='Show epic details')
    p_epic_show.add_argument('id', type=int, help='Epic ID')
    p_epic_show.set_defaults(func=cmd_epic_module.cmd_epic_show)

    p_epic_create = epic_sub.add_parser('create', help='Create an epic')
    p_epic_create.add_argument('name', help='Epic name')
    p_epic_create.add_argument('--description', '-d', help='Epic description')
    p_epic_create.set_defaults(func=cmd_epic_module.cmd_epic_create)

    p_epic_status = epic_sub.add_parser('status', help='Update epic status')
    p_epic_status.add_argument('id', type=int, help='Epic ID')
    p_epic_status.add_argument('status', help='open, in-progress, resolved or closed')
    p_epic_status.set_defaults(func=cmd_epic_module.cmd_epic_status)

    p_epic_delete = epic_sub.add_parser('delete', help='Delete an epic and its stories')
    p_epic_delete.add_argument('id', type=int, help='Epic ID')
    p_epic_delete.add_argument('--confirm', action='store_true', required=True, help='Confirm deletion')
    p_epic_delete.set_defaults(func=cmd_epic_module.cmd_epic_delete)

    # et story
    p_story = subparsers.add_parser('story', help='Story commands')
    story_sub = p_story.add_subparsers(dest='story_cmd', required=True)

    p_story_show = story_sub.add_parser('show', help='Show story details')
    p_story_show.add_argument('id', type=int, help='Story ID')
    p_story_show.set_defaults(func=cmd_story_module.cmd_story_show)

    p_story_create = story_sub.add_parser('create', help='Create a story in an epic')
    p_story_create.add_argument('epic', type=int, help='Epic ID')
    p_story_create.add_argument('name', help='Story name')
    p_story_create.add_argument('--description', '-d', help='Story description')
    p_story_create.set_defaults(func=cmd_story_module.cmd_story_create)

    p_story_status = story_sub.add_parser('status', help='Update story status')
    p_story_status.add_argument('id', type=int, help='Story ID')
    p_story_status.add_argument('status', help='open, in-progress, resolved or closed')
    p_story_status.set_defaults(func=cmd_story_module.cmd_story_status)

    p_story_delete = story_sub.add_parser('delete', help='Delete a story from an epic')
    p_story_delete.add_argument('epic', type=int, help='Epic ID')
    p_story_delete.add_argument('id', type=int, help='Story ID')
    p_story_delete.add_argument('--confirm', action='store_true', required=True, help='Confirm deletion')
    p_story_delete.set_defaults(func=cmd_story_module.cmd_story_delete)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config(args)
    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger.debug(f"Using database {config.db_path}")

    store = IssueStore.from_path(config.db_path)
    return run_command(args, store)


if __name__ == '__main__':
    sys.exit(main())
