#!/usr/bin/env python3
"""
Todo Manager - CLI Interface
============================
Run the API server, or manage todos on a running server.

Usage:
    todolist serve --port 5000
    todolist add "Buy milk" -p low --list shopping
    todolist list --view today --sort dateAsc
    todolist done 3
    todolist reorder 3 1 2
    todolist lists
"""

import argparse
import json
import sys
from dataclasses import replace
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .client import ApiError, TodoClient
from .config import get_settings, setup_logging
from .query import BUILTIN_VIEWS, SortOption, default_list_for_view
from .schema import Todo, TodoCreate, TodoUpdate, new_subtask


PRIORITY_ICONS = {
    "high": "🔴",
    "medium": "🟡",
    "low": "🟢",
}


def format_todo(todo: Todo) -> str:
    """One-line summary of a todo"""
    icon = "✅" if todo.completed else "⬜"
    details = [todo.list_name]
    if todo.due_date:
        details.append(f"due {todo.due_date:%Y-%m-%d %H:%M}")
    line = f"  {icon} [{todo.id}] {PRIORITY_ICONS[todo.priority.value]} {todo.title} ({', '.join(details)})"
    if todo.subtasks:
        line += f" [{todo.completed_subtasks}/{len(todo.subtasks)} subtasks]"
    return line


def build_parser(api_url: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todolist",
        description="Todo Manager - personal tasks over a REST API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  todolist serve --port 5000                    Start the API server
  todolist add "Buy milk" -p low --list shopping
  todolist add "Release" --due 2026-10-20T09:00 --subtask "Tag" --subtask "Publish"
  todolist list --view this-week --sort dateAsc List todos due this week
  todolist edit 3 --title "Buy oat milk"        Change fields of a todo
  todolist done 3                               Mark todo 3 completed
  todolist subtask 3 a1b2c3d4                   Complete one subtask
  todolist reorder 3 1 2                        Set custom order
  todolist add-list errands orange-500          Create a list
        """
    )
    parser.add_argument("--url", default=api_url, help="API base URL")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # SERVE command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port")

    # LIST command
    list_parser = subparsers.add_parser("list", help="List todos")
    list_parser.add_argument("--view", default="all",
                             help=f"{', '.join(BUILTIN_VIEWS)} or a list name")
    list_parser.add_argument("--sort", default=SortOption.CUSTOM.value,
                             choices=[s.value for s in SortOption])
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # SHOW command
    show_parser = subparsers.add_parser("show", help="Show one todo")
    show_parser.add_argument("todo_id", type=int)

    # ADD command
    add_parser = subparsers.add_parser("add", help="Create a todo")
    add_parser.add_argument("title")
    add_parser.add_argument("-d", "--description")
    add_parser.add_argument("-p", "--priority", default="medium", choices=["high", "medium", "low"])
    add_parser.add_argument("--list", dest="list_name", help="List name")
    add_parser.add_argument("--view", default="all",
                            help="Active view; picks the list when --list is not given")
    add_parser.add_argument("--due", help="Due date (ISO 8601)")
    add_parser.add_argument("--subtask", action="append", default=[], help="Subtask title (repeatable)")

    # EDIT command
    edit_parser = subparsers.add_parser("edit", help="Change fields of a todo")
    edit_parser.add_argument("todo_id", type=int)
    edit_parser.add_argument("--title")
    edit_parser.add_argument("-d", "--description")
    edit_parser.add_argument("-p", "--priority", choices=["high", "medium", "low"])
    edit_parser.add_argument("--list", dest="list_name")
    edit_parser.add_argument("--due", help="Due date (ISO 8601)")
    edit_parser.add_argument("--clear-due", action="store_true", help="Remove the due date")

    # DONE command
    done_parser = subparsers.add_parser("done", help="Mark a todo completed")
    done_parser.add_argument("todo_id", type=int)
    done_parser.add_argument("--undo", action="store_true", help="Mark as not completed")

    # SUBTASK command
    subtask_parser = subparsers.add_parser("subtask", help="Complete one subtask")
    subtask_parser.add_argument("todo_id", type=int)
    subtask_parser.add_argument("subtask_id")
    subtask_parser.add_argument("--undo", action="store_true", help="Mark as not completed")

    # DELETE command
    delete_parser = subparsers.add_parser("delete", help="Delete a todo")
    delete_parser.add_argument("todo_id", type=int)

    # REORDER command
    reorder_parser = subparsers.add_parser("reorder", help="Set custom order")
    reorder_parser.add_argument("ids", type=int, nargs="+")

    # COUNTS command
    subparsers.add_parser("counts", help="Todo count per view")

    # LISTS command
    lists_parser = subparsers.add_parser("lists", help="Show lists")
    lists_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # ADD-LIST command
    add_list_parser = subparsers.add_parser("add-list", help="Create a list")
    add_list_parser.add_argument("name")
    add_list_parser.add_argument("color", help="Color token, e.g. blue-500")

    # DELETE-LIST command
    delete_list_parser = subparsers.add_parser("delete-list", help="Delete a list")
    delete_list_parser.add_argument("list_id", type=int)

    return parser


def main(argv: Optional[List[str]] = None, client: Optional[TodoClient] = None) -> int:
    settings = get_settings()
    parser = build_parser(settings.api_url)
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(settings.log_level)

    if args.command == "serve":
        from .server import run_server

        settings = replace(
            settings,
            host=args.host or settings.host,
            port=args.port or settings.port,
        )
        run_server(settings)
        return 0

    client = client or TodoClient(base_url=args.url)
    try:
        return _run(args, client)
    except ApiError as e:
        print(f"❌ {e.message}")
        return 1
    except httpx.TransportError as e:
        print(f"❌ Cannot reach {args.url}: {e}")
        return 1
    except ValidationError as e:
        print(f"❌ Invalid input: {e.errors()[0]['msg']}")
        return 1
    except LookupError as e:
        print(f"❌ {e}")
        return 1


def _run(args: argparse.Namespace, client: TodoClient) -> int:
    if args.command == "list":
        todos = client.list_todos(view=args.view, sort=args.sort)
        if args.json:
            print(json.dumps([t.model_dump(mode="json", by_alias=True) for t in todos], indent=2))
        elif not todos:
            print("No todos found")
        else:
            print(f"📋 {args.view} ({len(todos)} tasks)")
            for todo in todos:
                print(format_todo(todo))

    elif args.command == "show":
        todo = client.get_todo(args.todo_id)
        print(format_todo(todo))
        if todo.description:
            print(f"      {todo.description}")
        for subtask in todo.subtasks:
            mark = "x" if subtask.completed else " "
            print(f"      [{mark}] {subtask.title} ({subtask.id})")

    elif args.command == "add":
        todo = client.create_todo(TodoCreate(
            title=args.title,
            description=args.description,
            priority=args.priority,
            list_name=args.list_name or default_list_for_view(args.view),
            due_date=args.due,
            subtasks=[new_subtask(title) for title in args.subtask],
        ))
        print(f"✅ Created: [{todo.id}] {todo.title}")

    elif args.command == "edit":
        fields = {
            name: value
            for name, value in (
                ("title", args.title),
                ("description", args.description),
                ("priority", args.priority),
                ("list_name", args.list_name),
                ("due_date", args.due),
            )
            if value is not None
        }
        if args.clear_due:
            fields["due_date"] = None
        if not fields:
            print("Nothing to change")
            return 1
        todo = client.update_todo(args.todo_id, TodoUpdate(**fields))
        print(f"✏️ Updated: [{todo.id}] {todo.title}")

    elif args.command == "done":
        todo = client.set_completed(args.todo_id, not args.undo)
        print(format_todo(todo))

    elif args.command == "subtask":
        todo = client.toggle_subtask(args.todo_id, args.subtask_id, not args.undo)
        print(format_todo(todo))

    elif args.command == "delete":
        client.delete_todo(args.todo_id)
        print(f"🗑️ Deleted: {args.todo_id}")

    elif args.command == "reorder":
        client.reorder(args.ids)
        print(f"↕️ Reordered: {' '.join(str(i) for i in args.ids)}")

    elif args.command == "counts":
        for view, count in client.counts().items():
            print(f"  {view}: {count}")

    elif args.command == "lists":
        lists = client.list_lists()
        if args.json:
            print(json.dumps([l.model_dump(mode="json", by_alias=True) for l in lists], indent=2))
        else:
            print("📋 Lists:")
            for todo_list in lists:
                print(f"  [{todo_list.id}] {todo_list.name} ({todo_list.color})")

    elif args.command == "add-list":
        todo_list = client.create_list(args.name, args.color)
        print(f"✅ Created list: [{todo_list.id}] {todo_list.name}")

    elif args.command == "delete-list":
        client.delete_list(args.list_id)
        print(f"🗑️ Deleted list: {args.list_id}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
