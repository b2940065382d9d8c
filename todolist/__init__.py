"""
Todo Manager
============

Personal task manager: todos with priorities, due dates, subtasks and
user-defined lists, served over a small REST API from an in-memory store.

Usage:
    from todolist import TodoStore, TodoCreate, TodoUpdate

    store = TodoStore()
    todo = store.create_todo(TodoCreate(title="Buy milk", priority="low"))
    store.update_todo(todo.id, TodoUpdate(completed=True))

    # Filtered / sorted views
    from todolist import query_todos
    query_todos(store.get_all_todos(), view="today", sort="dateAsc")

    # HTTP API
    from todolist.server import create_app
    app = create_app(store)
"""

from .schema import (
    Priority,
    Subtask,
    Todo,
    TodoCreate,
    TodoUpdate,
    TodoList,
    TodoListCreate,
    User,
    UserCreate,
    DEFAULT_LISTS,
    new_subtask,
)

from .store import TodoStore, NotFoundError
from .query import View, SortOption, query_todos, count_todos_by_view
from .merge import apply_update, assign_order, toggle_subtask

__version__ = "1.0.0"
__all__ = [
    "TodoStore",
    "NotFoundError",
    "Priority",
    "Subtask",
    "Todo",
    "TodoCreate",
    "TodoUpdate",
    "TodoList",
    "TodoListCreate",
    "User",
    "UserCreate",
    "DEFAULT_LISTS",
    "new_subtask",
    "View",
    "SortOption",
    "query_todos",
    "count_todos_by_view",
    "apply_update",
    "assign_order",
    "toggle_subtask",
]
