# tests/helpers.py

from __future__ import annotations

from todolist.schema import Todo, TodoCreate
from todolist.store import TodoStore


def make_todo(store: TodoStore, title: str, **fields) -> Todo:
    return store.create_todo(TodoCreate(title=title, **fields))
