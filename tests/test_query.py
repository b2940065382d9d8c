# tests/test_query.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from todolist.query import (
    SortOption, View, count_todos_by_view, default_list_for_view,
    filter_todos, query_todos, sort_todos,
)
from todolist.schema import Priority, Todo


def _todo(todo_id: int, **fields) -> Todo:
    fields.setdefault("title", f"todo {todo_id}")
    fields.setdefault("order", todo_id)
    fields.setdefault("created_at", datetime(2024, 1, 1))
    return Todo(id=todo_id, **fields)


def test_all_view_keeps_everything() -> None:
    todos = [_todo(1), _todo(2, list_name="work")]
    assert filter_todos(todos, "all") == todos


def test_high_priority_view() -> None:
    todos = [_todo(1, priority="high"), _todo(2, priority="low"), _todo(3, priority="high")]
    assert [t.id for t in filter_todos(todos, View.HIGH_PRIORITY)] == [1, 3]


def test_list_name_view() -> None:
    todos = [_todo(1, list_name="work"), _todo(2), _todo(3, list_name="work")]
    assert [t.id for t in filter_todos(todos, "work")] == [1, 3]
    assert filter_todos(todos, "shopping") == []


def test_today_view_window(now: datetime) -> None:
    start = datetime(2024, 5, 10)
    todos = [
        _todo(1, due_date=start),                                   # start of day
        _todo(2, due_date=start + timedelta(hours=23, minutes=59)),
        _todo(3, due_date=start + timedelta(days=1)),               # exactly 24h later
        _todo(4, due_date=start - timedelta(minutes=1)),            # yesterday
        _todo(5),                                                   # undated
    ]
    assert [t.id for t in filter_todos(todos, "today", now=now)] == [1, 2]


def test_this_week_view_window(now: datetime) -> None:
    start = datetime(2024, 5, 10)
    todos = [
        _todo(1, due_date=start + timedelta(days=6, hours=23)),
        _todo(2, due_date=start + timedelta(days=7)),
        _todo(3, due_date=start + timedelta(hours=1)),
        _todo(4),
    ]
    assert [t.id for t in filter_todos(todos, "this-week", now=now)] == [1, 3]


def test_today_view_with_aware_due_date(now: datetime) -> None:
    local_noon = datetime(2024, 5, 10, 12, 0).astimezone()
    todo = _todo(1, due_date=local_noon.astimezone(timezone.utc))
    assert [t.id for t in filter_todos([todo], "today", now=now)] == [1]


def test_priority_desc() -> None:
    todos = [_todo(1, priority="low"), _todo(2, priority="high"), _todo(3, priority="medium")]
    result = sort_todos(todos, "priorityDesc")
    assert [t.priority for t in result] == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]


def test_priority_asc() -> None:
    todos = [_todo(1, priority="medium"), _todo(2, priority="high"), _todo(3, priority="low")]
    result = sort_todos(todos, SortOption.PRIORITY_ASC)
    assert [t.priority for t in result] == [Priority.LOW, Priority.MEDIUM, Priority.HIGH]


def test_date_asc_puts_undated_last() -> None:
    todos = [
        _todo(1),
        _todo(2, due_date=datetime(2024, 1, 2)),
        _todo(3, due_date=datetime(2024, 1, 1)),
    ]
    result = sort_todos(todos, "dateAsc")
    assert [t.due_date for t in result] == [datetime(2024, 1, 1), datetime(2024, 1, 2), None]


def test_date_desc_puts_undated_last() -> None:
    todos = [
        _todo(1),
        _todo(2, due_date=datetime(2024, 1, 1)),
        _todo(3, due_date=datetime(2024, 1, 2)),
    ]
    result = sort_todos(todos, "dateDesc")
    assert [t.id for t in result] == [3, 2, 1]


def test_custom_sort_uses_order() -> None:
    todos = [_todo(1, order=5), _todo(2, order=0), _todo(3, order=2)]
    assert [t.id for t in sort_todos(todos)] == [2, 3, 1]


def test_unknown_sort_raises() -> None:
    with pytest.raises(ValueError):
        sort_todos([_todo(1)], "alphabetical")


def test_query_filters_then_sorts(now: datetime) -> None:
    todos = [
        _todo(1, list_name="work", priority="low"),
        _todo(2, list_name="work", priority="high"),
        _todo(3, list_name="home", priority="high"),
    ]
    result = query_todos(todos, view="work", sort="priorityDesc", now=now)
    assert [t.id for t in result] == [2, 1]


def test_count_todos_by_view(now: datetime) -> None:
    todos = [
        _todo(1, priority="high", due_date=datetime(2024, 5, 10, 18, 0)),
        _todo(2, list_name="work", due_date=datetime(2024, 5, 13, 9, 0)),
        _todo(3, list_name="work"),
    ]
    counts = count_todos_by_view(todos, ["all", "today", "this-week", "high-priority", "work"], now=now)
    assert counts == {"all": 3, "today": 1, "this-week": 2, "high-priority": 1, "work": 2}


def test_count_defaults_to_builtin_views(now: datetime) -> None:
    assert set(count_todos_by_view([], now=now)) == {"all", "today", "this-week", "high-priority"}


@pytest.mark.parametrize(
    "view, expected",
    [("all", "personal"), ("today", "personal"), ("this-week", "personal"),
     ("high-priority", "personal"), ("work", "work")],
)
def test_default_list_for_view(view: str, expected: str) -> None:
    assert default_list_for_view(view) == expected
