"""
Todo Manager - Query Engine
===========================
Filtered and ordered views over a collection of todos.

Views are either one of the built-in virtual views (all, today, this-week,
high-priority) or the name of a user list.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .schema import DEFAULT_LIST_NAME, Priority, Todo


class View(str, Enum):
    """Built-in virtual views"""
    ALL = "all"
    TODAY = "today"
    THIS_WEEK = "this-week"
    HIGH_PRIORITY = "high-priority"


BUILTIN_VIEWS = tuple(v.value for v in View)


class SortOption(str, Enum):
    CUSTOM = "custom"
    DATE_ASC = "dateAsc"
    DATE_DESC = "dateDesc"
    PRIORITY_ASC = "priorityAsc"
    PRIORITY_DESC = "priorityDesc"


def to_local(moment: datetime) -> datetime:
    """Naive local time; aware values are converted first"""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def start_of_day(moment: datetime) -> datetime:
    return to_local(moment).replace(hour=0, minute=0, second=0, microsecond=0)


def due_on(todo: Todo, day: date) -> bool:
    return todo.due_date is not None and to_local(todo.due_date).date() == day


def due_within(todo: Todo, start: datetime, end: datetime) -> bool:
    """True when the due date falls in [start, end)"""
    if todo.due_date is None:
        return False
    return start <= to_local(todo.due_date) < end


def filter_todos(
    todos: Iterable[Todo],
    view: str = View.ALL.value,
    now: Optional[datetime] = None,
) -> List[Todo]:
    """Apply a view. Any view that is not built in is treated as a list name."""
    todos = list(todos)
    view = getattr(view, "value", view)

    if view == View.ALL.value:
        return todos
    if view == View.HIGH_PRIORITY.value:
        return [t for t in todos if t.priority == Priority.HIGH]
    if view in (View.TODAY.value, View.THIS_WEEK.value):
        today = start_of_day(now or datetime.now())
        days = 1 if view == View.TODAY.value else 7
        end = today + timedelta(days=days)
        return [t for t in todos if due_within(t, today, end)]
    return [t for t in todos if t.list_name == view]


def sort_todos(
    todos: Iterable[Todo],
    sort: Union[SortOption, str] = SortOption.CUSTOM,
) -> List[Todo]:
    """
    Order todos by one of the sort options.

    Date sorts always put undated todos last, in either direction.
    Raises ValueError for an unknown sort option.
    """
    sort = SortOption(sort)
    todos = list(todos)

    if sort in (SortOption.DATE_ASC, SortOption.DATE_DESC):
        dated = [t for t in todos if t.due_date is not None]
        undated = [t for t in todos if t.due_date is None]
        dated.sort(
            key=lambda t: to_local(t.due_date),
            reverse=sort == SortOption.DATE_DESC,
        )
        return dated + undated

    if sort in (SortOption.PRIORITY_ASC, SortOption.PRIORITY_DESC):
        return sorted(
            todos,
            key=lambda t: t.priority.weight,
            reverse=sort == SortOption.PRIORITY_DESC,
        )

    return sorted(todos, key=lambda t: t.order)


def query_todos(
    todos: Iterable[Todo],
    view: str = View.ALL.value,
    sort: Union[SortOption, str] = SortOption.CUSTOM,
    now: Optional[datetime] = None,
) -> List[Todo]:
    """Filter by view, then sort"""
    return sort_todos(filter_todos(todos, view, now=now), sort)


def count_todos_by_view(
    todos: Iterable[Todo],
    views: Optional[Sequence[str]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Number of todos in each view (sidebar badges)"""
    todos = list(todos)
    now = now or datetime.now()
    return {
        view: len(filter_todos(todos, view, now=now))
        for view in (views if views is not None else BUILTIN_VIEWS)
    }


def default_list_for_view(view: str) -> str:
    """List a new todo is filed under when created while ``view`` is active"""
    if view in BUILTIN_VIEWS:
        return DEFAULT_LIST_NAME
    return view
