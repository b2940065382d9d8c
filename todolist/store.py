"""
Todo Manager - Entity Store
===========================
In-memory storage for todos, lists and users.

Each collection is a dict keyed by an integer id with its own counter
starting at 1. Records handed out are copies; the store is the only place
stored records change.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Union
import logging

from .merge import apply_update, assign_order
from .query import View, due_on, start_of_day, to_local
from .schema import (
    DEFAULT_LISTS, Priority, Todo, TodoCreate, TodoList, TodoListCreate,
    TodoUpdate, User, UserCreate,
)

logger = logging.getLogger("todolist")


class NotFoundError(LookupError):
    """Raised when an operation targets an id the store does not hold"""


class TodoStore:
    """
    Single-process in-memory store.

    There is no locking and no versioning: the last write to an id wins.
    Lists and todos are independent collections; ``Todo.list_name`` is not
    checked against existing lists and deleting a list never touches todos.
    """

    def __init__(self, seed_default_lists: bool = True):
        self._todos: Dict[int, Todo] = {}
        self._lists: Dict[int, TodoList] = {}
        self._users: Dict[int, User] = {}
        self._next_todo_id = 1
        self._next_list_id = 1
        self._next_user_id = 1

        if seed_default_lists:
            for list_def in DEFAULT_LISTS:
                self.create_list(TodoListCreate(**list_def))

    # ========================================
    # USER OPERATIONS
    # ========================================

    def get_user(self, user_id: int) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user.model_copy()
        return None

    def create_user(self, data: UserCreate) -> User:
        user = User(id=self._next_user_id, **data.model_dump())
        self._next_user_id += 1
        self._users[user.id] = user
        logger.info(f"Created user: {user.username} ({user.id})")
        return user.model_copy()

    # ========================================
    # TODO OPERATIONS
    # ========================================

    def get_all_todos(self) -> List[Todo]:
        """All todos in custom order"""
        return self._ordered(self._todos.values())

    def get_todo_by_id(self, todo_id: int) -> Optional[Todo]:
        todo = self._todos.get(todo_id)
        return todo.model_copy(deep=True) if todo else None

    def get_todos_by_list(self, list_name: str) -> List[Todo]:
        """Todos filed under ``list_name``; "all" returns every todo"""
        if list_name == View.ALL.value:
            return self.get_all_todos()
        return self._ordered(t for t in self._todos.values() if t.list_name == list_name)

    def get_todos_by_priority(self, priority: Union[Priority, str]) -> List[Todo]:
        priority = Priority(priority)
        return self._ordered(t for t in self._todos.values() if t.priority == priority)

    def get_todos_by_date(
        self,
        start: datetime,
        end: Optional[datetime] = None
    ) -> List[Todo]:
        """
        Todos with a due date in [start, end], or on the same calendar day
        as ``start`` when no end is given.
        """
        if end is None:
            day = start_of_day(start).date()
            matches = (t for t in self._todos.values() if due_on(t, day))
        else:
            lower, upper = to_local(start), to_local(end)
            matches = (
                t for t in self._todos.values()
                if t.due_date is not None and lower <= to_local(t.due_date) <= upper
            )
        return self._ordered(matches)

    def create_todo(self, data: TodoCreate) -> Todo:
        """
        Store a new todo.

        The todo goes to the end of the custom order (max order + 1, or 1 for
        an empty store) and always starts out not completed.
        """
        max_order = max((t.order for t in self._todos.values()), default=0)

        todo = Todo(
            id=self._next_todo_id,
            order=max_order + 1,
            created_at=datetime.now().astimezone(),
            completed=False,
            **data.model_dump(),
        )
        self._next_todo_id += 1
        self._todos[todo.id] = todo

        logger.info(f"Created todo: {todo.title} ({todo.id}) in list '{todo.list_name}'")
        return todo.model_copy(deep=True)

    def update_todo(self, todo_id: int, update: TodoUpdate) -> Todo:
        """Merge the fields present in ``update`` over the stored todo"""
        existing = self._todos.get(todo_id)
        if existing is None:
            logger.warning(f"Update for unknown todo: {todo_id}")
            raise NotFoundError(f"Todo not found: {todo_id}")

        todo = apply_update(existing, update)
        self._todos[todo_id] = todo

        logger.debug(f"Updated todo {todo_id}: {sorted(update.model_fields_set)}")
        return todo.model_copy(deep=True)

    def delete_todo(self, todo_id: int) -> bool:
        """Remove a todo. Other todos keep their order values."""
        removed = self._todos.pop(todo_id, None)
        if removed is None:
            return False
        logger.info(f"Deleted todo: {removed.title} ({todo_id})")
        return True

    def update_todo_order(self, ids: Sequence[Union[int, float]]) -> bool:
        """Set each listed todo's order to its position in ``ids``"""
        updated = assign_order(self._todos, ids)
        self._todos.update(updated)
        logger.debug(f"Reordered {len(updated)} of {len(ids)} todos")
        return True

    # ========================================
    # LIST OPERATIONS
    # ========================================

    def get_all_lists(self) -> List[TodoList]:
        return [todo_list.model_copy() for todo_list in self._lists.values()]

    def get_list_by_id(self, list_id: int) -> Optional[TodoList]:
        todo_list = self._lists.get(list_id)
        return todo_list.model_copy() if todo_list else None

    def create_list(self, data: TodoListCreate) -> TodoList:
        """Store a new list. Names are not checked for uniqueness."""
        if any(l.name == data.name for l in self._lists.values()):
            logger.warning(f"Duplicate list name: {data.name}")

        todo_list = TodoList(id=self._next_list_id, **data.model_dump())
        self._next_list_id += 1
        self._lists[todo_list.id] = todo_list

        logger.info(f"Created list: {todo_list.name} ({todo_list.id})")
        return todo_list.model_copy()

    def delete_list(self, list_id: int) -> bool:
        """Remove a list. Todos filed under its name are left as they are."""
        removed = self._lists.pop(list_id, None)
        if removed is None:
            return False
        logger.info(f"Deleted list: {removed.name} ({list_id})")
        return True

    # ========================================
    # HELPER METHODS
    # ========================================

    @staticmethod
    def _ordered(todos) -> List[Todo]:
        return [t.model_copy(deep=True) for t in sorted(todos, key=lambda t: t.order)]
