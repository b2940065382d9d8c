"""
Todo Manager - Schema Definition
================================
Pydantic models for todos, subtasks, lists and users.

Attributes are snake_case in Python and camelCase on the wire
(``dueDate``, ``listName``, ``createdAt``). Both spellings are accepted
on input.
"""

from enum import Enum
from typing import Optional, List, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic.alias_generators import to_camel
import uuid


DEFAULT_LIST_NAME = "personal"


class Priority(str, Enum):
    """Todo priority levels"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("due_date", check_fields=False)
    @classmethod
    def _due_date_in_range(cls, value):
        # views and date sorts compare due dates in local time
        if value is not None and value.tzinfo is not None:
            try:
                value.astimezone()
            except (OverflowError, ValueError):
                raise ValueError("date is out of range")
        return value


class Subtask(_Model):
    """Checklist item nested under a todo"""
    id: str                         # Client-generated, unique within its todo
    title: str = Field(min_length=1)
    completed: bool = False


def new_subtask(title: str) -> Subtask:
    """Create a subtask with a fresh client-side id"""
    return Subtask(id=str(uuid.uuid4())[:8], title=title)


class Todo(_Model):
    """Stored todo record"""
    id: int
    title: str = Field(min_length=1)
    description: Optional[str] = None
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None
    list_name: str = DEFAULT_LIST_NAME
    order: int                      # Custom sort position
    subtasks: List[Subtask] = Field(default_factory=list)
    created_at: datetime

    @property
    def completed_subtasks(self) -> int:
        return sum(1 for s in self.subtasks if s.completed)


class TodoCreate(_Model):
    """Payload for creating a todo. ``completed`` and ``order`` are server-assigned."""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None
    list_name: str = DEFAULT_LIST_NAME
    subtasks: List[Subtask] = Field(default_factory=list)


class TodoUpdate(_Model):
    """
    Partial todo update.

    Only fields the caller actually sent are applied (``model_fields_set``).
    ``description`` and ``due_date`` may be sent as null to clear them; the
    other fields may be omitted but not nulled.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    list_name: Optional[str] = None
    order: Optional[int] = None
    subtasks: Optional[List[Subtask]] = None

    @field_validator(
        "title", "completed", "priority", "list_name", "order", "subtasks",
        mode="before",
    )
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class TodoList(_Model):
    """User-defined list; ``name`` is what ``Todo.list_name`` refers to"""
    id: int
    name: str
    color: str                      # Display token, e.g. "blue-500"


class TodoListCreate(_Model):
    name: str = Field(min_length=1)
    color: str = Field(min_length=1)


class User(_Model):
    """Account record, reserved for future authentication"""
    id: int
    username: str
    password: str


class UserCreate(_Model):
    username: str = Field(min_length=1)
    password: str


class ReorderRequest(_Model):
    # Any JSON number; ids the store does not hold are skipped
    ids: List[Union[StrictInt, StrictFloat]]


# ============================================================
# DEFAULT LISTS
# ============================================================

DEFAULT_LISTS = [
    {"name": "personal", "color": "blue-500"},
    {"name": "work", "color": "green-500"},
    {"name": "shopping", "color": "purple-500"},
]
