"""
Todo Manager - Mutation Merge Logic
===================================
Field-by-field merge of partial updates, plus the reorder assignment.
"""

from typing import Dict, List, Mapping, Sequence, Union

from .schema import Subtask, Todo, TodoUpdate


class SubtaskNotFoundError(LookupError):
    """Raised when a subtask id is not present on its todo"""


def apply_update(todo: Todo, update: TodoUpdate) -> Todo:
    """
    Return a copy of ``todo`` with every field present in ``update`` replaced.

    Fields the caller did not send keep their stored value. ``subtasks`` is
    replaced as a whole list. ``id`` and ``created_at`` are not part of
    ``TodoUpdate`` and so can never change here.
    """
    changes = {
        name: getattr(update, name)
        for name in update.model_fields_set
    }
    if "subtasks" in changes:
        changes["subtasks"] = [s.model_copy() for s in changes["subtasks"]]
    return todo.model_copy(update=changes, deep=True)


def assign_order(
    todos: Mapping[int, Todo],
    ids: Sequence[Union[int, float]],
) -> Dict[int, Todo]:
    """
    Give each id its 0-based position in ``ids`` as the new ``order``.

    Returns only the changed records. Ids unknown to ``todos`` are skipped;
    if an id repeats, its last position wins.
    """
    updated: Dict[int, Todo] = {}
    for index, todo_id in enumerate(ids):
        todo = todos.get(todo_id)
        if todo is None:
            continue
        updated[todo.id] = todo.model_copy(update={"order": index})
    return updated


def toggle_subtask(todo: Todo, subtask_id: str, completed: bool) -> List[Subtask]:
    """Build the full replacement subtask list with one entry's completion changed"""
    subtasks = [s.model_copy() for s in todo.subtasks]
    for i, subtask in enumerate(subtasks):
        if subtask.id == subtask_id:
            subtasks[i] = subtask.model_copy(update={"completed": completed})
            return subtasks
    raise SubtaskNotFoundError(f"Subtask not found: {subtask_id}")
