"""
Todo Manager - HTTP Client
==========================
Thin httpx wrapper over the REST API, returning schema models.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx

from .merge import toggle_subtask
from .schema import Todo, TodoCreate, TodoList, TodoListCreate, TodoUpdate


class ApiError(Exception):
    """Non-2xx response from the API"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class TodoClient:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:5000",
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> "TodoClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self._http.request(method, f"/api{path}", **kwargs)
        if response.is_error:
            message = response.text or response.reason_phrase
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and "message" in data:
                message = data["message"]
            raise ApiError(response.status_code, message)
        return response

    # ---- todos ----

    def list_todos(self, view: Optional[str] = None, sort: Optional[str] = None) -> List[Todo]:
        params = {k: v for k, v in (("view", view), ("sort", sort)) if v}
        data = self._request("GET", "/todos", params=params).json()
        return [Todo.model_validate(item) for item in data]

    def todos_for_list(self, list_name: str) -> List[Todo]:
        data = self._request("GET", f"/todos/list/{quote(list_name, safe='')}").json()
        return [Todo.model_validate(item) for item in data]

    def get_todo(self, todo_id: int) -> Todo:
        return Todo.model_validate(self._request("GET", f"/todos/{todo_id}").json())

    def counts(self) -> Dict[str, int]:
        return self._request("GET", "/todos/counts").json()

    def create_todo(self, todo: TodoCreate) -> Todo:
        body = todo.model_dump(mode="json", by_alias=True, exclude_none=True)
        return Todo.model_validate(self._request("POST", "/todos", json=body).json())

    def update_todo(self, todo_id: int, update: TodoUpdate) -> Todo:
        body = update.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return Todo.model_validate(self._request("PATCH", f"/todos/{todo_id}", json=body).json())

    def set_completed(self, todo_id: int, completed: bool = True) -> Todo:
        return self.update_todo(todo_id, TodoUpdate(completed=completed))

    def toggle_subtask(self, todo_id: int, subtask_id: str, completed: bool = True) -> Todo:
        """Flip one subtask by resending the whole subtask list"""
        todo = self.get_todo(todo_id)
        subtasks = toggle_subtask(todo, subtask_id, completed)
        return self.update_todo(todo_id, TodoUpdate(subtasks=subtasks))

    def delete_todo(self, todo_id: int) -> None:
        self._request("DELETE", f"/todos/{todo_id}")

    def reorder(self, ids: Sequence[int]) -> None:
        self._request("POST", "/todos/reorder", json={"ids": list(ids)})

    # ---- lists ----

    def list_lists(self) -> List[TodoList]:
        return [TodoList.model_validate(item) for item in self._request("GET", "/lists").json()]

    def create_list(self, name: str, color: str) -> TodoList:
        body = TodoListCreate(name=name, color=color).model_dump(mode="json", by_alias=True)
        return TodoList.model_validate(self._request("POST", "/lists", json=body).json())

    def delete_list(self, list_id: int) -> None:
        self._request("DELETE", f"/lists/{list_id}")
