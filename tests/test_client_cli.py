# tests/test_client_cli.py

from __future__ import annotations

import json

import httpx
import pytest

from todolist import cli
from todolist.client import ApiError, TodoClient
from todolist.schema import Subtask, TodoCreate, TodoUpdate


def test_client_create_and_get(api: TodoClient) -> None:
    todo = api.create_todo(TodoCreate(title="Buy milk", priority="low"))
    assert todo.id == 1
    assert todo.order == 1
    assert api.get_todo(todo.id) == todo


def test_client_update_sends_only_set_fields(api: TodoClient) -> None:
    todo = api.create_todo(TodoCreate(title="x", description="keep"))
    updated = api.update_todo(todo.id, TodoUpdate(title="y"))
    assert updated.title == "y"
    assert updated.description == "keep"


def test_client_errors_carry_message(api: TodoClient) -> None:
    with pytest.raises(ApiError) as excinfo:
        api.get_todo(404)
    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Todo not found"


def test_client_toggle_subtask(api: TodoClient) -> None:
    todo = api.create_todo(TodoCreate(
        title="Trip",
        subtasks=[Subtask(id="a", title="Pack"), Subtask(id="b", title="Book")],
    ))

    updated = api.toggle_subtask(todo.id, "b")

    assert [s.completed for s in updated.subtasks] == [False, True]


def test_client_lists_and_counts(api: TodoClient) -> None:
    todo_list = api.create_list("work", "green-500")
    api.create_todo(TodoCreate(title="report", list_name="work"))

    assert [l.name for l in api.list_lists()] == ["work"]
    assert [t.title for t in api.todos_for_list("work")] == ["report"]
    assert api.counts()["work"] == 1

    api.delete_list(todo_list.id)
    assert api.list_lists() == []


def test_client_list_names_are_escaped(api: TodoClient) -> None:
    api.create_todo(TodoCreate(title="weed", list_name="home/garden?#x"))
    api.create_todo(TodoCreate(title="other", list_name="home"))

    assert [t.title for t in api.todos_for_list("home/garden?#x")] == ["weed"]


def test_client_reorder_and_sort(api: TodoClient) -> None:
    for title in ("a", "b", "c"):
        api.create_todo(TodoCreate(title=title))
    api.reorder([2, 3, 1])
    assert [t.title for t in api.list_todos()] == ["b", "c", "a"]
    assert [t.title for t in api.list_todos(sort="custom", view="all")] == ["b", "c", "a"]


def test_cli_add_and_list(api: TodoClient, capsys) -> None:
    assert cli.main(["add", "Buy milk", "-p", "low", "--subtask", "Check fridge"], client=api) == 0
    assert "Created: [1] Buy milk" in capsys.readouterr().out

    assert cli.main(["list"], client=api) == 0
    out = capsys.readouterr().out
    assert "[1]" in out
    assert "Buy milk" in out
    assert "[0/1 subtasks]" in out


def test_cli_add_uses_view_for_default_list(api: TodoClient) -> None:
    cli.main(["add", "Report", "--view", "work"], client=api)
    cli.main(["add", "Walk", "--view", "today"], client=api)
    assert [(t.title, t.list_name) for t in api.list_todos()] == [
        ("Report", "work"), ("Walk", "personal"),
    ]


def test_cli_list_json(api: TodoClient, capsys) -> None:
    api.create_todo(TodoCreate(title="x", list_name="work"))
    cli.main(["list", "--view", "work", "--json"], client=api)
    data = json.loads(capsys.readouterr().out)
    assert data[0]["listName"] == "work"


def test_cli_done_edit_delete(api: TodoClient, capsys) -> None:
    api.create_todo(TodoCreate(title="x", due_date="2024-01-02T10:00:00"))

    assert cli.main(["done", "1"], client=api) == 0
    assert api.get_todo(1).completed is True

    assert cli.main(["edit", "1", "--title", "y", "--clear-due"], client=api) == 0
    todo = api.get_todo(1)
    assert todo.title == "y"
    assert todo.due_date is None
    assert todo.completed is True

    assert cli.main(["delete", "1"], client=api) == 0
    capsys.readouterr()
    assert cli.main(["delete", "1"], client=api) == 1
    assert "Todo not found" in capsys.readouterr().out


def test_cli_subtask(api: TodoClient, capsys) -> None:
    api.create_todo(TodoCreate(title="x", subtasks=[Subtask(id="s1", title="one")]))

    assert cli.main(["subtask", "1", "s1"], client=api) == 0
    assert api.get_todo(1).subtasks[0].completed is True

    assert cli.main(["subtask", "1", "nope"], client=api) == 1
    assert "Subtask not found" in capsys.readouterr().out


def test_cli_bad_due_date(api: TodoClient, capsys) -> None:
    assert cli.main(["add", "x", "--due", "not a date"], client=api) == 1
    assert "Invalid input" in capsys.readouterr().out


def test_cli_lists(api: TodoClient, capsys) -> None:
    assert cli.main(["add-list", "errands", "orange-500"], client=api) == 0
    assert cli.main(["lists"], client=api) == 0
    assert "errands (orange-500)" in capsys.readouterr().out

    assert cli.main(["delete-list", "1"], client=api) == 0
    assert api.list_lists() == []


def test_cli_unreachable_server(capsys) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    http = httpx.Client(base_url="http://todo.invalid", transport=httpx.MockTransport(refuse))
    client = TodoClient(http=http)

    assert cli.main(["--url", "http://todo.invalid", "list"], client=client) == 1
    assert "Cannot reach http://todo.invalid" in capsys.readouterr().out


def test_cli_without_command_prints_help(capsys) -> None:
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()
