"""
Todo Manager Server - REST API
==============================
FastAPI application exposing the todo store under ``/api``.

Launch:
    todolist serve                  # Via CLI
    python -m todolist.server       # Direct

Endpoints:
    GET    /api/todos                 → Todos (optional ?view=&sort=)
    GET    /api/todos/counts          → Todo count per view
    GET    /api/todos/{id}            → One todo
    GET    /api/todos/list/{name}     → Todos in a list
    POST   /api/todos                 → Create a todo
    PATCH  /api/todos/{id}            → Partial update
    DELETE /api/todos/{id}            → Delete a todo
    POST   /api/todos/reorder         → Set custom order from {"ids": [...]}
    GET    /api/lists                 → Lists
    POST   /api/lists                 → Create a list
    DELETE /api/lists/{id}            → Delete a list

Every error response is a JSON object with a ``message`` field.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from todolist import __version__
from todolist.config import Settings, get_settings
from todolist.query import BUILTIN_VIEWS, count_todos_by_view, query_todos
from todolist.schema import (
    ReorderRequest, Todo, TodoCreate, TodoList, TodoListCreate, TodoUpdate,
)
from todolist.store import NotFoundError, TodoStore

logger = logging.getLogger("todolist.api")

INVALID_ID = "Invalid ID format"
INVALID_IDS = "Invalid IDs format. Expected array of numbers."


# ─────────────────────────────────────────────────────────────
#  Error Mapping
# ─────────────────────────────────────────────────────────────

def format_validation_error(errors: List[Dict[str, Any]]) -> str:
    """Human-readable summary of pydantic errors: ``msg at "field"; ...``"""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        parts.append(f'{msg} at "{".".join(loc)}"' if loc else msg)
    return "Validation error: " + "; ".join(parts)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"message": format_validation_error(exc.errors())}, status_code=400)


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse({"message": "Not found"}, status_code=404)


async def _server_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse({"message": "Internal server error"}, status_code=500)


# ─────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────

def get_store(request: Request) -> TodoStore:
    """The store this app was created with."""
    return request.app.state.store


def _parse_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=INVALID_ID)


# ─────────────────────────────────────────────────────────────
#  Routes - Todos
# ─────────────────────────────────────────────────────────────

router = APIRouter(prefix="/api")


@router.get("/todos", response_model=List[Todo])
async def list_todos(
    view: str = "all",
    sort: str = "custom",
    store: TodoStore = Depends(get_store),
):
    """All todos in custom order, or a filtered and sorted view."""
    try:
        return query_todos(store.get_all_todos(), view=view, sort=sort)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid sort option: {sort}")


@router.get("/todos/counts")
async def todo_counts(store: TodoStore = Depends(get_store)):
    """Number of todos in each built-in view and each list."""
    views = list(BUILTIN_VIEWS)
    for todo_list in store.get_all_lists():
        if todo_list.name not in views:
            views.append(todo_list.name)
    return count_todos_by_view(store.get_all_todos(), views)


@router.get("/todos/list/{list_name:path}", response_model=List[Todo])
async def todos_for_list(list_name: str, store: TodoStore = Depends(get_store)):
    return store.get_todos_by_list(list_name)


@router.get("/todos/{todo_id}", response_model=Todo)
async def get_todo(todo_id: str, store: TodoStore = Depends(get_store)):
    todo = store.get_todo_by_id(_parse_id(todo_id))
    if todo is None:
        raise HTTPException(status_code=404, detail="Todo not found")
    return todo


@router.post("/todos", response_model=Todo, status_code=201)
async def create_todo(payload: TodoCreate, store: TodoStore = Depends(get_store)):
    return store.create_todo(payload)


@router.post("/todos/reorder")
async def reorder_todos(
    payload: Any = Body(default=None),
    store: TodoStore = Depends(get_store),
):
    """Assign each id its position in the list; unknown ids are skipped."""
    try:
        request = ReorderRequest.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail=INVALID_IDS)

    if not store.update_todo_order(request.ids):
        raise HTTPException(status_code=500, detail="Failed to update todo order")
    return {"success": True}


@router.patch("/todos/{todo_id}", response_model=Todo)
async def update_todo(
    todo_id: str,
    payload: TodoUpdate,
    store: TodoStore = Depends(get_store),
):
    try:
        return store.update_todo(_parse_id(todo_id), payload)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Todo not found")


@router.delete("/todos/{todo_id}", status_code=204)
async def delete_todo(todo_id: str, store: TodoStore = Depends(get_store)):
    if not store.delete_todo(_parse_id(todo_id)):
        raise HTTPException(status_code=404, detail="Todo not found")
    return Response(status_code=204)


# ─────────────────────────────────────────────────────────────
#  Routes - Lists
# ─────────────────────────────────────────────────────────────

@router.get("/lists", response_model=List[TodoList])
async def list_lists(store: TodoStore = Depends(get_store)):
    return store.get_all_lists()


@router.post("/lists", response_model=TodoList, status_code=201)
async def create_list(payload: TodoListCreate, store: TodoStore = Depends(get_store)):
    return store.create_list(payload)


@router.delete("/lists/{list_id}", status_code=204)
async def delete_list(list_id: str, store: TodoStore = Depends(get_store)):
    if not store.delete_list(_parse_id(list_id)):
        raise HTTPException(status_code=404, detail="List not found")
    return Response(status_code=204)


# ─────────────────────────────────────────────────────────────
#  App Setup
# ─────────────────────────────────────────────────────────────

def create_app(
    store: Optional[TodoStore] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the API around ``store`` (a fresh store when not given)."""
    settings = settings or get_settings()
    if store is None:
        store = TodoStore(seed_default_lists=settings.seed_default_lists)

    app = FastAPI(title=settings.app_name, version=__version__)
    app.state.store = store

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(Exception, _server_error)

    app.include_router(router)
    return app


def run_server(settings: Optional[Settings] = None) -> None:
    """Launch the API with uvicorn."""
    import uvicorn

    settings = settings or get_settings()
    app = create_app(settings=settings)

    logger.info(f"Serving {settings.app_name} on http://{settings.host}:{settings.port}/api")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    from todolist.config import setup_logging

    _settings = get_settings()
    setup_logging(_settings.log_level)
    run_server(_settings)
