"""Todo routes: todos, subtasks, dependencies, attachments and templates."""
from datetime import date

from fastapi import APIRouter, Depends, status

from app.core.database import Database, get_database
from app.models import (
    AttachmentCreate,
    Party,
    SubTaskCreate,
    SubTaskUpdate,
    TodoItem,
    TodoItemCreate,
    TodoItemUpdate,
    TodoStats,
    TodoTemplate,
    TodoTemplateApply,
    TodoTemplateCreate,
)
from app.planner.todos import TodoAccessor
from app.routes.parties import require_party

router = APIRouter(prefix="/parties/{party_id}/todos", tags=["todos"])


async def get_todos(party: Party = Depends(require_party), db: Database = Depends(get_database)) -> TodoAccessor:
    todos = TodoAccessor(db, party.id)
    todos.refresh()
    return todos


@router.get("", response_model=list[TodoItem])
async def list_todos(todos: TodoAccessor = Depends(get_todos)):
    """Open todos first, then by priority and due date."""
    return todos.todos


@router.get("/stats", response_model=TodoStats)
async def todo_stats(todos: TodoAccessor = Depends(get_todos)):
    return todos.stats()


@router.post("", response_model=TodoItem, status_code=status.HTTP_201_CREATED)
async def add_todo(data: TodoItemCreate, todos: TodoAccessor = Depends(get_todos)):
    return todos.get(todos.add(data))


@router.patch("/{todo_id}", response_model=TodoItem)
async def update_todo(todo_id: int, updates: TodoItemUpdate, todos: TodoAccessor = Depends(get_todos)):
    """
    Update a todo.

    Setting ``completed`` also stamps or clears ``completed_at``.
    """
    todos.update(todo_id, updates)
    return todos.get(todo_id)


@router.post("/{todo_id}/toggle", response_model=TodoItem)
async def toggle_todo(todo_id: int, todos: TodoAccessor = Depends(get_todos)):
    todos.toggle(todo_id)
    return todos.get(todo_id)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(todo_id: int, todos: TodoAccessor = Depends(get_todos)):
    todos.delete(todo_id)


# Subtasks

@router.post("/{todo_id}/subtasks", response_model=TodoItem, status_code=status.HTTP_201_CREATED)
async def add_subtask(todo_id: int, data: SubTaskCreate, todos: TodoAccessor = Depends(get_todos)):
    todos.add_subtask(todo_id, data.title)
    return todos.get(todo_id)


@router.patch("/subtasks/{subtask_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_subtask(subtask_id: int, updates: SubTaskUpdate, todos: TodoAccessor = Depends(get_todos)):
    todos.update_subtask(subtask_id, updates)


@router.delete("/subtasks/{subtask_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subtask(subtask_id: int, todos: TodoAccessor = Depends(get_todos)):
    todos.delete_subtask(subtask_id)


# Dependencies

@router.put("/{todo_id}/dependencies/{depends_on_id}", response_model=TodoItem)
async def add_dependency(todo_id: int, depends_on_id: int, todos: TodoAccessor = Depends(get_todos)):
    """Make ``todo_id`` depend on ``depends_on_id``. Cycles are rejected."""
    todos.add_dependency(todo_id, depends_on_id)
    return todos.get(todo_id)


@router.delete("/{todo_id}/dependencies/{depends_on_id}", response_model=TodoItem)
async def remove_dependency(todo_id: int, depends_on_id: int, todos: TodoAccessor = Depends(get_todos)):
    todos.remove_dependency(todo_id, depends_on_id)
    return todos.get(todo_id)


# Attachments

@router.post("/{todo_id}/attachments", response_model=TodoItem, status_code=status.HTTP_201_CREATED)
async def add_attachment(todo_id: int, data: AttachmentCreate, todos: TodoAccessor = Depends(get_todos)):
    todos.add_attachment(todo_id, data)
    return todos.get(todo_id)


@router.delete("/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment(attachment_id: int, todos: TodoAccessor = Depends(get_todos)):
    todos.delete_attachment(attachment_id)


# Templates

@router.get("/templates", response_model=list[TodoTemplate])
async def list_templates(todos: TodoAccessor = Depends(get_todos)):
    return todos.templates()


@router.post("/templates", status_code=status.HTTP_201_CREATED)
async def save_template(data: TodoTemplateCreate, todos: TodoAccessor = Depends(get_todos)):
    return {"id": todos.save_template(data)}


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(template_id: str, todos: TodoAccessor = Depends(get_todos)):
    todos.delete_template(template_id)


@router.post("/templates/{template_id}/apply", response_model=list[TodoItem])
async def apply_template(
    template_id: str,
    data: TodoTemplateApply,
    party: Party = Depends(require_party),
    todos: TodoAccessor = Depends(get_todos),
):
    """
    Append a template's todos to the party.

    Due dates count back from ``party_date``, falling back to the party's own
    date and then to today. Existing todos are kept.
    """
    party_date = data.party_date
    if party_date is None and party.date:
        try:
            party_date = date.fromisoformat(party.date[:10])
        except ValueError:
            party_date = None
    todos.apply_template(todos.find_template(template_id), party_date)
    return todos.todos
