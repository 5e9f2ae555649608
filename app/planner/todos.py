"""Todo accessor: todos with subtasks, dependencies, attachments and templates.

A todo's ``completed_at`` follows its ``completed`` flag: it is stamped when
the todo becomes completed and cleared when it is reopened. Applying a todo
template only appends todos; existing ones are kept.
"""
import json
import logging
from datetime import date, timedelta
from typing import Any

from app.core.database import Database, Statement
from app.core.errors import DatabaseError, DependencyCycleError, NotFoundError
from app.models import (
    Attachment,
    AttachmentCreate,
    SubTask,
    SubTaskUpdate,
    TodoItem,
    TodoItemCreate,
    TodoItemUpdate,
    TodoStats,
    TodoTemplate,
    TodoTemplateCreate,
)
from app.models.todo import PRIORITY_RANKS
from app.planner.base import Accessor, build_set_clause, percentage, to_db_value
from app.planner.templates import DEFAULT_TODO_TEMPLATES

logger = logging.getLogger(__name__)

TODO_FIELDS = (
    "title",
    "description",
    "category",
    "priority",
    "due_date",
    "estimated_time",
    "completed",
    "assigned_to",
    "location",
    "estimated_cost",
    "actual_cost",
    "notes",
)

SUBTASK_FIELDS = ("title", "completed", "order_index")

_PRIORITY_SQL = (
    "CASE priority "
    + " ".join(f"WHEN '{name}' THEN {rank}" for name, rank in PRIORITY_RANKS.items())
    + " ELSE 0 END"
)

LIST_SQL = f"""
SELECT * FROM todo_items
WHERE party_id = ?
ORDER BY completed ASC, {_PRIORITY_SQL} DESC, due_date ASC, id
"""

PARTY_TODOS = "SELECT id FROM todo_items WHERE party_id = ?"

INSERT_TODO_SQL = """
INSERT INTO todo_items
    (party_id, title, description, category, priority, due_date, estimated_time,
     completed, assigned_to, location, estimated_cost, actual_cost, notes, completed_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, CASE WHEN ? THEN CURRENT_TIMESTAMP END)
"""

TEMPLATE_TODO_SQL = """
INSERT INTO todo_items
    (party_id, title, description, category, priority, due_date, estimated_time, completed, estimated_cost)
VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)
"""

# Walks the dependency edges starting at the first parameter
REACHES_SQL = """
WITH RECURSIVE reachable(id) AS (
    SELECT ?
    UNION
    SELECT d.depends_on_id FROM todo_dependencies d JOIN reachable r ON d.todo_id = r.id
)
SELECT 1 FROM reachable WHERE id = ? LIMIT 1
"""


def row_to_template(row: dict[str, Any]) -> TodoTemplate:
    try:
        items = json.loads(row["template_data"]) if row["template_data"] else []
    except json.JSONDecodeError:
        logger.warning(f"Ignoring malformed data of todo template {row['id']}")
        items = []
    return TodoTemplate.model_validate({**row, "id": str(row["id"]), "template_data": items})


def is_overdue(todo: TodoItem, today: date) -> bool:
    if todo.completed or not todo.due_date:
        return False
    try:
        return date.fromisoformat(todo.due_date[:10]) < today
    except ValueError:
        return False


class TodoAccessor(Accessor):
    """CRUD and aggregates for the todos of one party.

    Todos are listed open first, then by priority (critical first), then by
    due date. Each todo is loaded with its subtasks, dependency ids and
    attachments.
    """

    def __init__(self, db: Database, party_id: int):
        super().__init__(db)
        self.party_id = party_id
        self.todos: list[TodoItem] = []

    def refresh(self) -> list[TodoItem]:
        with self.guard("Failed to load todos"):
            rows = self.db.query(LIST_SQL, (self.party_id,))
            subtasks = self.db.query(
                f"SELECT * FROM todo_subtasks WHERE todo_id IN ({PARTY_TODOS}) ORDER BY todo_id, order_index, id",
                (self.party_id,),
            )
            dependencies = self.db.query(
                f"SELECT todo_id, depends_on_id FROM todo_dependencies WHERE todo_id IN ({PARTY_TODOS}) ORDER BY id",
                (self.party_id,),
            )
            attachments = self.db.query(
                f"SELECT * FROM todo_attachments WHERE todo_id IN ({PARTY_TODOS}) ORDER BY id",
                (self.party_id,),
            )

        children: dict[int, dict[str, list]] = {
            row["id"]: {"subtasks": [], "dependencies": [], "attachments": []} for row in rows
        }
        for row in subtasks:
            children[row["todo_id"]]["subtasks"].append(
                SubTask.model_validate({**row, "order_index": row["order_index"] or 0})
            )
        for row in dependencies:
            children[row["todo_id"]]["dependencies"].append(row["depends_on_id"])
        for row in attachments:
            children[row["todo_id"]]["attachments"].append(Attachment.model_validate(row))

        self.todos = [TodoItem.model_validate({**row, **children[row["id"]]}) for row in rows]
        self.error = None
        return self.todos

    def get(self, todo_id: int) -> TodoItem:
        for todo in self.todos:
            if todo.id == todo_id:
                return todo
        raise NotFoundError(f"Todo {todo_id} not found")

    def _require_todo(self, todo_id: int) -> None:
        rows = self.db.query(
            "SELECT id FROM todo_items WHERE id = ? AND party_id = ?", (todo_id, self.party_id)
        )
        if not rows:
            raise NotFoundError(f"Todo {todo_id} not found")

    def add(self, data: TodoItemCreate) -> int:
        with self.guard("Failed to add todo"):
            result = self.db.update(
                INSERT_TODO_SQL,
                (
                    self.party_id,
                    data.title,
                    data.description,
                    data.category,
                    data.priority,
                    to_db_value(data.due_date),
                    data.estimated_time,
                    int(data.completed),
                    data.assigned_to,
                    data.location,
                    data.estimated_cost,
                    data.actual_cost,
                    data.notes,
                    int(data.completed),
                ),
            )
        self.refresh()
        return result.last_insert_id

    def update(self, todo_id: int, updates: TodoItemUpdate) -> None:
        values = updates.model_dump(exclude_unset=True)
        parts, params = build_set_clause(
            values, TODO_FIELDS, not_null=("title", "category", "priority", "completed")
        )
        completed = values.get("completed")
        if completed is True:
            parts.append("completed_at = COALESCE(completed_at, CURRENT_TIMESTAMP)")
        elif completed is False:
            parts.append("completed_at = NULL")
        if not parts:
            # Empty patch still reports a missing row
            parts = ["id = id"]
        with self.guard("Failed to update todo"):
            result = self.db.update(
                f"UPDATE todo_items SET {', '.join(parts)} WHERE id = ? AND party_id = ?",
                (*params, todo_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Todo {todo_id} not found")
        self.refresh()

    def toggle(self, todo_id: int) -> None:
        with self.guard("Failed to update todo"):
            result = self.db.update(
                """
                UPDATE todo_items
                SET completed = NOT completed,
                    completed_at = CASE WHEN completed THEN NULL ELSE CURRENT_TIMESTAMP END
                WHERE id = ? AND party_id = ?
                """,
                (todo_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Todo {todo_id} not found")
        self.refresh()

    def delete(self, todo_id: int) -> None:
        """Delete a todo; its subtasks, dependency edges and attachments cascade."""
        with self.guard("Failed to delete todo"):
            result = self.db.update(
                "DELETE FROM todo_items WHERE id = ? AND party_id = ?", (todo_id, self.party_id)
            )
            if result.changes == 0:
                raise NotFoundError(f"Todo {todo_id} not found")
        self.refresh()

    # Subtasks

    def add_subtask(self, todo_id: int, title: str) -> int:
        if not title.strip():
            raise ValueError("Subtask title must not be empty")
        with self.guard("Failed to add subtask"):
            result = self.db.update(
                """
                INSERT INTO todo_subtasks (todo_id, title, completed, order_index)
                SELECT id, ?, 0,
                       (SELECT COALESCE(MAX(order_index), -1) + 1 FROM todo_subtasks WHERE todo_id = ?)
                FROM todo_items WHERE id = ? AND party_id = ?
                """,
                (title, todo_id, todo_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Todo {todo_id} not found")
        self.refresh()
        return result.last_insert_id

    def update_subtask(self, subtask_id: int, updates: SubTaskUpdate) -> None:
        parts, params = build_set_clause(
            updates.model_dump(exclude_unset=True), SUBTASK_FIELDS, not_null=SUBTASK_FIELDS
        )
        if not parts:
            # Empty patch still reports a missing row
            parts = ["id = id"]
        with self.guard("Failed to update subtask"):
            result = self.db.update(
                f"UPDATE todo_subtasks SET {', '.join(parts)} WHERE id = ? AND todo_id IN ({PARTY_TODOS})",
                (*params, subtask_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Subtask {subtask_id} not found")
        self.refresh()

    def delete_subtask(self, subtask_id: int) -> None:
        with self.guard("Failed to delete subtask"):
            result = self.db.update(
                f"DELETE FROM todo_subtasks WHERE id = ? AND todo_id IN ({PARTY_TODOS})",
                (subtask_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Subtask {subtask_id} not found")
        self.refresh()

    # Dependencies

    def add_dependency(self, todo_id: int, depends_on_id: int) -> None:
        """Record that ``todo_id`` depends on ``depends_on_id``.

        Adding an edge that already exists is a no-op.

        Raises:
            DependencyCycleError: The edge points at the todo itself or would
                close a cycle.
            NotFoundError: Either todo does not belong to this party.
        """
        with self.guard("Failed to add dependency"):
            if todo_id == depends_on_id:
                raise DependencyCycleError(f"Todo {todo_id} cannot depend on itself")
            self._require_todo(todo_id)
            self._require_todo(depends_on_id)
            existing = self.db.query(
                "SELECT 1 FROM todo_dependencies WHERE todo_id = ? AND depends_on_id = ?",
                (todo_id, depends_on_id),
            )
            if existing:
                return
            if self.db.query(REACHES_SQL, (depends_on_id, todo_id)):
                raise DependencyCycleError(
                    f"Todo {depends_on_id} already depends on todo {todo_id}"
                )
            self.db.update(
                "INSERT INTO todo_dependencies (todo_id, depends_on_id) VALUES (?, ?)",
                (todo_id, depends_on_id),
            )
        self.refresh()

    def remove_dependency(self, todo_id: int, depends_on_id: int) -> None:
        with self.guard("Failed to remove dependency"):
            result = self.db.update(
                f"""
                DELETE FROM todo_dependencies
                WHERE todo_id = ? AND depends_on_id = ? AND todo_id IN ({PARTY_TODOS})
                """,
                (todo_id, depends_on_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Todo {todo_id} does not depend on todo {depends_on_id}")
        self.refresh()

    # Attachments

    def add_attachment(self, todo_id: int, data: AttachmentCreate) -> int:
        with self.guard("Failed to add attachment"):
            result = self.db.update(
                """
                INSERT INTO todo_attachments (todo_id, name, type, url)
                SELECT id, ?, ?, ? FROM todo_items WHERE id = ? AND party_id = ?
                """,
                (data.name, data.type, data.url, todo_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Todo {todo_id} not found")
        self.refresh()
        return result.last_insert_id

    def delete_attachment(self, attachment_id: int) -> None:
        with self.guard("Failed to delete attachment"):
            result = self.db.update(
                f"DELETE FROM todo_attachments WHERE id = ? AND todo_id IN ({PARTY_TODOS})",
                (attachment_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Attachment {attachment_id} not found")
        self.refresh()

    # Templates

    def templates(self) -> list[TodoTemplate]:
        try:
            with self.guard("Failed to load templates"):
                rows = self.db.query("SELECT * FROM todo_templates ORDER BY name")
        except DatabaseError:
            rows = []
        return [*DEFAULT_TODO_TEMPLATES, *(row_to_template(row) for row in rows)]

    def find_template(self, template_id: str) -> TodoTemplate:
        for template in self.templates():
            if template.id == template_id:
                return template
        raise NotFoundError(f"Template {template_id} not found")

    def save_template(self, data: TodoTemplateCreate) -> str:
        with self.guard("Failed to save template"):
            result = self.db.update(
                """
                INSERT INTO todo_templates (name, party_type, guest_count_range, template_data, is_default)
                VALUES (?, ?, ?, ?, 0)
                """,
                (
                    data.name,
                    data.party_type,
                    data.guest_count_range,
                    json.dumps([item.model_dump(exclude_none=True) for item in data.template_data]),
                ),
            )
        return str(result.last_insert_id)

    def delete_template(self, template_id: str) -> None:
        """Delete a saved template. Built-in templates cannot be deleted."""
        if not template_id.isdigit():
            raise NotFoundError(f"Template {template_id} not found")
        with self.guard("Failed to delete template"):
            result = self.db.update("DELETE FROM todo_templates WHERE id = ?", (int(template_id),))
            if result.changes == 0:
                raise NotFoundError(f"Template {template_id} not found")

    def apply_template(self, template: TodoTemplate, party_date: date | None = None) -> None:
        """Append the template's todos to the party.

        Due dates are ``days_before_party`` days before ``party_date``
        (today when not given). All inserts run in one transaction.
        """
        base = party_date or date.today()
        statements = []
        for item in template.template_data:
            due = None
            if item.days_before_party is not None:
                due = (base - timedelta(days=item.days_before_party)).isoformat()
            statements.append(
                Statement(
                    TEMPLATE_TODO_SQL,
                    (
                        self.party_id,
                        item.title,
                        item.description,
                        item.category,
                        item.priority,
                        due,
                        item.estimated_time,
                        item.estimated_cost,
                    ),
                )
            )
        with self.guard("Failed to apply template"):
            self.db.transaction(statements)
        logger.info(f"Applied todo template {template.id} to party {self.party_id}")
        self.refresh()

    def stats(self, today: date | None = None) -> TodoStats:
        today = today or date.today()
        total = len(self.todos)
        completed = sum(1 for t in self.todos if t.completed)
        by_category: dict[str, int] = {}
        by_priority: dict[str, int] = {}
        for todo in self.todos:
            by_category[todo.category] = by_category.get(todo.category, 0) + 1
            by_priority[todo.priority] = by_priority.get(todo.priority, 0) + 1
        return TodoStats(
            total=total,
            completed=completed,
            pending=total - completed,
            overdue=sum(1 for t in self.todos if is_overdue(t, today)),
            total_cost=sum(
                (t.actual_cost if t.actual_cost is not None else t.estimated_cost) or 0
                for t in self.todos
            ),
            total_time=sum(t.estimated_time or 0 for t in self.todos if not t.completed),
            by_category=by_category,
            by_priority=by_priority,
            completion_rate=percentage(completed, total),
        )
