"""Tests for todos, subtasks, dependencies and todo templates."""

from datetime import date

import pytest

from app.core.database import Database
from app.core.errors import DependencyCycleError, NotFoundError
from app.models import (
    AttachmentCreate,
    Party,
    SubTaskUpdate,
    TodoItemCreate,
    TodoItemUpdate,
    TodoTemplateCreate,
)
from app.planner.templates import DEFAULT_TODO_TEMPLATES
from app.planner.todos import TodoAccessor


@pytest.fixture(name="todos")
def todos_fixture(db: Database, party: Party) -> TodoAccessor:
    todos = TodoAccessor(db, party.id)
    todos.refresh()
    return todos


def add(todos: TodoAccessor, title: str, **kwargs) -> int:
    return todos.add(TodoItemCreate(title=title, category=kwargs.pop("category", "planning"), **kwargs))


class TestTodoCrud:

    def test_ordering(self, todos: TodoAccessor):
        add(todos, "low", priority="low")
        add(todos, "critical", priority="critical")
        add(todos, "medium late", priority="medium", due_date=date(2030, 5, 2))
        add(todos, "medium early", priority="medium", due_date=date(2030, 5, 1))
        done = add(todos, "done critical", priority="critical")
        todos.toggle(done)

        assert [t.title for t in todos.todos] == [
            "critical",
            "medium early",
            "medium late",
            "low",
            "done critical",
        ]

    def test_due_date_stored_as_iso(self, todos: TodoAccessor):
        todo_id = add(todos, "Order cake", due_date=date(2030, 6, 1))
        assert todos.get(todo_id).due_date == "2030-06-01"

    def test_toggle_sets_and_clears_completed_at(self, todos: TodoAccessor):
        todo_id = add(todos, "Send invitations")
        assert todos.get(todo_id).completed_at is None

        todos.toggle(todo_id)
        todo = todos.get(todo_id)
        assert todo.completed is True
        assert todo.completed_at is not None

        todos.toggle(todo_id)
        todo = todos.get(todo_id)
        assert todo.completed is False
        assert todo.completed_at is None

    def test_update_completed_patches_completed_at(self, todos: TodoAccessor):
        todo_id = add(todos, "Buy balloons")
        todos.update(todo_id, TodoItemUpdate(completed=True))
        assert todos.get(todo_id).completed_at is not None

        todos.update(todo_id, TodoItemUpdate(completed=False))
        assert todos.get(todo_id).completed_at is None

    def test_update_other_fields_keeps_completed_at(self, todos: TodoAccessor, db: Database):
        todo_id = add(todos, "Buy balloons", completed=True)
        db.update("UPDATE todo_items SET completed_at = '2030-01-01 10:00:00' WHERE id = ?", (todo_id,))
        todos.update(todo_id, TodoItemUpdate(notes="red ones", completed=True))
        todo = todos.get(todo_id)
        assert todo.notes == "red ones"
        assert todo.completed_at == "2030-01-01 10:00:00"

    def test_created_completed(self, todos: TodoAccessor):
        todo_id = add(todos, "Already done", completed=True)
        assert todos.get(todo_id).completed_at is not None

    def test_delete_missing(self, todos: TodoAccessor):
        with pytest.raises(NotFoundError):
            todos.delete(12345)


class TestSubtasksAndAttachments:

    def test_subtasks_ordered(self, todos: TodoAccessor):
        todo_id = add(todos, "Decorate")
        todos.add_subtask(todo_id, "Balloons")
        todos.add_subtask(todo_id, "Streamers")
        subtasks = todos.get(todo_id).subtasks
        assert [(s.title, s.order_index) for s in subtasks] == [("Balloons", 0), ("Streamers", 1)]

    def test_subtask_update_and_delete(self, todos: TodoAccessor):
        todo_id = add(todos, "Decorate")
        subtask_id = todos.add_subtask(todo_id, "Balloons")
        todos.update_subtask(subtask_id, SubTaskUpdate(completed=True))
        assert todos.get(todo_id).subtasks[0].completed is True

        todos.delete_subtask(subtask_id)
        assert todos.get(todo_id).subtasks == []

    def test_empty_updates_on_missing_rows(self, todos: TodoAccessor):
        with pytest.raises(NotFoundError):
            todos.update(999, TodoItemUpdate())
        with pytest.raises(NotFoundError):
            todos.update_subtask(999, SubTaskUpdate())

    def test_subtask_needs_own_todo(self, db: Database, todos: TodoAccessor):
        with pytest.raises(NotFoundError):
            todos.add_subtask(999, "Orphan")

    def test_attachments(self, todos: TodoAccessor):
        todo_id = add(todos, "Book venue", category="booking")
        attachment_id = todos.add_attachment(
            todo_id, AttachmentCreate(name="Venue", type="link", url="https://example.com/venue")
        )
        assert todos.get(todo_id).attachments[0].url == "https://example.com/venue"

        todos.delete_attachment(attachment_id)
        assert todos.get(todo_id).attachments == []


class TestDependencies:

    def test_add_and_remove(self, todos: TodoAccessor):
        a = add(todos, "A")
        b = add(todos, "B")
        todos.add_dependency(b, a)
        assert todos.get(b).dependencies == [a]

        todos.remove_dependency(b, a)
        assert todos.get(b).dependencies == []

    def test_duplicate_edge_ignored(self, todos: TodoAccessor, count_rows):
        a = add(todos, "A")
        b = add(todos, "B")
        todos.add_dependency(b, a)
        todos.add_dependency(b, a)
        assert count_rows("todo_dependencies") == 1

    def test_self_dependency_rejected(self, todos: TodoAccessor):
        a = add(todos, "A")
        with pytest.raises(DependencyCycleError):
            todos.add_dependency(a, a)

    def test_cycle_rejected(self, todos: TodoAccessor, count_rows):
        a = add(todos, "A")
        b = add(todos, "B")
        c = add(todos, "C")
        todos.add_dependency(b, a)
        todos.add_dependency(c, b)

        with pytest.raises(DependencyCycleError):
            todos.add_dependency(a, c)
        assert count_rows("todo_dependencies") == 2
        assert todos.error is not None

    def test_deleting_todo_removes_edges(self, todos: TodoAccessor, count_rows):
        a = add(todos, "A")
        b = add(todos, "B")
        todos.add_dependency(b, a)
        todos.delete(a)
        assert count_rows("todo_dependencies") == 0
        assert todos.get(b).dependencies == []


class TestTodoTemplates:

    def test_builtin_templates_listed_first(self, todos: TodoAccessor):
        saved = todos.save_template(TodoTemplateCreate(name="Mine", template_data=[]))
        ids = [t.id for t in todos.templates()]
        assert ids[:2] == ["birthday-party-basic", "dinner-party-elegant"]
        assert saved in ids

    def test_apply_is_additive(self, todos: TodoAccessor):
        template = todos.find_template("dinner-party-elegant")
        todos.apply_template(template, date(2030, 6, 15))
        todos.apply_template(template, date(2030, 6, 15))
        assert len(todos.todos) == 2 * len(template.template_data)

    def test_due_dates_count_back(self, todos: TodoAccessor):
        template = DEFAULT_TODO_TEMPLATES[1]
        todos.apply_template(template, date(2030, 6, 15))
        due = {t.title: t.due_date for t in todos.todos}
        assert due["Plan menu and wine pairings"] == "2030-06-01"
        assert due["Final cooking and presentation"] == "2030-06-15"

    def test_saved_template_round_trip(self, todos: TodoAccessor):
        template_id = todos.save_template(
            TodoTemplateCreate(
                name="Picnic",
                template_data=[{"title": "Pack basket", "category": "preparation", "days_before_party": 0}],
            )
        )
        template = todos.find_template(template_id)
        assert template.template_data[0].title == "Pack basket"

        todos.delete_template(template_id)
        with pytest.raises(NotFoundError):
            todos.find_template(template_id)

    def test_builtin_cannot_be_deleted(self, todos: TodoAccessor):
        with pytest.raises(NotFoundError):
            todos.delete_template("birthday-party-basic")


class TestTodoStats:

    def test_stats(self, todos: TodoAccessor):
        add(todos, "Overdue", due_date=date(2030, 1, 1), estimated_time=30, estimated_cost=10.0)
        add(todos, "Future", due_date=date(2030, 12, 1), estimated_time=60, estimated_cost=20.0, actual_cost=25.0)
        done = add(todos, "Done", category="shopping", priority="high", due_date=date(2030, 1, 1), estimated_time=90)
        todos.toggle(done)

        stats = todos.stats(today=date(2030, 6, 1))
        assert stats.total == 3
        assert stats.completed == 1
        assert stats.pending == 2
        assert stats.overdue == 1
        assert stats.total_cost == 35.0
        assert stats.total_time == 90
        assert stats.by_category == {"planning": 2, "shopping": 1}
        assert stats.by_priority == {"medium": 2, "high": 1}
        assert stats.completion_rate == 33

    def test_empty_stats(self, todos: TodoAccessor):
        stats = todos.stats()
        assert stats.total == 0
        assert stats.completion_rate == 0
