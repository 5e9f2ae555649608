"""Todo models: tasks with subtasks, attachments and dependencies.

A todo's ``completed_at`` is set when it becomes completed and cleared when
it is reopened; the two fields always change together.
"""

from datetime import date
from typing import Literal

from sqlmodel import Field, SQLModel

TodoCategory = Literal["planning", "shopping", "preparation", "coordination", "booking"]
TodoPriority = Literal["low", "medium", "high", "critical"]
AttachmentType = Literal["link", "image", "document"]

PRIORITY_RANKS = {"low": 1, "medium": 2, "high": 3, "critical": 4}


class SubTask(SQLModel):
    id: int
    todo_id: int
    title: str
    completed: bool = False
    order_index: int = 0


class SubTaskUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1)
    completed: bool | None = None
    order_index: int | None = None


class Attachment(SQLModel):
    id: int
    todo_id: int
    name: str
    type: str
    url: str


class AttachmentCreate(SQLModel):
    name: str = Field(min_length=1)
    type: AttachmentType
    url: str = Field(min_length=1)


class TodoItem(SQLModel):
    """A todo belonging to a party, with its children loaded.

    Attributes:
        id: Unique identifier.
        party_id: Foreign key to the parent Party.
        title: Short title.
        description: Longer description.
        category: planning, shopping, preparation, coordination or booking.
        priority: low, medium, high or critical.
        due_date: ISO date the todo is due, if any.
        estimated_time: Estimated effort in minutes.
        completed: Whether the todo is done.
        assigned_to: Person responsible.
        location: Where it happens.
        estimated_cost: Expected cost.
        actual_cost: Real cost once known.
        notes: Free-form notes.
        created_at: Creation timestamp.
        completed_at: When it was completed; None while open.
        subtasks: Checklist, ordered by ``order_index``.
        dependencies: Ids of todos this one depends on.
        attachments: Links, images and documents.
    """
    id: int
    party_id: int
    title: str
    description: str | None = None
    category: str
    priority: str = "medium"
    due_date: str | None = None
    estimated_time: int | None = None
    completed: bool = False
    assigned_to: str | None = None
    location: str | None = None
    estimated_cost: float | None = None
    actual_cost: float | None = None
    notes: str | None = None
    created_at: str | None = None
    completed_at: str | None = None
    subtasks: list[SubTask] = Field(default_factory=list)
    dependencies: list[int] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)


class TodoItemCreate(SQLModel):
    title: str = Field(min_length=1)
    description: str | None = None
    category: TodoCategory
    priority: TodoPriority = "medium"
    due_date: date | None = None
    estimated_time: int | None = Field(default=None, ge=0)
    completed: bool = False
    assigned_to: str | None = None
    location: str | None = None
    estimated_cost: float | None = Field(default=None, ge=0)
    actual_cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class TodoItemUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: TodoCategory | None = None
    priority: TodoPriority | None = None
    due_date: date | None = None
    estimated_time: int | None = Field(default=None, ge=0)
    completed: bool | None = None
    assigned_to: str | None = None
    location: str | None = None
    estimated_cost: float | None = Field(default=None, ge=0)
    actual_cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class TodoTemplateItem(SQLModel):
    title: str
    description: str | None = None
    category: TodoCategory
    priority: TodoPriority = "medium"
    estimated_time: int | None = None
    estimated_cost: float | None = None
    days_before_party: int | None = None


class TodoTemplate(SQLModel):
    id: str
    name: str
    party_type: str | None = None
    guest_count_range: str | None = None
    template_data: list[TodoTemplateItem] = Field(default_factory=list)
    is_default: bool = False
    created_at: str | None = None


class TodoTemplateCreate(SQLModel):
    name: str = Field(min_length=1)
    party_type: str | None = None
    guest_count_range: str | None = None
    template_data: list[TodoTemplateItem] = Field(default_factory=list)


class TodoStats(SQLModel):
    """Aggregates over the loaded todo list.

    ``total_cost`` uses the actual cost when known, else the estimate.
    ``total_time`` only counts todos that are still open.
    """
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    total_cost: float = 0
    total_time: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_priority: dict[str, int] = Field(default_factory=dict)
    completion_rate: int = 0


class SubTaskCreate(SQLModel):
    title: str = Field(min_length=1)


class TodoTemplateApply(SQLModel):
    """Apply a template; due dates count back from ``party_date``."""
    party_date: date | None = None
