"""Timeline task model.

Timeline tasks are grouped into fixed, ordered time-frame buckets (see
``app.core.schema.TIME_FRAMES``). Tasks seeded for a new party have
``is_custom`` set to False; tasks added by the user are custom.
"""

from typing import Literal

from sqlmodel import Field, SQLModel

TimelineCategory = Literal["planning", "shopping", "preparation", "setup", "day-of"]


class TimelineTask(SQLModel):
    id: int
    party_id: int
    task: str
    time_frame: str
    category: str
    completed: bool = False
    is_custom: bool = True
    created_at: str | None = None


class TimelineTaskCreate(SQLModel):
    task: str = Field(min_length=1)
    time_frame: str = Field(min_length=1)
    category: TimelineCategory
    completed: bool = False
    is_custom: bool = True


class TimelineTaskUpdate(SQLModel):
    task: str | None = Field(default=None, min_length=1)
    time_frame: str | None = Field(default=None, min_length=1)
    category: TimelineCategory | None = None
    completed: bool | None = None


class CompletionStats(SQLModel):
    total: int = 0
    completed: int = 0
    percentage: int = 0
