"""Itinerary models: the minute-by-minute schedule of a party.

Items are ordered by an explicit ``order_index``. Templates are reusable
blueprints whose times are offsets ("00:30" = thirty minutes in) that get
shifted onto a real start time when applied.
"""

import re
from typing import Literal

from pydantic import field_validator
from sqlmodel import Field, SQLModel

ItineraryCategory = Literal["arrival", "activity", "food", "entertainment", "cleanup"]

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_hhmm(value: str | None) -> str | None:
    if value is not None and not _HHMM.match(value):
        raise ValueError("time must use the HH:MM format")
    return value


class ItineraryItem(SQLModel):
    """A scheduled block of the party.

    Attributes:
        id: Unique identifier.
        party_id: Foreign key to the parent Party.
        start_time: Start, "HH:MM".
        end_time: End, "HH:MM".
        title: Short title.
        description: Longer description.
        category: arrival, activity, food, entertainment or cleanup.
        location: Where it happens.
        responsible: Who is in charge.
        preparations: Ordered list of things to prepare.
        notes: Free-form notes.
        completed: Whether the block is done.
        order_index: Position within the party's itinerary.
        created_at: Creation timestamp.
    """
    id: int
    party_id: int
    start_time: str
    end_time: str
    title: str
    description: str | None = None
    category: str
    location: str | None = None
    responsible: str | None = None
    preparations: list[str] = Field(default_factory=list)
    notes: str | None = None
    completed: bool = False
    order_index: int = 0
    created_at: str | None = None


class ItineraryItemCreate(SQLModel):
    start_time: str
    end_time: str
    title: str = Field(min_length=1)
    description: str | None = None
    category: ItineraryCategory
    location: str | None = None
    responsible: str | None = None
    preparations: list[str] = Field(default_factory=list)
    notes: str | None = None
    completed: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value: str | None) -> str | None:
        return validate_hhmm(value)


class ItineraryItemUpdate(SQLModel):
    start_time: str | None = None
    end_time: str | None = None
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: ItineraryCategory | None = None
    location: str | None = None
    responsible: str | None = None
    preparations: list[str] | None = None
    notes: str | None = None
    completed: bool | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value: str | None) -> str | None:
        return validate_hhmm(value)


class ItineraryTemplateItem(SQLModel):
    start_time: str
    end_time: str
    title: str
    description: str | None = None
    category: ItineraryCategory
    location: str | None = None
    preparations: list[str] | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value: str | None) -> str | None:
        return validate_hhmm(value)


class ItineraryTemplate(SQLModel):
    """A reusable itinerary blueprint.

    Built-in templates have string ids ("birthday-party-3h"); persisted ones
    use the database id rendered as a string.
    """
    id: str
    name: str
    party_type: str | None = None
    duration: int | None = None
    description: str | None = None
    template_data: list[ItineraryTemplateItem] = Field(default_factory=list)
    is_default: bool = False
    created_at: str | None = None


class ItineraryStats(SQLModel):
    total: int = 0
    completed: int = 0
    total_minutes: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)


class ItineraryTemplateCreate(SQLModel):
    name: str = Field(min_length=1)
    party_type: str | None = None
    duration: int | None = Field(default=None, ge=0)
    description: str | None = None
    template_data: list[ItineraryTemplateItem] = Field(default_factory=list)


class ItineraryReorder(SQLModel):
    item_ids: list[int]


class ItineraryTemplateApply(SQLModel):
    """Apply a template; ``start_time`` shifts its offsets onto a clock time."""
    start_time: str | None = None

    @field_validator("start_time")
    @classmethod
    def check_times(cls, value: str | None) -> str | None:
        return validate_hhmm(value)
