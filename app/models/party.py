"""Party model: the root planning aggregate.

Every other entity (guests, timeline tasks, todos, itinerary items and
calculation history) belongs to exactly one party and is removed with it.
"""

from typing import Literal

from sqlmodel import Field, SQLModel

PartyType = Literal["casual", "formal", "mixed"]


class Party(SQLModel):
    """A party as stored in the database.

    Attributes:
        id: Unique identifier assigned by the database.
        name: Display name of the party.
        date: Party date (ISO date string), if set.
        guest_count: Expected number of guests, used by the calculators.
        party_type: One of "casual", "formal" or "mixed".
        duration: Party length in hours.
        theme: Optional theme.
        notes: Free-form notes.
        created_at: Creation timestamp (UTC, set by the database).
        updated_at: Timestamp of the last update.
    """
    id: int
    name: str
    date: str | None = None
    guest_count: int = 0
    party_type: str = "mixed"
    duration: int = 3
    theme: str | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class PartyCreate(SQLModel):
    name: str = Field(min_length=1)
    date: str | None = None
    guest_count: int = Field(default=0, ge=0)
    party_type: PartyType = "mixed"
    duration: int = Field(default=3, ge=0)
    theme: str | None = None
    notes: str | None = None


class PartyUpdate(SQLModel):
    """Partial update; only explicitly set fields are written."""
    name: str | None = Field(default=None, min_length=1)
    date: str | None = None
    guest_count: int | None = Field(default=None, ge=0)
    party_type: PartyType | None = None
    duration: int | None = Field(default=None, ge=0)
    theme: str | None = None
    notes: str | None = None
