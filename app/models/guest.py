"""Guest model for RSVP tracking.

A guest may bring additional attendees. Those only count toward the
attendance total when the guest's RSVP is "yes".
"""

from typing import Literal

from sqlmodel import Field, SQLModel

RSVP = Literal["pending", "yes", "no"]


class Guest(SQLModel):
    """A person invited to a party.

    Attributes:
        id: Unique identifier.
        party_id: Foreign key to the parent Party.
        name: Guest name.
        email: Contact email, if known.
        rsvp: "pending", "yes" or "no".
        dietary_restrictions: Free-form dietary notes.
        additional_guests: Extra attendees beyond the named guest (>= 0).
        notes: Free-form notes.
        created_at: Creation timestamp.
    """
    id: int
    party_id: int
    name: str
    email: str | None = None
    rsvp: str = "pending"
    dietary_restrictions: str | None = None
    additional_guests: int = 0
    notes: str | None = None
    created_at: str | None = None


class GuestCreate(SQLModel):
    name: str = Field(min_length=1)
    email: str | None = None
    rsvp: RSVP = "pending"
    dietary_restrictions: str | None = None
    additional_guests: int = Field(default=0, ge=0)
    notes: str | None = None


class GuestUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    rsvp: RSVP | None = None
    dietary_restrictions: str | None = None
    additional_guests: int | None = Field(default=None, ge=0)
    notes: str | None = None


class GuestStats(SQLModel):
    """RSVP summary derived from the loaded guest list.

    ``total`` is the number of people attending: confirmed guests plus the
    additional guests they bring.
    """
    confirmed: int = 0
    declined: int = 0
    pending: int = 0
    additional_guests: int = 0
    total: int = 0
    total_invited: int = 0


class RSVPUpdate(SQLModel):
    rsvp: RSVP
