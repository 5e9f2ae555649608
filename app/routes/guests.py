"""Guest list routes."""
from fastapi import APIRouter, Depends, status

from app.core.database import Database, get_database
from app.models import Guest, GuestCreate, GuestStats, GuestUpdate, Party, RSVPUpdate
from app.planner.guests import GuestAccessor
from app.routes.parties import require_party

router = APIRouter(prefix="/parties/{party_id}/guests", tags=["guests"])


async def get_guests(party: Party = Depends(require_party), db: Database = Depends(get_database)) -> GuestAccessor:
    guests = GuestAccessor(db, party.id)
    guests.refresh()
    return guests


@router.get("", response_model=list[Guest])
async def list_guests(guests: GuestAccessor = Depends(get_guests)):
    """Guests sorted by name."""
    return guests.guests


@router.get("/stats", response_model=GuestStats)
async def guest_stats(guests: GuestAccessor = Depends(get_guests)):
    """
    RSVP summary.

    ``total`` is the number of people attending: confirmed guests plus the
    additional guests they bring.
    """
    return guests.stats()


@router.post("", response_model=Guest, status_code=status.HTTP_201_CREATED)
async def add_guest(data: GuestCreate, guests: GuestAccessor = Depends(get_guests)):
    guest_id = guests.add(data)
    return next(g for g in guests.guests if g.id == guest_id)


@router.patch("/{guest_id}", response_model=Guest)
async def update_guest(guest_id: int, updates: GuestUpdate, guests: GuestAccessor = Depends(get_guests)):
    guests.update(guest_id, updates)
    return next(g for g in guests.guests if g.id == guest_id)


@router.put("/{guest_id}/rsvp", response_model=Guest)
async def update_rsvp(guest_id: int, data: RSVPUpdate, guests: GuestAccessor = Depends(get_guests)):
    guests.update_rsvp(guest_id, data.rsvp)
    return next(g for g in guests.guests if g.id == guest_id)


@router.delete("/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(guest_id: int, guests: GuestAccessor = Depends(get_guests)):
    guests.delete(guest_id)
