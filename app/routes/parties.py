"""Party routes."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.database import Database, get_database
from app.models import Party, PartyCreate, PartyUpdate
from app.planner.parties import PartyAccessor

router = APIRouter(prefix="/parties", tags=["parties"])


async def require_party(party_id: int, db: Database = Depends(get_database)) -> Party:
    """Dependency resolving the ``party_id`` path parameter, 404 if missing."""
    party = PartyAccessor(db).get(party_id)
    if party is None:
        raise HTTPException(status_code=404, detail="Party not found")
    return party


@router.get("", response_model=list[Party])
async def list_parties(db: Database = Depends(get_database)):
    """All parties, newest first."""
    return PartyAccessor(db).refresh()


@router.post("", response_model=Party, status_code=status.HTTP_201_CREATED)
async def create_party(data: PartyCreate, db: Database = Depends(get_database)):
    """
    Create a party.

    The party starts out with the default planning timeline (21 tasks from
    "4-6 weeks before" to "Day of party").
    """
    parties = PartyAccessor(db)
    party_id = parties.create(data)
    return parties.get(party_id)


@router.get("/{party_id}", response_model=Party)
async def get_party(party: Party = Depends(require_party)):
    return party


@router.patch("/{party_id}", response_model=Party)
async def update_party(party_id: int, updates: PartyUpdate, db: Database = Depends(get_database)):
    parties = PartyAccessor(db)
    parties.update(party_id, updates)
    return parties.get(party_id)


@router.delete("/{party_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_party(party_id: int, db: Database = Depends(get_database)):
    """Delete a party together with everything that belongs to it."""
    PartyAccessor(db).delete(party_id)
