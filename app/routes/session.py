"""Routes for the selected ("current") party."""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import SQLModel

from app.core.database import Database, get_database
from app.core.session import PartySession
from app.core.storage import LocalStorage, get_storage
from app.models import Party
from app.planner.parties import PartyAccessor

router = APIRouter(prefix="/session", tags=["session"])


class SessionState(SQLModel):
    current_party_id: int | None = None
    party: Party | None = None


class PartySelection(SQLModel):
    party_id: int | None = None


def get_party_session(request: Request) -> PartySession:
    """Dependency for the application's party session."""
    return request.app.state.party_session


@router.get("", response_model=SessionState)
async def get_session_state(
    session: PartySession = Depends(get_party_session),
    db: Database = Depends(get_database),
    storage: LocalStorage = Depends(get_storage),
):
    selected = session.current_party_id
    party = session.current_party(PartyAccessor(db))
    if selected is not None and party is None:
        # The selected party was deleted; persist the cleared selection
        session.save(storage)
    return SessionState(current_party_id=session.current_party_id, party=party)


@router.put("", response_model=SessionState)
async def select_party(
    data: PartySelection,
    session: PartySession = Depends(get_party_session),
    db: Database = Depends(get_database),
    storage: LocalStorage = Depends(get_storage),
):
    """Select a party (or clear the selection with ``null``) and persist it."""
    party = None
    if data.party_id is not None:
        party = PartyAccessor(db).get(data.party_id)
        if party is None:
            raise HTTPException(status_code=404, detail="Party not found")
    session.select(data.party_id)
    session.save(storage)
    return SessionState(current_party_id=session.current_party_id, party=party)
