"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.core.database import Database, get_database
from app.core.migrations import stamp_baseline
from app.core.schema import apply_schema
from app.core.session import PartySession
from app.core.storage import LocalStorage, get_storage
from app.main import app
from app.models import Party, PartyCreate
from app.planner.parties import PartyAccessor
from app.routes.session import get_party_session


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory database with the current schema."""
    db = Database()
    db.open()
    apply_schema(db)
    stamp_baseline(db)
    yield db
    db.close()


@pytest.fixture(name="storage")
def storage_fixture(tmp_path) -> LocalStorage:
    """Local storage slots in a temporary directory."""
    return LocalStorage(tmp_path / "storage")


@pytest.fixture(name="party_session")
def party_session_fixture() -> PartySession:
    return PartySession()


@pytest.fixture(name="client")
def client_fixture(db: Database, storage: LocalStorage, party_session: PartySession):
    """Create a test client wired to the test database and storage."""
    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_party_session] = lambda: party_session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="party")
def party_fixture(db: Database) -> Party:
    """Create a sample party (with its default timeline)."""
    parties = PartyAccessor(db)
    party_id = parties.create(
        PartyCreate(name="Test", guest_count=20, duration=3, party_type="mixed", date="2030-06-15")
    )
    return parties.get(party_id)


@pytest.fixture(name="count_rows")
def count_rows_fixture(db: Database):
    """Return a helper counting the rows of a table."""

    def count_rows(table: str, where: str = "", params: tuple = ()) -> int:
        sql = f"SELECT COUNT(*) AS n FROM {table}" + (f" WHERE {where}" if where else "")
        return db.query(sql, params)[0]["n"]

    return count_rows
