"""Party accessor."""
import logging

from app.core.database import Database, Statement
from app.core.errors import DatabaseError, NotFoundError
from app.core.schema import DEFAULT_TIMELINE_TASKS
from app.models import Party, PartyCreate, PartyUpdate
from app.planner.base import Accessor, build_set_clause

logger = logging.getLogger(__name__)

PARTY_FIELDS = ("name", "date", "guest_count", "party_type", "duration", "theme", "notes")

INSERT_PARTY_SQL = """
INSERT INTO parties (name, date, guest_count, party_type, duration, theme, notes)
VALUES (?, ?, ?, ?, ?, ?, ?)
"""

SEED_TASK_SQL = """
INSERT INTO timeline_tasks (party_id, task, time_frame, category, is_custom)
VALUES (?, ?, ?, ?, 0)
"""


def default_task_statements(party_id: int) -> list[Statement]:
    return [
        Statement(SEED_TASK_SQL, (party_id, task, time_frame, category))
        for task, time_frame, category in DEFAULT_TIMELINE_TASKS
    ]


class PartyAccessor(Accessor):
    """CRUD for parties. Newest parties come first."""

    def __init__(self, db: Database):
        super().__init__(db)
        self.parties: list[Party] = []

    def refresh(self) -> list[Party]:
        with self.guard("Failed to load parties"):
            rows = self.db.query("SELECT * FROM parties ORDER BY created_at DESC, id DESC")
        self.parties = [Party.model_validate(row) for row in rows]
        self.error = None
        return self.parties

    def get(self, party_id: int) -> Party | None:
        with self.guard("Failed to load party"):
            rows = self.db.query("SELECT * FROM parties WHERE id = ?", (party_id,))
        return Party.model_validate(rows[0]) if rows else None

    def create(self, data: PartyCreate) -> int:
        """Insert a party and seed its default timeline tasks.

        The tasks are inserted in one transaction. If that fails the new
        party is deleted again so no half-seeded party remains.
        """
        with self.guard("Failed to create party"):
            result = self.db.update(
                INSERT_PARTY_SQL,
                (
                    data.name,
                    data.date,
                    data.guest_count,
                    data.party_type,
                    data.duration,
                    data.theme,
                    data.notes,
                ),
            )
            party_id = result.last_insert_id
            try:
                self.db.transaction(default_task_statements(party_id))
            except DatabaseError:
                self.db.update("DELETE FROM parties WHERE id = ?", (party_id,))
                raise

        logger.info(f"Created party {party_id} ({data.name})")
        self.refresh()
        return party_id

    def update(self, party_id: int, updates: PartyUpdate) -> None:
        parts, params = build_set_clause(
            updates.model_dump(exclude_unset=True), PARTY_FIELDS, not_null=("name",)
        )
        parts.append("updated_at = CURRENT_TIMESTAMP")
        with self.guard("Failed to update party"):
            result = self.db.update(
                f"UPDATE parties SET {', '.join(parts)} WHERE id = ?", (*params, party_id)
            )
            if result.changes == 0:
                raise NotFoundError(f"Party {party_id} not found")
        self.refresh()

    def delete(self, party_id: int) -> None:
        """Delete a party; the database cascades to all of its children."""
        with self.guard("Failed to delete party"):
            result = self.db.update("DELETE FROM parties WHERE id = ?", (party_id,))
            if result.changes == 0:
                raise NotFoundError(f"Party {party_id} not found")
        logger.info(f"Deleted party {party_id}")
        self.refresh()
