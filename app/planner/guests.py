"""Guest accessor and RSVP statistics."""
from app.core.database import Database
from app.core.errors import NotFoundError
from app.models import Guest, GuestCreate, GuestStats, GuestUpdate
from app.models.guest import RSVP
from app.planner.base import Accessor, build_set_clause

GUEST_FIELDS = ("name", "email", "rsvp", "dietary_restrictions", "additional_guests", "notes")


def guest_stats(guests: list[Guest]) -> GuestStats:
    """Summarize RSVPs. Additional guests count only for confirmed guests."""
    confirmed = [g for g in guests if g.rsvp == "yes"]
    additional = sum(g.additional_guests for g in confirmed)
    return GuestStats(
        confirmed=len(confirmed),
        declined=sum(1 for g in guests if g.rsvp == "no"),
        pending=sum(1 for g in guests if g.rsvp == "pending"),
        additional_guests=additional,
        total=len(confirmed) + additional,
        total_invited=len(guests),
    )


class GuestAccessor(Accessor):
    """CRUD for the guests of one party, sorted by name."""

    def __init__(self, db: Database, party_id: int):
        super().__init__(db)
        self.party_id = party_id
        self.guests: list[Guest] = []

    def refresh(self) -> list[Guest]:
        with self.guard("Failed to load guests"):
            rows = self.db.query(
                "SELECT * FROM guests WHERE party_id = ? ORDER BY name, id", (self.party_id,)
            )
        self.guests = [Guest.model_validate(row) for row in rows]
        self.error = None
        return self.guests

    def add(self, data: GuestCreate) -> int:
        with self.guard("Failed to add guest"):
            result = self.db.update(
                """
                INSERT INTO guests (party_id, name, email, rsvp, dietary_restrictions, additional_guests, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    self.party_id,
                    data.name,
                    data.email,
                    data.rsvp,
                    data.dietary_restrictions,
                    data.additional_guests,
                    data.notes,
                ),
            )
        self.refresh()
        return result.last_insert_id

    def update(self, guest_id: int, updates: GuestUpdate) -> None:
        parts, params = build_set_clause(
            updates.model_dump(exclude_unset=True),
            GUEST_FIELDS,
            not_null=("name", "rsvp", "additional_guests"),
        )
        if not parts:
            # Empty patch still reports a missing row
            parts = ["id = id"]
        with self.guard("Failed to update guest"):
            result = self.db.update(
                f"UPDATE guests SET {', '.join(parts)} WHERE id = ? AND party_id = ?",
                (*params, guest_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Guest {guest_id} not found")
        self.refresh()

    def update_rsvp(self, guest_id: int, rsvp: RSVP) -> None:
        self.update(guest_id, GuestUpdate(rsvp=rsvp))

    def delete(self, guest_id: int) -> None:
        with self.guard("Failed to delete guest"):
            result = self.db.update(
                "DELETE FROM guests WHERE id = ? AND party_id = ?", (guest_id, self.party_id)
            )
            if result.changes == 0:
                raise NotFoundError(f"Guest {guest_id} not found")
        self.refresh()

    def stats(self) -> GuestStats:
        return guest_stats(self.guests)
