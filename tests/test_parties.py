"""Tests for parties, guests and the timeline."""

import pytest
from pydantic import ValidationError

from app.core.database import Database, Statement
from app.core.errors import NotFoundError, TransactionError
from app.core.schema import DEFAULT_TIMELINE_TASKS, TIME_FRAMES
from app.models import (
    AttachmentCreate,
    GuestCreate,
    GuestUpdate,
    ItineraryItemCreate,
    Party,
    PartyCreate,
    PartyUpdate,
    TimelineTaskCreate,
    TimelineTaskUpdate,
    TodoItemCreate,
)
from app.planner import parties as parties_module
from app.planner.base import build_set_clause, percentage
from app.planner.calculations import BeverageCalculationAccessor, PizzaCalculationAccessor
from app.planner.calculators import estimate_beverages
from app.planner.guests import GuestAccessor
from app.planner.itinerary import ItineraryAccessor
from app.planner.parties import PartyAccessor
from app.planner.timeline import TimelineAccessor
from app.planner.todos import TodoAccessor

CHILD_TABLES = [
    "guests",
    "timeline_tasks",
    "todo_items",
    "todo_subtasks",
    "todo_dependencies",
    "todo_attachments",
    "itinerary_items",
    "pizza_calculations",
    "beverage_calculations",
]


class TestPartyAccessor:

    def test_create_seeds_default_timeline(self, db: Database, party: Party, count_rows):
        assert party.name == "Test"
        assert party.guest_count == 20
        assert count_rows("timeline_tasks", "party_id = ?", (party.id,)) == 21
        assert len(DEFAULT_TIMELINE_TASKS) == 21
        seeded = db.query("SELECT DISTINCT is_custom FROM timeline_tasks")
        assert seeded == [{"is_custom": 0}]

    def test_delete_removes_default_tasks(self, db: Database, party: Party, count_rows):
        PartyAccessor(db).delete(party.id)
        assert count_rows("timeline_tasks") == 0

    def test_newest_first(self, db: Database):
        parties = PartyAccessor(db)
        first = parties.create(PartyCreate(name="First"))
        second = parties.create(PartyCreate(name="Second"))
        assert [p.id for p in parties.parties] == [second, first]

    def test_update_touches_only_given_fields(self, db: Database, party: Party):
        parties = PartyAccessor(db)
        parties.update(party.id, PartyUpdate(theme="Pirates"))
        updated = parties.get(party.id)
        assert updated.theme == "Pirates"
        assert updated.name == "Test"
        assert updated.guest_count == 20

    def test_update_missing_party(self, db: Database):
        parties = PartyAccessor(db)
        with pytest.raises(NotFoundError):
            parties.update(999, PartyUpdate(name="Nobody"))
        assert parties.error is not None

    def test_delete_missing_party(self, db: Database):
        with pytest.raises(NotFoundError):
            PartyAccessor(db).delete(999)

    def test_name_required(self):
        with pytest.raises(ValidationError):
            PartyCreate(name="")

    def test_failed_seeding_removes_party(self, db: Database, monkeypatch, count_rows):
        monkeypatch.setattr(
            parties_module,
            "default_task_statements",
            lambda party_id: [Statement("INSERT INTO missing_table VALUES (?)", (party_id,))],
        )
        parties = PartyAccessor(db)
        with pytest.raises(TransactionError):
            parties.create(PartyCreate(name="Doomed"))
        assert count_rows("parties") == 0
        assert parties.error.startswith("Failed to create party")

    def test_cascade_completeness(self, db: Database, party: Party, count_rows):
        guests = GuestAccessor(db, party.id)
        guests.add(GuestCreate(name="Ann"))

        todos = TodoAccessor(db, party.id)
        first = todos.add(TodoItemCreate(title="Buy cake", category="shopping"))
        second = todos.add(TodoItemCreate(title="Pick up cake", category="preparation"))
        todos.add_subtask(first, "Choose flavour")
        todos.add_dependency(second, first)
        todos.add_attachment(first, AttachmentCreate(name="Bakery", type="link", url="https://example.com"))

        ItineraryAccessor(db, party.id).add(
            ItineraryItemCreate(start_time="18:00", end_time="19:00", title="Dinner", category="food")
        )
        PizzaCalculationAccessor(db, party.id).save(20, 7)
        BeverageCalculationAccessor(db, party.id).save(20, 3, "mixed", True, estimate_beverages(20, 3))

        for table in CHILD_TABLES:
            assert count_rows(table) > 0, table

        PartyAccessor(db).delete(party.id)

        for table in CHILD_TABLES:
            assert count_rows(table) == 0, table


class TestGuestAccessor:

    @pytest.fixture(name="guests")
    def guests_fixture(self, db: Database, party: Party) -> GuestAccessor:
        guests = GuestAccessor(db, party.id)
        guests.add(GuestCreate(name="Carol", rsvp="yes", additional_guests=2))
        guests.add(GuestCreate(name="Alice", rsvp="yes", additional_guests=1))
        guests.add(GuestCreate(name="Bob", rsvp="no", additional_guests=3))
        guests.add(GuestCreate(name="Dave", additional_guests=4))
        return guests

    def test_sorted_by_name(self, guests: GuestAccessor):
        assert [g.name for g in guests.guests] == ["Alice", "Bob", "Carol", "Dave"]

    def test_stats_only_count_confirmed(self, guests: GuestAccessor):
        stats = guests.stats()
        assert stats.confirmed == 2
        assert stats.declined == 1
        assert stats.pending == 1
        assert stats.additional_guests == 3
        assert stats.total == 5
        assert stats.total_invited == 4

    def test_rsvp_change_updates_total(self, guests: GuestAccessor):
        dave = next(g for g in guests.guests if g.name == "Dave")
        guests.update_rsvp(dave.id, "yes")
        assert guests.stats().total == 10

    def test_partial_update(self, guests: GuestAccessor):
        alice = next(g for g in guests.guests if g.name == "Alice")
        guests.update(alice.id, GuestUpdate(email="alice@example.com"))
        alice = next(g for g in guests.guests if g.name == "Alice")
        assert alice.email == "alice@example.com"
        assert alice.rsvp == "yes"

    def test_scoped_to_party(self, db: Database, guests: GuestAccessor):
        other_id = PartyAccessor(db).create(PartyCreate(name="Other"))
        other = GuestAccessor(db, other_id)
        assert other.refresh() == []
        with pytest.raises(NotFoundError):
            other.delete(guests.guests[0].id)

    def test_empty_update_on_missing_guest(self, guests: GuestAccessor):
        with pytest.raises(NotFoundError):
            guests.update(999, GuestUpdate())
        alice = next(g for g in guests.guests if g.name == "Alice")
        guests.update(alice.id, GuestUpdate())

    def test_negative_additional_guests_rejected(self):
        with pytest.raises(ValidationError):
            GuestCreate(name="Eve", additional_guests=-1)


class TestTimelineAccessor:

    def test_ordered_by_time_frame(self, db: Database, party: Party):
        timeline = TimelineAccessor(db, party.id)
        timeline.add(TimelineTaskCreate(task="Book a clown", time_frame="4-6 weeks before", category="planning"))
        tasks = timeline.refresh()

        ranks = [TIME_FRAMES.index(t.time_frame) for t in tasks]
        assert ranks == sorted(ranks)
        first_bucket = [t.task for t in tasks if t.time_frame == "4-6 weeks before"]
        # Creation order within a bucket
        assert first_bucket[-1] == "Book a clown"

    def test_grouped_by_time_frame(self, db: Database, party: Party):
        timeline = TimelineAccessor(db, party.id)
        timeline.refresh()
        grouped = timeline.tasks_by_time_frame()
        assert list(grouped) == TIME_FRAMES
        assert len(grouped["Day of party"]) == 4

    def test_toggle_and_completion(self, db: Database, party: Party):
        timeline = TimelineAccessor(db, party.id)
        timeline.refresh()
        task_id = timeline.tasks[0].id

        timeline.toggle(task_id)
        stats = timeline.completion_stats()
        assert stats.completed == 1
        assert stats.total == 21
        assert stats.percentage == 5

        timeline.toggle(task_id)
        assert timeline.completion_stats().completed == 0

    def test_update_and_delete(self, db: Database, party: Party):
        timeline = TimelineAccessor(db, party.id)
        timeline.refresh()
        task = timeline.tasks[0]
        timeline.update(task.id, TimelineTaskUpdate(task="Pick a date", completed=True))
        updated = next(t for t in timeline.tasks if t.id == task.id)
        assert updated.task == "Pick a date"
        assert updated.completed is True

        timeline.delete(task.id)
        assert len(timeline.tasks) == 20

    def test_empty_update_on_missing_task(self, db: Database, party: Party):
        timeline = TimelineAccessor(db, party.id)
        with pytest.raises(NotFoundError):
            timeline.update(999, TimelineTaskUpdate())


class TestHelpers:

    def test_set_clause_allow_list(self):
        with pytest.raises(ValueError):
            build_set_clause({"id": 5}, ("name",))

    def test_set_clause_skips_null_for_required(self):
        parts, params = build_set_clause(
            {"name": None, "notes": None}, ("name", "notes"), not_null=("name",)
        )
        assert parts == ["notes = ?"]
        assert params == [None]

    @pytest.mark.parametrize(
        "part,total,expected", [(0, 0, 0), (1, 8, 13), (1, 3, 33), (2, 3, 67), (3, 3, 100)]
    )
    def test_percentage_rounds_half_up(self, part: int, total: int, expected: int):
        assert percentage(part, total) == expected
