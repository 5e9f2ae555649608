"""Tests for export and import."""

import json
import re

import pytest

from app.core.database import Database
from app.core.errors import NotFoundError
from app.models import GuestCreate, Party, PartyCreate
from app.planner import transfer
from app.planner.guests import GuestAccessor
from app.planner.parties import PartyAccessor


@pytest.fixture(name="party_with_guests")
def party_with_guests_fixture(db: Database, party: Party) -> Party:
    guests = GuestAccessor(db, party.id)
    guests.add(GuestCreate(name="Ann", rsvp="yes", additional_guests=2))
    guests.add(GuestCreate(name="Ben", rsvp="no"))
    return party


def task_count(db: Database, party_id: int) -> int:
    return db.query("SELECT COUNT(*) AS n FROM timeline_tasks WHERE party_id = ?", (party_id,))[0]["n"]


class TestExport:

    def test_single_party_shape(self, db: Database, party_with_guests: Party):
        data = transfer.export_party(db, party_with_guests.id)
        assert set(data) == {"party", "guests", "timelineTasks", "exportDate", "version"}
        assert data["version"] == "1.0"
        assert len(data["guests"]) == 2
        assert len(data["timelineTasks"]) == 21

    def test_missing_party(self, db: Database):
        with pytest.raises(NotFoundError):
            transfer.export_party(db, 999)

    def test_full_backup_shape(self, db: Database, party_with_guests: Party):
        PartyAccessor(db).create(PartyCreate(name="Second"))
        data = transfer.export_all(db)
        assert len(data["parties"]) == 2
        assert set(data["parties"][0]) == {"party", "guests", "timelineTasks"}

    def test_export_to_file(self, db: Database, party: Party, tmp_path):
        path = transfer.export_party_to_file(db, party.id, tmp_path)
        assert re.fullmatch(r"party-test-\d+\.json", path.name)
        assert json.loads(path.read_text())["party"]["name"] == "Test"

        backup = transfer.export_all_to_file(db, tmp_path)
        assert re.fullmatch(r"party-planner-backup-\d+\.json", backup.name)

    def test_filename_slug(self):
        assert transfer.party_filename("Ann's 30th B-day!").startswith("party-ann-s-30th-b-day--")


class TestImport:

    def test_round_trip(self, db: Database, party_with_guests: Party):
        text = json.dumps(transfer.export_party(db, party_with_guests.id))

        result = transfer.import_from_json(db, text)

        assert result.success is True
        assert result.imported_parties == 1
        assert result.imported_guests == 2
        assert result.imported_tasks == 21
        parties = PartyAccessor(db).refresh()
        imported = next(p for p in parties if p.id != party_with_guests.id)
        assert imported.name == "Test (Imported)"
        assert len(GuestAccessor(db, imported.id).refresh()) == 2
        assert task_count(db, imported.id) == task_count(db, party_with_guests.id)
        ann = next(g for g in GuestAccessor(db, imported.id).refresh() if g.name == "Ann")
        assert ann.additional_guests == 2

    def test_full_backup(self, db: Database, party_with_guests: Party):
        PartyAccessor(db).create(PartyCreate(name="Second"))
        result = transfer.import_data(db, transfer.export_all(db))
        assert result.success is True
        assert result.imported_parties == 2
        assert result.imported_guests == 2
        assert result.imported_tasks == 42

    def test_legacy_plus_one(self, db: Database):
        data = {
            "party": {"name": "Legacy", "party_type": "casual"},
            "guests": [{"name": "Old", "rsvp": "yes", "plus_one": True}],
            "timelineTasks": [],
        }
        result = transfer.import_data(db, data)
        assert result.success is True
        guest = db.query("SELECT additional_guests FROM guests")[0]
        assert guest["additional_guests"] == 1

    def test_task_flags_keep_their_value(self, db: Database):
        data = {
            "party": {"name": "Flags"},
            "guests": [],
            "timelineTasks": [
                {"task": "A", "time_frame": "Day before", "category": "prep", "completed": False},
                {"task": "B", "time_frame": "Day before", "category": "prep", "completed": 1},
                {"task": "C", "time_frame": "Day before", "category": "prep"},
            ],
        }
        assert transfer.import_data(db, data).success is True
        rows = db.query("SELECT task, completed, is_custom FROM timeline_tasks ORDER BY task")
        assert [(r["task"], r["completed"], r["is_custom"]) for r in rows] == [
            ("A", 0, 1),
            ("B", 1, 1),
            ("C", 0, 1),
        ]

    @pytest.mark.parametrize("flag", ["false", "0", [], {}])
    def test_ambiguous_task_flag_rejected(self, db: Database, flag):
        data = {
            "party": {"name": "Hand edited"},
            "guests": [],
            "timelineTasks": [{"task": "A", "time_frame": "Day before", "category": "prep", "completed": flag}],
        }
        result = transfer.import_data(db, data)
        assert result.success is False
        assert db.query("SELECT * FROM parties") == []

    @pytest.mark.parametrize("text", ["{not json", "[]", '{"something": 1}', "null"])
    def test_bad_input_returns_failure(self, db: Database, text: str):
        result = transfer.import_from_json(db, text)
        assert result.success is False
        assert result.imported_parties == 0

    def test_invalid_bundle(self, db: Database):
        result = transfer.import_data(db, {"party": {"name": "X"}, "guests": "nope", "timelineTasks": []})
        assert result.success is False
        assert db.query("SELECT * FROM parties") == []

    def test_failed_children_remove_party(self, db: Database):
        data = {
            "party": {"name": "Broken"},
            "guests": [{"name": None}],
            "timelineTasks": [],
        }
        result = transfer.import_data(db, data)
        assert result.success is False
        assert db.query("SELECT * FROM parties") == []

    def test_import_from_file(self, db: Database, party: Party, tmp_path):
        path = transfer.export_party_to_file(db, party.id, tmp_path)
        result = transfer.import_from_file(db, path)
        assert result.success is True

    def test_import_missing_file(self, db: Database, tmp_path):
        result = transfer.import_from_file(db, tmp_path / "missing.json")
        assert result.success is False
