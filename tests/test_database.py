"""Tests for the query/update/transaction facade."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from app.core.database import Database, Statement
from app.core.errors import InitializationError, QueryError, TransactionError, UpdateError
from app.models import PartyCreate
from app.planner.parties import PartyAccessor


class TestReadiness:
    """Primitives fail before the database is opened."""

    def test_query_before_open(self):
        with pytest.raises(InitializationError):
            Database().query("SELECT 1")

    def test_update_before_open(self):
        with pytest.raises(InitializationError):
            Database().update("CREATE TABLE t (x)")

    def test_transaction_before_open(self):
        with pytest.raises(InitializationError):
            Database().transaction([Statement("SELECT 1")])

    def test_ready_flag(self):
        db = Database()
        assert db.is_ready is False
        db.open()
        assert db.is_ready is True
        db.close()
        assert db.is_ready is False


class TestQueryAndUpdate:
    """Tests for single statements."""

    def test_query_returns_row_mappings(self, db: Database):
        rows = db.query("SELECT 1 AS one, 'a' AS letter")
        assert rows == [{"one": 1, "letter": "a"}]

    def test_insert_reports_new_id(self, db: Database):
        first = db.update("INSERT INTO parties (name) VALUES (?)", ("One",))
        second = db.update("INSERT INTO parties (name) VALUES (?)", ("Two",))
        assert first.changes == 1
        assert second.last_insert_id == first.last_insert_id + 1

    def test_update_reports_changes(self, db: Database):
        db.update("INSERT INTO parties (name) VALUES ('A')")
        db.update("INSERT INTO parties (name) VALUES ('B')")
        result = db.update("UPDATE parties SET theme = ?", ("space",))
        assert result.changes == 2

    def test_malformed_query_carries_sql(self, db: Database):
        with pytest.raises(QueryError) as exc_info:
            db.query("SELECT * FROM no_such_table")
        assert exc_info.value.sql == "SELECT * FROM no_such_table"
        assert "no_such_table" in exc_info.value.message

    def test_constraint_violation(self, db: Database):
        with pytest.raises(UpdateError) as exc_info:
            db.update("INSERT INTO parties (name) VALUES (NULL)")
        assert exc_info.value.code == "UPDATE_ERROR"

    def test_foreign_keys_enforced(self, db: Database):
        with pytest.raises(UpdateError):
            db.update("INSERT INTO guests (party_id, name) VALUES (999, 'Ghost')")

    def test_additional_guests_cannot_be_negative(self, db: Database):
        party_id = db.update("INSERT INTO parties (name) VALUES ('P')").last_insert_id
        with pytest.raises(UpdateError):
            db.update(
                "INSERT INTO guests (party_id, name, additional_guests) VALUES (?, 'G', -1)",
                (party_id,),
            )


class TestTransaction:
    """Tests for all-or-nothing batches."""

    def test_commits_all_statements(self, db: Database):
        db.transaction(
            [
                Statement("INSERT INTO parties (name) VALUES (?)", ("A",)),
                Statement("INSERT INTO parties (name) VALUES (?)", ("B",)),
            ]
        )
        assert len(db.query("SELECT * FROM parties")) == 2

    def test_rolls_back_on_failure(self, db: Database):
        with pytest.raises(TransactionError) as exc_info:
            db.transaction(
                [
                    Statement("INSERT INTO parties (name) VALUES (?)", ("A",)),
                    Statement("INSERT INTO parties (name) VALUES (NULL)"),
                ]
            )
        assert "VALUES (NULL)" in exc_info.value.sql
        assert db.query("SELECT * FROM parties") == []

    def test_rolls_back_ddl(self, db: Database):
        with pytest.raises(TransactionError):
            db.transaction(
                [
                    Statement("CREATE TABLE scratch (x INTEGER)"),
                    Statement("INSERT INTO missing_table VALUES (1)"),
                ]
            )
        tables = db.query("SELECT name FROM sqlite_master WHERE name = 'scratch'")
        assert tables == []

    def test_database_usable_after_rollback(self, db: Database):
        with pytest.raises(TransactionError):
            db.transaction([Statement("INSERT INTO parties (name) VALUES (NULL)")])
        db.update("INSERT INTO parties (name) VALUES ('After')")
        assert db.query("SELECT name FROM parties") == [{"name": "After"}]


class TestSerialize:

    def test_image_round_trip(self, db: Database):
        db.update("INSERT INTO parties (name) VALUES ('Saved')")
        image = db.serialize()

        restored = Database()
        restored.open(image)
        try:
            assert restored.query("SELECT name FROM parties") == [{"name": "Saved"}]
        finally:
            restored.close()


class TestConcurrentCallers:
    """Callers on different threads share the one connection."""

    def test_transactions_stay_whole(self, db: Database):
        def create(n: int) -> int:
            return PartyAccessor(db).create(PartyCreate(name=f"Party {n}"))

        def read(n: int) -> int:
            return len(db.query("SELECT * FROM timeline_tasks"))

        with ThreadPoolExecutor(max_workers=8) as pool:
            created = [pool.submit(create, n) for n in range(30)]
            reads = [pool.submit(read, n) for n in range(60)]
            party_ids = [f.result() for f in created]
            for f in reads:
                assert f.result() % 21 == 0

        counts = db.query(
            "SELECT party_id, COUNT(*) AS n FROM timeline_tasks GROUP BY party_id"
        )
        assert sorted(row["party_id"] for row in counts) == sorted(party_ids)
        assert {row["n"] for row in counts} == {21}
