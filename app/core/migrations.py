"""Versioned schema migrations.

Each migration is applied at most once. The ``migrations`` ledger table
records every applied version; the current schema version is the highest
recorded version, or 0 when the ledger is missing or empty.

A migration's statements and its ledger insert run as one transaction, so a
failing migration leaves neither schema changes nor a ledger row behind and
is retried from scratch on the next startup.
"""

import logging
from collections.abc import Sequence
from typing import NamedTuple

from app.core.database import Database, Statement
from app.core.errors import MigrationError, TransactionError

logger = logging.getLogger(__name__)


class Migration(NamedTuple):
    version: int
    name: str
    up: list[str]


MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        name="update_guests_plus_one_to_additional_guests",
        up=[
            "ALTER TABLE guests ADD COLUMN additional_guests INTEGER DEFAULT 0",
            "UPDATE guests SET additional_guests = CASE WHEN plus_one = 1 THEN 1 ELSE 0 END",
            # SQLite cannot drop the old column in place; rebuild the table
            """
            CREATE TABLE guests_new (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                party_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                email TEXT,
                rsvp TEXT DEFAULT 'pending',
                dietary_restrictions TEXT,
                additional_guests INTEGER DEFAULT 0 CHECK (additional_guests >= 0),
                notes TEXT,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (party_id) REFERENCES parties (id) ON DELETE CASCADE
            )
            """,
            "INSERT INTO guests_new (id, party_id, name, email, rsvp, dietary_restrictions, "
            "additional_guests, notes, created_at) "
            "SELECT id, party_id, name, email, rsvp, dietary_restrictions, "
            "additional_guests, notes, created_at FROM guests",
            "DROP TABLE guests",
            "ALTER TABLE guests_new RENAME TO guests",
            "CREATE INDEX IF NOT EXISTS idx_guests_party_id ON guests(party_id)",
        ],
    ),
]

LEDGER_DDL = """
CREATE TABLE IF NOT EXISTS migrations (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""

RECORD_SQL = "INSERT INTO migrations (version, name) VALUES (?, ?)"


def ensure_ledger(db: Database) -> None:
    db.update(LEDGER_DDL)


def current_version(db: Database) -> int:
    """Return the highest applied version, or 0 if nothing was recorded."""
    tables = db.query(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'migrations'"
    )
    if not tables:
        return 0
    rows = db.query("SELECT MAX(version) AS version FROM migrations")
    return rows[0]["version"] or 0


def pending_migrations(
    version: int, migrations: Sequence[Migration] = MIGRATIONS
) -> list[Migration]:
    return sorted((m for m in migrations if m.version > version), key=lambda m: m.version)


def run_migrations(db: Database, migrations: Sequence[Migration] = MIGRATIONS) -> list[int]:
    """Apply every pending migration in ascending version order.

    Returns the versions applied by this run.

    Raises:
        MigrationError: A migration failed. Its batch was rolled back and no
            later migration was attempted.
    """
    ensure_ledger(db)
    pending = pending_migrations(current_version(db), migrations)

    if not pending:
        logger.info("No pending migrations")
        return []

    logger.info(f"Running {len(pending)} migrations...")
    applied = []
    for migration in pending:
        logger.info(f"Running migration {migration.version}: {migration.name}")
        statements = [Statement(sql) for sql in migration.up]
        statements.append(Statement(RECORD_SQL, (migration.version, migration.name)))
        try:
            db.transaction(statements)
        except TransactionError as e:
            logger.error(f"Migration {migration.version} failed: {e.message}")
            raise MigrationError(
                f"Migration {migration.version} ({migration.name}) failed: {e.message}",
                sql=e.sql,
            ) from e
        applied.append(migration.version)
        logger.info(f"Migration {migration.version} completed successfully")

    logger.info("All migrations completed successfully")
    return applied


def stamp_baseline(db: Database, migrations: Sequence[Migration] = MIGRATIONS) -> None:
    """Record all migrations as applied without running them.

    Used for a database that was just created from the current schema, which
    already has the shape every migration would produce.
    """
    ensure_ledger(db)
    db.transaction(
        [
            Statement(
                "INSERT OR IGNORE INTO migrations (version, name) VALUES (?, ?)",
                (m.version, m.name),
            )
            for m in migrations
        ]
    )
