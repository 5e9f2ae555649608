"""Persistence bridge between the in-memory database and local storage.

The live database exists only in memory. Its durable copy is a snapshot: the
full serialized SQLite image, stored in one local-storage slot as a JSON array
of byte values. Snapshots are written right after initialization, by the
scheduler on a fixed interval, and on shutdown. Every write overwrites the
previous snapshot completely.

Durability is best-effort: a failed snapshot write is logged and ignored,
while a failed migration aborts startup.
"""

import json
import logging
from collections.abc import Sequence

from app.core.config import settings
from app.core.database import Database, database
from app.core.errors import DatabaseError, InitializationError, MigrationError, SnapshotError
from app.core.migrations import MIGRATIONS, Migration, run_migrations, stamp_baseline
from app.core.schema import apply_schema, user_table_names
from app.core.storage import LocalStorage, storage

logger = logging.getLogger(__name__)


def encode_snapshot(image: bytes) -> str:
    return json.dumps(list(image), separators=(",", ":"))


def decode_snapshot(value: str) -> bytes:
    """Turn a stored numeric array back into the database image.

    Raises:
        SnapshotError: The value is not a JSON array of byte values.
    """
    try:
        values = json.loads(value)
        if not isinstance(values, list):
            raise ValueError("snapshot is not an array")
        return bytes(values)
    except (ValueError, TypeError) as e:
        raise SnapshotError(f"Corrupt snapshot: {e}") from e


class PersistenceBridge:
    """Owns the database lifecycle: restore, schema, migrations, snapshots."""

    def __init__(
        self,
        db: Database,
        storage: LocalStorage,
        snapshot_key: str = settings.snapshot_key,
        migrations: Sequence[Migration] = MIGRATIONS,
    ):
        self.db = db
        self.storage = storage
        self.snapshot_key = snapshot_key
        self.migrations = migrations

    def load_snapshot(self) -> bytes | None:
        """Return the stored image, or None if there is none or it is unreadable."""
        try:
            value = self.storage.get_item(self.snapshot_key)
            if value is None:
                return None
            return decode_snapshot(value)
        except (OSError, SnapshotError) as e:
            logger.warning(f"Failed to read saved database, creating new one: {e}")
            return None

    def initialize(self) -> None:
        """Open the database and bring its schema up to date.

        Raises:
            InitializationError: The schema or a migration could not be
                applied. The database is left closed.
        """
        image = self.load_snapshot()
        try:
            self.db.open(image)
        except SnapshotError as e:
            logger.warning(f"Failed to load saved database, creating new one: {e}")
            self.db.open()

        try:
            fresh = not user_table_names(self.db)
            apply_schema(self.db)
            if fresh:
                stamp_baseline(self.db, self.migrations)
            run_migrations(self.db, self.migrations)
        except MigrationError:
            self.db.close()
            raise
        except DatabaseError as e:
            self.db.close()
            logger.error(f"Failed to initialize database: {e.message}")
            raise InitializationError(
                f"Failed to initialize database: {e.message}", sql=e.sql
            ) from e

        logger.info("Database initialized")
        self.save_snapshot()

    def save_snapshot(self) -> bool:
        """Overwrite the stored snapshot with the current database image.

        Returns False (after logging) instead of raising on failure.
        """
        if not self.db.is_ready:
            logger.warning("Skipping snapshot: database not initialized")
            return False
        try:
            self.storage.set_item(self.snapshot_key, encode_snapshot(self.db.serialize()))
        except Exception as e:
            logger.warning(f"Failed to save database: {e}")
            return False
        logger.debug("Database snapshot saved")
        return True

    def shutdown(self) -> None:
        """Final snapshot, then release the database handle."""
        self.save_snapshot()
        self.db.close()


bridge = PersistenceBridge(database, storage)
