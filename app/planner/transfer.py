"""Export parties to JSON documents and import them back.

Two document shapes exist:

    single party   {"party", "guests", "timelineTasks", "exportDate", "version"}
    full backup    {"parties": [{"party", "guests", "timelineTasks"}, ...], "exportDate", "version"}

Imports always create new rows with fresh ids and suffix the party name with
" (Imported)". Import functions never raise; every problem is reported as a
failed ImportResult.
"""
import json
import logging
import re
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from app.core.config import settings
from app.core.database import Database, Statement
from app.core.errors import DatabaseError, ImportValidationError, NotFoundError
from app.models import ImportResult

logger = logging.getLogger(__name__)

IMPORTED_SUFFIX = " (Imported)"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _party_bundle(db: Database, party: dict[str, Any]) -> dict[str, Any]:
    return {
        "party": party,
        "guests": db.query("SELECT * FROM guests WHERE party_id = ? ORDER BY id", (party["id"],)),
        "timelineTasks": db.query(
            "SELECT * FROM timeline_tasks WHERE party_id = ? ORDER BY id", (party["id"],)
        ),
    }


def export_party(db: Database, party_id: int) -> dict[str, Any]:
    rows = db.query("SELECT * FROM parties WHERE id = ?", (party_id,))
    if not rows:
        raise NotFoundError(f"Party {party_id} not found")
    return {
        **_party_bundle(db, rows[0]),
        "exportDate": _now_iso(),
        "version": settings.export_version,
    }


def export_all(db: Database) -> dict[str, Any]:
    parties = db.query("SELECT * FROM parties ORDER BY created_at DESC, id DESC")
    return {
        "parties": [_party_bundle(db, party) for party in parties],
        "exportDate": _now_iso(),
        "version": settings.export_version,
    }


def party_filename(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]", "-", name, flags=re.IGNORECASE).lower()
    return f"party-{slug}-{int(time.time() * 1000)}.json"


def backup_filename() -> str:
    return f"party-planner-backup-{int(time.time() * 1000)}.json"


def _write_json(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.info(f"Exported data to {path}")
    return path


def export_party_to_file(db: Database, party_id: int, directory: Path | str | None = None) -> Path:
    data = export_party(db, party_id)
    directory = Path(directory or settings.export_dir).expanduser()
    return _write_json(data, directory / party_filename(data["party"]["name"]))


def export_all_to_file(db: Database, directory: Path | str | None = None) -> Path:
    directory = Path(directory or settings.export_dir).expanduser()
    return _write_json(export_all(db), directory / backup_filename())


def _as_int(value: Any, field: str) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ImportValidationError(f"Invalid value for {field}: {value!r}") from e


def _as_flag(value: Any, field: str, default: bool = False) -> int:
    if value is None:
        return int(default)
    # Only JSON booleans and numbers; a string such as "false" is ambiguous
    if isinstance(value, (bool, int)):
        return int(bool(value))
    raise ImportValidationError(f"Invalid value for {field}: {value!r}")


def _validate_bundle(data: Any) -> None:
    if not isinstance(data, dict):
        raise ImportValidationError("Invalid party data format")
    party = data.get("party")
    if not isinstance(party, dict) or not party.get("name"):
        raise ImportValidationError("Invalid party data format")
    for key in ("guests", "timelineTasks"):
        if not isinstance(data.get(key), list) or not all(isinstance(r, dict) for r in data[key]):
            raise ImportValidationError("Invalid party data format")


def _child_statements(party_id: int, guests: list[dict], tasks: list[dict]) -> list[Statement]:
    statements = []
    for guest in guests:
        # Older exports used a plus_one column
        additional = guest.get("additional_guests", guest.get("plus_one"))
        statements.append(
            Statement(
                """
                INSERT INTO guests (party_id, name, email, rsvp, dietary_restrictions, additional_guests, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    party_id,
                    guest.get("name"),
                    guest.get("email"),
                    guest.get("rsvp") or "pending",
                    guest.get("dietary_restrictions"),
                    _as_int(additional, "additional_guests"),
                    guest.get("notes"),
                ),
            )
        )
    for task in tasks:
        statements.append(
            Statement(
                """
                INSERT INTO timeline_tasks (party_id, task, time_frame, category, completed, is_custom)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    party_id,
                    task.get("task"),
                    task.get("time_frame"),
                    task.get("category"),
                    _as_flag(task.get("completed"), "completed"),
                    _as_flag(task.get("is_custom"), "is_custom", default=True),
                ),
            )
        )
    return statements


def import_single_party(db: Database, data: Any) -> ImportResult:
    """Import one ``{party, guests, timelineTasks}`` bundle.

    The party row is inserted first; guests and tasks follow in one
    transaction. If that transaction fails the new party is removed again.
    """
    try:
        _validate_bundle(data)
        party, guests, tasks = data["party"], data["guests"], data["timelineTasks"]
        # Validate the children before anything is written
        _child_statements(0, guests, tasks)
    except ImportValidationError as e:
        logger.warning(f"Rejected import: {e}")
        return ImportResult(success=False, message=str(e))

    try:
        result = db.update(
            """
            INSERT INTO parties (name, date, guest_count, party_type, duration, theme, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                f"{party['name']}{IMPORTED_SUFFIX}",
                party.get("date"),
                _as_int(party.get("guest_count"), "guest_count"),
                party.get("party_type") or "mixed",
                _as_int(party.get("duration", 3), "duration"),
                party.get("theme"),
                party.get("notes"),
            ),
        )
    except (DatabaseError, ImportValidationError) as e:
        logger.error(f"Import failed: {e}")
        return ImportResult(success=False, message="Failed to import party data")

    party_id = result.last_insert_id
    try:
        db.transaction(_child_statements(party_id, guests, tasks))
    except DatabaseError as e:
        logger.error(f"Import failed, removing party {party_id}: {e}")
        try:
            db.update("DELETE FROM parties WHERE id = ?", (party_id,))
        except DatabaseError as cleanup_error:
            logger.error(f"Failed to remove partially imported party {party_id}: {cleanup_error}")
        return ImportResult(success=False, message="Failed to import party data")

    logger.info(f"Imported party {party['name']!r} as {party_id}")
    return ImportResult(
        success=True,
        message=f'Successfully imported party "{party["name"]}"',
        imported_parties=1,
        imported_guests=len(guests),
        imported_tasks=len(tasks),
    )


def import_all(db: Database, data: Any) -> ImportResult:
    """Import a full backup. Bundles that fail are skipped and not counted."""
    if not isinstance(data, dict) or not isinstance(data.get("parties"), list):
        return ImportResult(success=False, message="Invalid backup data format")

    parties = guests = tasks = 0
    for bundle in data["parties"]:
        result = import_single_party(db, bundle)
        if result.success:
            parties += result.imported_parties
            guests += result.imported_guests
            tasks += result.imported_tasks

    return ImportResult(
        success=True,
        message=f"Successfully imported {parties} parties",
        imported_parties=parties,
        imported_guests=guests,
        imported_tasks=tasks,
    )


def import_data(db: Database, data: Any) -> ImportResult:
    """Dispatch on the document shape: ``party`` or ``parties``."""
    if isinstance(data, dict) and "party" in data:
        return import_single_party(db, data)
    if isinstance(data, dict) and "parties" in data:
        return import_all(db, data)
    return ImportResult(success=False, message="Unrecognized data format")


def import_from_json(db: Database, text: str) -> ImportResult:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return ImportResult(success=False, message="Invalid JSON data")
    return import_data(db, data)


def import_from_file(db: Database, path: Path | str) -> ImportResult:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read import file {path}: {e}")
        return ImportResult(success=False, message="Failed to read file")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return ImportResult(success=False, message="Invalid JSON file or corrupted data")
    return import_data(db, data)
