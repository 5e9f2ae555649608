"""Shared plumbing for the domain accessors."""
import logging
import math
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any

from app.core.database import Database
from app.core.errors import DatabaseError

logger = logging.getLogger(__name__)


class Accessor:
    """Base class for one accessor per entity.

    An accessor keeps the most recently loaded rows plus a user-facing
    ``error`` message. Storage errors are logged, recorded in ``error`` and
    re-raised so that only the operation in question fails.
    """

    def __init__(self, db: Database):
        self.db = db
        self.error: str | None = None

    @contextmanager
    def guard(self, message: str) -> Iterator[None]:
        try:
            yield
        except DatabaseError as e:
            logger.error(f"{message}: {e.message}" + (f" [sql: {e.sql.strip()}]" if e.sql else ""))
            self.error = f"{message}: {e.message}"
            raise


def to_db_value(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def build_set_clause(
    values: dict[str, Any],
    allowed: Iterable[str],
    not_null: Iterable[str] = (),
) -> tuple[list[str], list[Any]]:
    """Turn a partial update into ``col = ?`` fragments and parameters.

    Only columns in ``allowed`` may be written. ``None`` for a column in
    ``not_null`` means "leave unchanged" and is skipped.

    Raises:
        ValueError: A key is not an allowed column.
    """
    allowed = frozenset(allowed)
    not_null = frozenset(not_null)
    parts, params = [], []
    for key, value in values.items():
        if key not in allowed:
            raise ValueError(f"Field {key!r} cannot be updated")
        if value is None and key in not_null:
            continue
        parts.append(f"{key} = ?")
        params.append(to_db_value(value))
    return parts, params


def percentage(part: int, total: int) -> int:
    """Whole-number percentage, rounding halves up."""
    if total <= 0:
        return 0
    return math.floor(part * 100 / total + 0.5)
