"""Itinerary accessor: the timed schedule of a party.

Items keep an explicit, dense ``order_index``. Applying a template replaces
the party's whole itinerary; it never accumulates items.
"""
import json
import logging
from typing import Any

from app.core.database import Database, Statement
from app.core.errors import DatabaseError, NotFoundError
from app.models import (
    ItineraryItem,
    ItineraryItemCreate,
    ItineraryItemUpdate,
    ItineraryStats,
    ItineraryTemplate,
    ItineraryTemplateCreate,
)
from app.models.itinerary import validate_hhmm
from app.planner.base import Accessor, build_set_clause
from app.planner.templates import DEFAULT_ITINERARY_TEMPLATES

logger = logging.getLogger(__name__)

ITINERARY_FIELDS = (
    "start_time",
    "end_time",
    "title",
    "description",
    "category",
    "location",
    "responsible",
    "preparations",
    "notes",
    "completed",
)

MINUTES_PER_DAY = 24 * 60

INSERT_ITEM_SQL = """
INSERT INTO itinerary_items
    (party_id, start_time, end_time, title, description, category, location,
     responsible, preparations, notes, completed, order_index)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""

# Appends after the current last item; the first item of a party gets 0
APPEND_ITEM_SQL = """
INSERT INTO itinerary_items
    (party_id, start_time, end_time, title, description, category, location,
     responsible, preparations, notes, completed, order_index)
SELECT ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, COALESCE(MAX(order_index), -1) + 1
FROM itinerary_items WHERE party_id = ?
"""


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def from_minutes(total: int) -> str:
    total %= MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def shift_time(offset: str, start_time: str | None) -> str:
    """Place a template offset onto a start time, wrapping past midnight."""
    if start_time is None:
        return offset
    return from_minutes(to_minutes(start_time) + to_minutes(offset))


def encode_preparations(preparations: list[str] | None) -> str | None:
    return json.dumps(preparations) if preparations else None


def _decode_json_list(raw: str | None) -> list[Any]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Ignoring malformed JSON column value: {raw!r}")
        return []
    return value if isinstance(value, list) else []


def row_to_item(row: dict[str, Any]) -> ItineraryItem:
    return ItineraryItem.model_validate(
        {**row, "preparations": _decode_json_list(row["preparations"]), "order_index": row["order_index"] or 0}
    )


def row_to_template(row: dict[str, Any]) -> ItineraryTemplate:
    return ItineraryTemplate.model_validate(
        {**row, "id": str(row["id"]), "template_data": _decode_json_list(row["template_data"])}
    )


class ItineraryAccessor(Accessor):
    """CRUD, ordering and templates for the itinerary of one party."""

    def __init__(self, db: Database, party_id: int):
        super().__init__(db)
        self.party_id = party_id
        self.items: list[ItineraryItem] = []

    def refresh(self) -> list[ItineraryItem]:
        with self.guard("Failed to load itinerary items"):
            rows = self.db.query(
                "SELECT * FROM itinerary_items WHERE party_id = ? ORDER BY order_index, start_time",
                (self.party_id,),
            )
        self.items = [row_to_item(row) for row in rows]
        self.error = None
        return self.items

    def get(self, item_id: int) -> ItineraryItem:
        with self.guard("Failed to load itinerary item"):
            rows = self.db.query(
                "SELECT * FROM itinerary_items WHERE id = ? AND party_id = ?",
                (item_id, self.party_id),
            )
        if not rows:
            raise NotFoundError(f"Itinerary item {item_id} not found")
        return row_to_item(rows[0])

    def add(self, data: ItineraryItemCreate) -> int:
        with self.guard("Failed to add itinerary item"):
            result = self.db.update(
                APPEND_ITEM_SQL,
                (
                    self.party_id,
                    data.start_time,
                    data.end_time,
                    data.title,
                    data.description,
                    data.category,
                    data.location,
                    data.responsible,
                    encode_preparations(data.preparations),
                    data.notes,
                    int(data.completed),
                    self.party_id,
                ),
            )
        self.refresh()
        return result.last_insert_id

    def update(self, item_id: int, updates: ItineraryItemUpdate) -> None:
        values = updates.model_dump(exclude_unset=True)
        if "preparations" in values:
            values["preparations"] = encode_preparations(values["preparations"])
        parts, params = build_set_clause(
            values,
            ITINERARY_FIELDS,
            not_null=("start_time", "end_time", "title", "category", "completed"),
        )
        if not parts:
            # Empty patch still reports a missing row
            parts = ["id = id"]
        with self.guard("Failed to update itinerary item"):
            result = self.db.update(
                f"UPDATE itinerary_items SET {', '.join(parts)} WHERE id = ? AND party_id = ?",
                (*params, item_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Itinerary item {item_id} not found")
        self.refresh()

    def toggle(self, item_id: int) -> None:
        with self.guard("Failed to update itinerary item"):
            result = self.db.update(
                "UPDATE itinerary_items SET completed = NOT completed WHERE id = ? AND party_id = ?",
                (item_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Itinerary item {item_id} not found")
        self.refresh()

    def delete(self, item_id: int) -> None:
        with self.guard("Failed to delete itinerary item"):
            result = self.db.update(
                "DELETE FROM itinerary_items WHERE id = ? AND party_id = ?",
                (item_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Itinerary item {item_id} not found")
        self.refresh()

    def duplicate(self, item_id: int) -> int:
        """Append an open copy of an item, titled "<title> (Copy)"."""
        item = self.get(item_id)
        copy = ItineraryItemCreate.model_validate(
            {
                **item.model_dump(exclude={"id", "party_id", "created_at", "order_index"}),
                "title": f"{item.title} (Copy)",
                "completed": False,
            }
        )
        return self.add(copy)

    def reorder(self, item_ids: list[int]) -> None:
        """Rewrite every item's position in one transaction.

        ``item_ids`` must list each item of the party exactly once; the items
        get order_index 0..n-1 in that order.
        """
        self.refresh()
        if sorted(item_ids) != sorted(item.id for item in self.items):
            raise ValueError("Reorder must list every itinerary item of the party exactly once")
        statements = [
            Statement(
                "UPDATE itinerary_items SET order_index = ? WHERE id = ? AND party_id = ?",
                (index, item_id, self.party_id),
            )
            for index, item_id in enumerate(item_ids)
        ]
        with self.guard("Failed to reorder itinerary items"):
            self.db.transaction(statements)
        self.refresh()

    def templates(self) -> list[ItineraryTemplate]:
        """Built-in templates followed by the saved ones, by name.

        Saved templates that cannot be loaded are skipped; the built-ins are
        always available.
        """
        try:
            with self.guard("Failed to load templates"):
                rows = self.db.query("SELECT * FROM itinerary_templates ORDER BY name")
        except DatabaseError:
            rows = []
        return [*DEFAULT_ITINERARY_TEMPLATES, *(row_to_template(row) for row in rows)]

    def find_template(self, template_id: str) -> ItineraryTemplate:
        for template in self.templates():
            if template.id == template_id:
                return template
        raise NotFoundError(f"Template {template_id} not found")

    def save_template(self, data: ItineraryTemplateCreate) -> str:
        with self.guard("Failed to save template"):
            result = self.db.update(
                """
                INSERT INTO itinerary_templates (name, party_type, duration, description, template_data, is_default)
                VALUES (?, ?, ?, ?, ?, 0)
                """,
                (
                    data.name,
                    data.party_type,
                    data.duration,
                    data.description,
                    json.dumps([item.model_dump(exclude_none=True) for item in data.template_data]),
                ),
            )
        return str(result.last_insert_id)

    def delete_template(self, template_id: str) -> None:
        """Delete a saved template. Built-in templates cannot be deleted."""
        if not template_id.isdigit():
            raise NotFoundError(f"Template {template_id} not found")
        with self.guard("Failed to delete template"):
            result = self.db.update(
                "DELETE FROM itinerary_templates WHERE id = ?", (int(template_id),)
            )
            if result.changes == 0:
                raise NotFoundError(f"Template {template_id} not found")

    def apply_template(self, template: ItineraryTemplate, start_time: str | None = None) -> None:
        """Replace the party's itinerary with the template's items.

        With ``start_time`` ("HH:MM") the template offsets are shifted onto
        it. The delete and all inserts run in one transaction.
        """
        validate_hhmm(start_time)
        statements = [Statement("DELETE FROM itinerary_items WHERE party_id = ?", (self.party_id,))]
        for index, item in enumerate(template.template_data):
            statements.append(
                Statement(
                    INSERT_ITEM_SQL,
                    (
                        self.party_id,
                        shift_time(item.start_time, start_time),
                        shift_time(item.end_time, start_time),
                        item.title,
                        item.description,
                        item.category,
                        item.location,
                        None,
                        encode_preparations(item.preparations),
                        None,
                        0,
                        index,
                    ),
                )
            )
        with self.guard("Failed to apply template"):
            self.db.transaction(statements)
        logger.info(f"Applied itinerary template {template.id} to party {self.party_id}")
        self.refresh()

    def stats(self) -> ItineraryStats:
        """Counts and total scheduled minutes; an item ending past midnight wraps."""
        total_minutes = 0
        by_category: dict[str, int] = {}
        for item in self.items:
            duration = to_minutes(item.end_time) - to_minutes(item.start_time)
            if duration < 0:
                duration += MINUTES_PER_DAY
            total_minutes += duration
            by_category[item.category] = by_category.get(item.category, 0) + 1
        return ItineraryStats(
            total=len(self.items),
            completed=sum(1 for item in self.items if item.completed),
            total_minutes=total_minutes,
            by_category=by_category,
        )
