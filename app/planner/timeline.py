"""Timeline task accessor."""
from app.core.database import Database
from app.core.errors import NotFoundError
from app.core.schema import TIME_FRAMES
from app.models import CompletionStats, TimelineTask, TimelineTaskCreate, TimelineTaskUpdate
from app.planner.base import Accessor, build_set_clause, percentage

TIMELINE_FIELDS = ("task", "time_frame", "category", "completed")

# Unknown time frames sort after the known buckets
_RANK_SQL = (
    "CASE time_frame "
    + " ".join(f"WHEN ? THEN {rank}" for rank in range(len(TIME_FRAMES)))
    + f" ELSE {len(TIME_FRAMES)} END"
)

LIST_SQL = f"""
SELECT * FROM timeline_tasks
WHERE party_id = ?
ORDER BY {_RANK_SQL}, created_at, id
"""


class TimelineAccessor(Accessor):
    """CRUD for the timeline tasks of one party.

    Tasks are listed bucket by bucket (earliest time frame first) and in
    creation order within a bucket.
    """

    def __init__(self, db: Database, party_id: int):
        super().__init__(db)
        self.party_id = party_id
        self.tasks: list[TimelineTask] = []

    def refresh(self) -> list[TimelineTask]:
        with self.guard("Failed to load timeline tasks"):
            rows = self.db.query(LIST_SQL, (self.party_id, *TIME_FRAMES))
        self.tasks = [TimelineTask.model_validate(row) for row in rows]
        self.error = None
        return self.tasks

    def add(self, data: TimelineTaskCreate) -> int:
        with self.guard("Failed to add task"):
            result = self.db.update(
                """
                INSERT INTO timeline_tasks (party_id, task, time_frame, category, completed, is_custom)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    self.party_id,
                    data.task,
                    data.time_frame,
                    data.category,
                    int(data.completed),
                    int(data.is_custom),
                ),
            )
        self.refresh()
        return result.last_insert_id

    def update(self, task_id: int, updates: TimelineTaskUpdate) -> None:
        parts, params = build_set_clause(
            updates.model_dump(exclude_unset=True), TIMELINE_FIELDS, not_null=TIMELINE_FIELDS
        )
        if not parts:
            # Empty patch still reports a missing row
            parts = ["id = id"]
        with self.guard("Failed to update task"):
            result = self.db.update(
                f"UPDATE timeline_tasks SET {', '.join(parts)} WHERE id = ? AND party_id = ?",
                (*params, task_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Task {task_id} not found")
        self.refresh()

    def toggle(self, task_id: int) -> None:
        with self.guard("Failed to update task"):
            result = self.db.update(
                "UPDATE timeline_tasks SET completed = NOT completed WHERE id = ? AND party_id = ?",
                (task_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Task {task_id} not found")
        self.refresh()

    def delete(self, task_id: int) -> None:
        with self.guard("Failed to delete task"):
            result = self.db.update(
                "DELETE FROM timeline_tasks WHERE id = ? AND party_id = ?",
                (task_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Task {task_id} not found")
        self.refresh()

    def tasks_by_time_frame(self) -> dict[str, list[TimelineTask]]:
        grouped: dict[str, list[TimelineTask]] = {}
        for task in self.tasks:
            grouped.setdefault(task.time_frame, []).append(task)
        return grouped

    def completion_stats(self) -> CompletionStats:
        completed = sum(1 for t in self.tasks if t.completed)
        return CompletionStats(
            total=len(self.tasks),
            completed=completed,
            percentage=percentage(completed, len(self.tasks)),
        )
