"""Timeline routes."""
from fastapi import APIRouter, Depends, status

from app.core.database import Database, get_database
from app.models import CompletionStats, Party, TimelineTask, TimelineTaskCreate, TimelineTaskUpdate
from app.planner.timeline import TimelineAccessor
from app.routes.parties import require_party

router = APIRouter(prefix="/parties/{party_id}/timeline", tags=["timeline"])


async def get_timeline(party: Party = Depends(require_party), db: Database = Depends(get_database)) -> TimelineAccessor:
    timeline = TimelineAccessor(db, party.id)
    timeline.refresh()
    return timeline


def _task(timeline: TimelineAccessor, task_id: int) -> TimelineTask:
    return next(t for t in timeline.tasks if t.id == task_id)


@router.get("", response_model=list[TimelineTask])
async def list_tasks(timeline: TimelineAccessor = Depends(get_timeline)):
    """Tasks from the earliest time frame to the day of the party."""
    return timeline.tasks


@router.get("/by-time-frame", response_model=dict[str, list[TimelineTask]])
async def tasks_by_time_frame(timeline: TimelineAccessor = Depends(get_timeline)):
    return timeline.tasks_by_time_frame()


@router.get("/stats", response_model=CompletionStats)
async def completion_stats(timeline: TimelineAccessor = Depends(get_timeline)):
    return timeline.completion_stats()


@router.post("", response_model=TimelineTask, status_code=status.HTTP_201_CREATED)
async def add_task(data: TimelineTaskCreate, timeline: TimelineAccessor = Depends(get_timeline)):
    return _task(timeline, timeline.add(data))


@router.patch("/{task_id}", response_model=TimelineTask)
async def update_task(
    task_id: int, updates: TimelineTaskUpdate, timeline: TimelineAccessor = Depends(get_timeline)
):
    timeline.update(task_id, updates)
    return _task(timeline, task_id)


@router.post("/{task_id}/toggle", response_model=TimelineTask)
async def toggle_task(task_id: int, timeline: TimelineAccessor = Depends(get_timeline)):
    timeline.toggle(task_id)
    return _task(timeline, task_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, timeline: TimelineAccessor = Depends(get_timeline)):
    timeline.delete(task_id)
