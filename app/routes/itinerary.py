"""Itinerary routes."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.database import Database, get_database
from app.models import (
    ItineraryItem,
    ItineraryItemCreate,
    ItineraryItemUpdate,
    ItineraryReorder,
    ItineraryStats,
    ItineraryTemplate,
    ItineraryTemplateApply,
    ItineraryTemplateCreate,
    Party,
)
from app.planner.itinerary import ItineraryAccessor
from app.routes.parties import require_party

router = APIRouter(prefix="/parties/{party_id}/itinerary", tags=["itinerary"])


async def get_itinerary(party: Party = Depends(require_party), db: Database = Depends(get_database)) -> ItineraryAccessor:
    itinerary = ItineraryAccessor(db, party.id)
    itinerary.refresh()
    return itinerary


@router.get("", response_model=list[ItineraryItem])
async def list_items(itinerary: ItineraryAccessor = Depends(get_itinerary)):
    return itinerary.items


@router.get("/stats", response_model=ItineraryStats)
async def itinerary_stats(itinerary: ItineraryAccessor = Depends(get_itinerary)):
    return itinerary.stats()


@router.post("", response_model=ItineraryItem, status_code=status.HTTP_201_CREATED)
async def add_item(data: ItineraryItemCreate, itinerary: ItineraryAccessor = Depends(get_itinerary)):
    """Append an item after the current last one."""
    return itinerary.get(itinerary.add(data))


@router.put("/order", response_model=list[ItineraryItem])
async def reorder_items(data: ItineraryReorder, itinerary: ItineraryAccessor = Depends(get_itinerary)):
    """Rewrite the order of all items; ``item_ids`` must list each item once."""
    try:
        itinerary.reorder(data.item_ids)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return itinerary.items


@router.patch("/{item_id}", response_model=ItineraryItem)
async def update_item(
    item_id: int, updates: ItineraryItemUpdate, itinerary: ItineraryAccessor = Depends(get_itinerary)
):
    itinerary.update(item_id, updates)
    return itinerary.get(item_id)


@router.post("/{item_id}/toggle", response_model=ItineraryItem)
async def toggle_item(item_id: int, itinerary: ItineraryAccessor = Depends(get_itinerary)):
    itinerary.toggle(item_id)
    return itinerary.get(item_id)


@router.post("/{item_id}/duplicate", response_model=ItineraryItem, status_code=status.HTTP_201_CREATED)
async def duplicate_item(item_id: int, itinerary: ItineraryAccessor = Depends(get_itinerary)):
    return itinerary.get(itinerary.duplicate(item_id))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: int, itinerary: ItineraryAccessor = Depends(get_itinerary)):
    itinerary.delete(item_id)


@router.get("/templates", response_model=list[ItineraryTemplate])
async def list_templates(itinerary: ItineraryAccessor = Depends(get_itinerary)):
    return itinerary.templates()


@router.post("/templates", status_code=status.HTTP_201_CREATED)
async def save_template(data: ItineraryTemplateCreate, itinerary: ItineraryAccessor = Depends(get_itinerary)):
    return {"id": itinerary.save_template(data)}


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(template_id: str, itinerary: ItineraryAccessor = Depends(get_itinerary)):
    itinerary.delete_template(template_id)


@router.post("/templates/{template_id}/apply", response_model=list[ItineraryItem])
async def apply_template(
    template_id: str, data: ItineraryTemplateApply, itinerary: ItineraryAccessor = Depends(get_itinerary)
):
    """
    Replace the party's itinerary with a template.

    Any existing items are removed first. With ``start_time`` the template's
    offsets are shifted onto that clock time.
    """
    itinerary.apply_template(itinerary.find_template(template_id), data.start_time)
    return itinerary.items
