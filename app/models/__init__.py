from app.models.calculation import (
    BeverageCalculation,
    BeverageEstimate,
    BeverageRequest,
    PizzaCalculation,
    PizzaRequest,
)
from app.models.guest import Guest, GuestCreate, GuestStats, GuestUpdate, RSVPUpdate
from app.models.itinerary import (
    ItineraryItem,
    ItineraryItemCreate,
    ItineraryItemUpdate,
    ItineraryReorder,
    ItineraryStats,
    ItineraryTemplate,
    ItineraryTemplateApply,
    ItineraryTemplateCreate,
    ItineraryTemplateItem,
)
from app.models.party import Party, PartyCreate, PartyUpdate
from app.models.timeline import (
    CompletionStats,
    TimelineTask,
    TimelineTaskCreate,
    TimelineTaskUpdate,
)
from app.models.todo import (
    Attachment,
    AttachmentCreate,
    SubTask,
    SubTaskCreate,
    SubTaskUpdate,
    TodoItem,
    TodoItemCreate,
    TodoItemUpdate,
    TodoStats,
    TodoTemplate,
    TodoTemplateApply,
    TodoTemplateCreate,
    TodoTemplateItem,
)
from app.models.transfer import ImportResult

__all__ = [
    "Attachment",
    "AttachmentCreate",
    "BeverageCalculation",
    "BeverageEstimate",
    "BeverageRequest",
    "CompletionStats",
    "Guest",
    "GuestCreate",
    "GuestStats",
    "GuestUpdate",
    "ImportResult",
    "ItineraryItem",
    "ItineraryItemCreate",
    "ItineraryItemUpdate",
    "ItineraryReorder",
    "ItineraryStats",
    "ItineraryTemplate",
    "ItineraryTemplateApply",
    "ItineraryTemplateCreate",
    "ItineraryTemplateItem",
    "Party",
    "PartyCreate",
    "PartyUpdate",
    "PizzaCalculation",
    "PizzaRequest",
    "RSVPUpdate",
    "SubTask",
    "SubTaskCreate",
    "SubTaskUpdate",
    "TimelineTask",
    "TimelineTaskCreate",
    "TimelineTaskUpdate",
    "TodoItem",
    "TodoItemCreate",
    "TodoItemUpdate",
    "TodoStats",
    "TodoTemplate",
    "TodoTemplateApply",
    "TodoTemplateCreate",
    "TodoTemplateItem",
]
