"""Built-in itinerary and todo templates.

Itinerary template times are offsets from the start of the party. Todo
template items are placed ``days_before_party`` days before the party date.
"""
from app.models import ItineraryTemplate, TodoTemplate

DEFAULT_ITINERARY_TEMPLATES = [
    ItineraryTemplate(
        id="birthday-party-3h",
        name="Birthday Party (3 hours)",
        party_type="birthday",
        duration=3,
        description="A classic birthday party template for all ages",
        is_default=True,
        template_data=[
            {
                "start_time": "00:00",
                "end_time": "00:30",
                "title": "Guest arrival & welcome drinks",
                "category": "arrival",
                "description": "Welcome guests and serve welcome drinks",
            },
            {
                "start_time": "00:30",
                "end_time": "01:00",
                "title": "Mingling & appetizers",
                "category": "food",
                "description": "Light snacks and socializing time",
            },
            {
                "start_time": "01:00",
                "end_time": "01:30",
                "title": "Main activities/games",
                "category": "activity",
                "description": "Planned party games and activities",
            },
            {
                "start_time": "01:30",
                "end_time": "02:00",
                "title": "Food service",
                "category": "food",
                "description": "Main meal or party food",
            },
            {
                "start_time": "02:00",
                "end_time": "02:30",
                "title": "Cake & celebration",
                "category": "entertainment",
                "description": "Birthday cake, singing, and special moments",
            },
            {
                "start_time": "02:30",
                "end_time": "03:00",
                "title": "Farewell & cleanup",
                "category": "cleanup",
                "description": "Goodbyes and initial cleanup",
            },
        ],
    ),
    ItineraryTemplate(
        id="dinner-party-4h",
        name="Dinner Party (4 hours)",
        party_type="dinner",
        duration=4,
        description="An elegant dinner party template",
        is_default=True,
        template_data=[
            {
                "start_time": "00:00",
                "end_time": "00:30",
                "title": "Cocktail hour",
                "category": "arrival",
                "description": "Welcome drinks and appetizers",
            },
            {
                "start_time": "00:30",
                "end_time": "01:30",
                "title": "Dinner service",
                "category": "food",
                "description": "Main course and dining",
            },
            {
                "start_time": "01:30",
                "end_time": "02:30",
                "title": "Conversation & socializing",
                "category": "activity",
                "description": "Post-dinner conversation and activities",
            },
            {
                "start_time": "02:30",
                "end_time": "03:30",
                "title": "Dessert & coffee",
                "category": "food",
                "description": "Dessert service and coffee",
            },
            {
                "start_time": "03:30",
                "end_time": "04:00",
                "title": "Farewell",
                "category": "cleanup",
                "description": "Goodbyes and end of evening",
            },
        ],
    ),
]

DEFAULT_TODO_TEMPLATES = [
    TodoTemplate(
        id="birthday-party-basic",
        name="Birthday Party Essentials",
        party_type="birthday",
        guest_count_range="10-30",
        is_default=True,
        template_data=[
            {"title": "Set party date and send save-the-dates", "category": "planning",
             "priority": "high", "estimated_time": 60, "days_before_party": 28},
            {"title": "Create guest list and send invitations", "category": "planning",
             "priority": "high", "estimated_time": 90, "days_before_party": 21},
            {"title": "Book venue or prepare space", "category": "booking",
             "priority": "high", "estimated_time": 120, "days_before_party": 21},
            {"title": "Plan menu and order cake", "category": "planning",
             "priority": "high", "estimated_time": 90, "estimated_cost": 150, "days_before_party": 14},
            {"title": "Shop for decorations and party supplies", "category": "shopping",
             "priority": "medium", "estimated_time": 120, "estimated_cost": 80, "days_before_party": 7},
            {"title": "Confirm RSVPs and finalize headcount", "category": "coordination",
             "priority": "high", "estimated_time": 30, "days_before_party": 7},
            {"title": "Shop for food and beverages", "category": "shopping",
             "priority": "high", "estimated_time": 90, "estimated_cost": 200, "days_before_party": 2},
            {"title": "Prepare food that can be made ahead", "category": "preparation",
             "priority": "medium", "estimated_time": 180, "days_before_party": 1},
            {"title": "Set up decorations and party space", "category": "preparation",
             "priority": "high", "estimated_time": 120, "days_before_party": 0},
            {"title": "Prepare fresh food and set up serving areas", "category": "preparation",
             "priority": "critical", "estimated_time": 90, "days_before_party": 0},
        ],
    ),
    TodoTemplate(
        id="dinner-party-elegant",
        name="Elegant Dinner Party",
        party_type="dinner",
        guest_count_range="6-12",
        is_default=True,
        template_data=[
            {"title": "Plan menu and wine pairings", "category": "planning",
             "priority": "high", "estimated_time": 120, "days_before_party": 14},
            {"title": "Send elegant invitations", "category": "coordination",
             "priority": "high", "estimated_time": 60, "days_before_party": 14},
            {"title": "Shop for special ingredients and wines", "category": "shopping",
             "priority": "high", "estimated_time": 90, "estimated_cost": 300, "days_before_party": 3},
            {"title": "Prepare table settings and ambiance", "category": "preparation",
             "priority": "medium", "estimated_time": 60, "days_before_party": 1},
            {"title": "Prep appetizers and desserts", "category": "preparation",
             "priority": "high", "estimated_time": 150, "days_before_party": 1},
            {"title": "Final cooking and presentation", "category": "preparation",
             "priority": "critical", "estimated_time": 180, "days_before_party": 0},
        ],
    ),
]
