"""Declarative schema: tables, indexes and seed data.

Every statement is idempotent (``IF NOT EXISTS``) so the whole list can be
applied on each startup, against an empty database or a restored snapshot.
Changes to existing tables go through ``app.core.migrations`` instead.
"""

from app.core.database import Database, Statement

SCHEMA_STATEMENTS = [
    # Party configurations
    """
    CREATE TABLE IF NOT EXISTS parties (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        date TEXT,
        guest_count INTEGER DEFAULT 0,
        party_type TEXT DEFAULT 'mixed',
        duration INTEGER DEFAULT 3,
        theme TEXT,
        notes TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    # Guest management
    """
    CREATE TABLE IF NOT EXISTS guests (
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
    # Timeline tasks
    """
    CREATE TABLE IF NOT EXISTS timeline_tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        party_id INTEGER NOT NULL,
        task TEXT NOT NULL,
        time_frame TEXT NOT NULL,
        category TEXT NOT NULL,
        completed BOOLEAN DEFAULT FALSE,
        is_custom BOOLEAN DEFAULT TRUE,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (party_id) REFERENCES parties (id) ON DELETE CASCADE
    )
    """,
    # Calculation history
    """
    CREATE TABLE IF NOT EXISTS pizza_calculations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        party_id INTEGER NOT NULL,
        guest_count INTEGER NOT NULL,
        pizzas_needed INTEGER NOT NULL,
        calculated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (party_id) REFERENCES parties (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS beverage_calculations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        party_id INTEGER NOT NULL,
        guest_count INTEGER NOT NULL,
        duration INTEGER NOT NULL,
        party_type TEXT NOT NULL,
        include_alcohol BOOLEAN NOT NULL,
        water_bottles INTEGER,
        soft_drinks INTEGER,
        beer_bottles INTEGER,
        wine_bottles INTEGER,
        cocktail_servings INTEGER,
        calculated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (party_id) REFERENCES parties (id) ON DELETE CASCADE
    )
    """,
    # User preferences
    """
    CREATE TABLE IF NOT EXISTS user_preferences (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        key TEXT UNIQUE NOT NULL,
        value TEXT,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    # Party itinerary items; preparations is a JSON array of strings
    """
    CREATE TABLE IF NOT EXISTS itinerary_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        party_id INTEGER NOT NULL,
        start_time TEXT NOT NULL,
        end_time TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        category TEXT NOT NULL,
        location TEXT,
        responsible TEXT,
        preparations TEXT,
        notes TEXT,
        completed BOOLEAN DEFAULT FALSE,
        order_index INTEGER,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (party_id) REFERENCES parties (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS itinerary_templates (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        party_type TEXT,
        duration INTEGER,
        description TEXT,
        template_data TEXT,
        is_default BOOLEAN DEFAULT FALSE,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    # Todo items and their children
    """
    CREATE TABLE IF NOT EXISTS todo_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        party_id INTEGER NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        category TEXT NOT NULL,
        priority TEXT DEFAULT 'medium',
        due_date TEXT,
        estimated_time INTEGER,
        completed BOOLEAN DEFAULT FALSE,
        assigned_to TEXT,
        location TEXT,
        estimated_cost REAL,
        actual_cost REAL,
        notes TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        completed_at DATETIME,
        FOREIGN KEY (party_id) REFERENCES parties (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS todo_dependencies (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        todo_id INTEGER NOT NULL,
        depends_on_id INTEGER NOT NULL,
        FOREIGN KEY (todo_id) REFERENCES todo_items (id) ON DELETE CASCADE,
        FOREIGN KEY (depends_on_id) REFERENCES todo_items (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS todo_subtasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        todo_id INTEGER NOT NULL,
        title TEXT NOT NULL,
        completed BOOLEAN DEFAULT FALSE,
        order_index INTEGER,
        FOREIGN KEY (todo_id) REFERENCES todo_items (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS todo_attachments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        todo_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        type TEXT NOT NULL,
        url TEXT NOT NULL,
        FOREIGN KEY (todo_id) REFERENCES todo_items (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS todo_templates (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        party_type TEXT,
        guest_count_range TEXT,
        template_data TEXT,
        is_default BOOLEAN DEFAULT FALSE,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    # Indexes
    "CREATE INDEX IF NOT EXISTS idx_guests_party_id ON guests(party_id)",
    "CREATE INDEX IF NOT EXISTS idx_timeline_tasks_party_id ON timeline_tasks(party_id)",
    "CREATE INDEX IF NOT EXISTS idx_pizza_calculations_party_id ON pizza_calculations(party_id)",
    "CREATE INDEX IF NOT EXISTS idx_beverage_calculations_party_id ON beverage_calculations(party_id)",
    "CREATE INDEX IF NOT EXISTS idx_itinerary_items_party_id ON itinerary_items(party_id)",
    "CREATE INDEX IF NOT EXISTS idx_todo_items_party_id ON todo_items(party_id)",
    "CREATE INDEX IF NOT EXISTS idx_todo_dependencies_todo_id ON todo_dependencies(todo_id)",
    "CREATE INDEX IF NOT EXISTS idx_todo_subtasks_todo_id ON todo_subtasks(todo_id)",
    "CREATE INDEX IF NOT EXISTS idx_todo_attachments_todo_id ON todo_attachments(todo_id)",
]

# Ordered buckets; timeline tasks sort by their position in this list
TIME_FRAMES = [
    "4-6 weeks before",
    "2-3 weeks before",
    "1 week before",
    "2-3 days before",
    "Day before",
    "Day of party",
]

DEFAULT_TIMELINE_TASKS = [
    ("Set party date and theme", "4-6 weeks before", "planning"),
    ("Create guest list", "4-6 weeks before", "planning"),
    ("Book venue (if needed)", "4-6 weeks before", "planning"),
    ("Send invitations", "2-3 weeks before", "planning"),
    ("Plan menu and drinks", "2-3 weeks before", "planning"),
    ("Order special items/decorations", "2-3 weeks before", "shopping"),
    ("Confirm RSVPs", "1 week before", "planning"),
    ("Finalize headcount", "1 week before", "planning"),
    ("Create shopping list", "1 week before", "planning"),
    ("Clean and prep space", "1 week before", "preparation"),
    ("Shop for non-perishables", "2-3 days before", "shopping"),
    ("Prep decorations", "2-3 days before", "preparation"),
    ("Prepare make-ahead dishes", "2-3 days before", "preparation"),
    ("Shop for perishables", "Day before", "shopping"),
    ("Prep food that can be done ahead", "Day before", "preparation"),
    ("Set up decorations", "Day before", "setup"),
    ("Chill beverages", "Day before", "preparation"),
    ("Final food preparation", "Day of party", "day-of"),
    ("Set up serving areas", "Day of party", "day-of"),
    ("Set up music/entertainment", "Day of party", "day-of"),
    ("Final cleanup and setup", "Day of party", "day-of"),
]


def user_table_names(db: Database) -> set[str]:
    rows = db.query(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
    )
    return {row["name"] for row in rows}


def apply_schema(db: Database) -> None:
    """Create any missing table or index in a single transaction."""
    db.transaction([Statement(sql) for sql in SCHEMA_STATEMENTS])
