"""SQLite database schema definitions."""

# Key under which the application state is saved
STATE_KEY = "weightTrackerData"

SCHEMA_SQL = """
-- Saved application state (one serialized payload per key)
CREATE TABLE IF NOT EXISTS app_state (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    saved_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
