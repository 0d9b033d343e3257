"""Local save slot and backup files for the application state."""

from __future__ import annotations

import logging
from pathlib import Path

from paliers.db.connection import DatabaseConnection
from paliers.db.schema import STATE_KEY
from paliers.persistence.codec import deserialize, serialize
from paliers.tracking.models import InvalidPayloadError
from paliers.tracking.state import AppState

logger = logging.getLogger(__name__)


class StateStore:
    """Saves and loads the whole AppState in the SQLite database."""

    def __init__(self, db: DatabaseConnection, key: str = STATE_KEY):
        self.db = db
        self.key = key

    def load(self) -> AppState:
        """
        Load the saved state, or a fresh unconfigured one if nothing is saved.

        Raises:
            InvalidPayloadError: if the saved payload is corrupt
        """
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT payload FROM app_state WHERE key = ?", (self.key,)
            ).fetchone()

        if row is None:
            logger.info("No saved state under '%s', starting fresh", self.key)
            return AppState()

        return deserialize(row["payload"])

    def save(self, state: AppState) -> None:
        """Replace the saved state with this one."""
        payload = serialize(state).decode("utf-8")
        with self.db.get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO app_state (key, payload, saved_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                (self.key, payload),
            )
        logger.info("Saved state (%d entries)", len(state.log))


def export_to(state: AppState, path: Path) -> Path:
    """Write a backup file with the same encoding as the local save."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(serialize(state))
    logger.info("Exported %d entries to %s", len(state.log), path)
    return path


def import_from(path: Path) -> AppState:
    """
    Read a backup file.

    Raises:
        InvalidPayloadError: if the file cannot be read or is not a valid state
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InvalidPayloadError(f"Cannot read backup file {path}: {e}") from e
    return deserialize(data)
