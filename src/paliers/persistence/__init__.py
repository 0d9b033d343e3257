"""Persistence of the application state."""

from __future__ import annotations

from paliers.persistence.codec import deserialize, serialize
from paliers.persistence.store import StateStore, export_to, import_from

__all__ = [
    "StateStore",
    "deserialize",
    "export_to",
    "import_from",
    "serialize",
]
