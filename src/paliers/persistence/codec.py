"""Serialization of the application state for save, load, export and import.

The encoding is UTF-8 JSON with a fixed key order, so the same state always
produces the same bytes and an exported backup can be used as a local save
and vice versa:

    {
      "startDate": "2024-01-01" | null,
      "startWeight": 85.0 | null,
      "goalWeight": 70.0 | null,
      "palierStep": 5.0,
      "palierLevel": 2,
      "theme": "light" | "dark",
      "entries": [{"date": "2024-01-01", "weight": 85.0}, ...]
    }

Only "entries" is required when decoding; the other fields fall back to
their defaults.
"""

from __future__ import annotations

import json
import math
from datetime import date
from typing import Any, Optional, Union

from paliers.tracking.models import (
    DEFAULT_PALIER_STEP,
    VALID_THEMES,
    Entry,
    InvalidPayloadError,
    MilestoneState,
    TrackerConfig,
)
from paliers.tracking.state import AppState
from paliers.tracking.weight_log import WeightLog


def state_to_dict(state: AppState) -> dict[str, Any]:
    """Convert an AppState to its JSON-serializable payload dict."""
    config = state.config
    return {
        "startDate": config.start_date.isoformat() if config.start_date else None,
        "startWeight": config.start_weight,
        "goalWeight": config.goal_weight,
        "palierStep": config.palier_step,
        "palierLevel": state.milestones.palier_level,
        "theme": config.theme,
        "entries": [
            {"date": e.date.isoformat(), "weight": e.weight} for e in state.log
        ],
    }


def serialize(state: AppState) -> bytes:
    """Encode the whole state as deterministic UTF-8 JSON."""
    return json.dumps(state_to_dict(state), ensure_ascii=False).encode("utf-8")


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value)


def _parse_date(value: Any, field_name: str) -> date:
    if not isinstance(value, str) or not value:
        raise InvalidPayloadError(f"{field_name} must be a YYYY-MM-DD string")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidPayloadError(f"{field_name} is not a valid date: '{value}'") from e


def _parse_optional_weight(value: Any, field_name: str) -> Optional[float]:
    if value is None:
        return None
    if not _is_number(value) or not value > 0:
        raise InvalidPayloadError(f"{field_name} must be a positive number or null")
    return float(value)


def _parse_entries(raw_entries: Any) -> list[Entry]:
    if not isinstance(raw_entries, list):
        raise InvalidPayloadError("entries must be a list")

    entries = []
    for i, raw in enumerate(raw_entries):
        if not isinstance(raw, dict):
            raise InvalidPayloadError(f"entries[{i}] must be an object")
        entry_date = _parse_date(raw.get("date"), f"entries[{i}].date")
        weight = raw.get("weight")
        if not _is_number(weight) or not weight > 0:
            raise InvalidPayloadError(f"entries[{i}].weight must be a positive number")
        entries.append(Entry(date=entry_date, weight=float(weight)))
    return entries


def dict_to_state(data: Any) -> AppState:
    """
    Build an AppState from a decoded payload dict.

    Raises:
        InvalidPayloadError: if the payload is not an object, has no
            "entries" field, or any field is structurally invalid
    """
    if not isinstance(data, dict):
        raise InvalidPayloadError("Payload must be a JSON object")
    if "entries" not in data:
        raise InvalidPayloadError("Payload has no 'entries' field")

    entries = _parse_entries(data["entries"])

    start_date = None
    if data.get("startDate") is not None:
        start_date = _parse_date(data["startDate"], "startDate")

    palier_step = data.get("palierStep", DEFAULT_PALIER_STEP)
    if palier_step is None:
        palier_step = DEFAULT_PALIER_STEP
    if not _is_number(palier_step) or not palier_step > 0:
        raise InvalidPayloadError("palierStep must be a positive number")

    palier_level = data.get("palierLevel", 0)
    if palier_level is None:
        palier_level = 0
    if not isinstance(palier_level, int) or isinstance(palier_level, bool) or palier_level < 0:
        raise InvalidPayloadError("palierLevel must be a non-negative integer")

    theme = data.get("theme") or "light"
    if theme not in VALID_THEMES:
        raise InvalidPayloadError(f"theme must be one of {VALID_THEMES}, got '{theme}'")

    config = TrackerConfig(
        start_date=start_date,
        start_weight=_parse_optional_weight(data.get("startWeight"), "startWeight"),
        goal_weight=_parse_optional_weight(data.get("goalWeight"), "goalWeight"),
        palier_step=float(palier_step),
        theme=theme,
    )

    return AppState(
        config=config,
        milestones=MilestoneState(palier_level=palier_level),
        log=WeightLog(entries),
    )


def deserialize(payload: Union[bytes, str]) -> AppState:
    """
    Decode a payload produced by serialize() or an exported backup.

    Nothing is mutated on failure: the caller only swaps its state once a
    complete AppState has been built.

    Raises:
        InvalidPayloadError: if the payload is not valid JSON or not a valid state
    """
    try:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        data = json.loads(payload)
    except (UnicodeDecodeError, ValueError) as e:
        raise InvalidPayloadError(f"Payload is not valid JSON: {e}") from e

    return dict_to_state(data)
