"""Chronological, date-keyed weight log."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Iterator, Optional, Union

from paliers.tracking.models import Entry, InvalidEntryError


def coerce_date(value: Union[date, str, None]) -> date:
    """Accept a date or an ISO string; reject empty values."""
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidEntryError("Entry date is required")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidEntryError(f"Invalid entry date '{value}' (expected YYYY-MM-DD)") from e


@dataclass
class WeightLog:
    """
    Weight measurements sorted ascending by date, at most one per date.

    Writes for an existing date replace its weight. Building a log from raw
    entries applies the same rule, so for duplicated dates the last one wins.
    """

    entries: list[Entry] = field(default_factory=list)

    def __post_init__(self) -> None:
        by_date: dict[date, Entry] = {}
        for entry in self.entries:
            by_date[entry.date] = entry
        self.entries = sorted(by_date.values(), key=lambda e: e.date)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[date, float]]) -> "WeightLog":
        return cls([Entry(date=d, weight=w) for d, w in pairs])

    def upsert(self, entry_date: Union[date, str], weight: float) -> Optional[float]:
        """
        Insert or replace the weight for a date.

        Args:
            entry_date: Day of the measurement (date or YYYY-MM-DD)
            weight: Measured weight, must be positive

        Returns:
            Weight of the latest entry before this call (None if the log was
            empty). This is the baseline for palier crossing, not the old
            value at the same date.

        Raises:
            InvalidEntryError: if the date is missing or the weight is not positive
        """
        measured_at = coerce_date(entry_date)
        if weight is None or not weight > 0 or not math.isfinite(weight):
            raise InvalidEntryError(f"Weight must be positive, got {weight}")

        previous = self.latest()
        previous_weight = previous.weight if previous else None

        kept = [e for e in self.entries if e.date != measured_at]
        kept.append(Entry(date=measured_at, weight=float(weight)))
        kept.sort(key=lambda e: e.date)
        self.entries = kept

        return previous_weight

    def latest(self) -> Optional[Entry]:
        """Return the entry with the greatest date."""
        return self.entries[-1] if self.entries else None

    def all(self) -> list[Entry]:
        """Return the entries in chronological order."""
        return list(self.entries)

    def get(self, entry_date: date) -> Optional[Entry]:
        for entry in self.entries:
            if entry.date == entry_date:
                return entry
        return None

    def weights(self) -> list[float]:
        return [e.weight for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)
