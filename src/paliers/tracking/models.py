"""Data models for weight tracking and palier milestones."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


VALID_THEMES = ("light", "dark")
DEFAULT_PALIER_STEP = 5.0


# Custom exceptions


class PaliersError(Exception):
    """Base exception for paliers errors."""

    pass


class InvalidEntryError(PaliersError):
    """Raised when a weight entry has a missing date or a non-positive weight."""

    pass


class NoWeightDetectedError(PaliersError):
    """Raised when a transcript contains no numeral."""

    def __init__(self, transcript: str):
        super().__init__(f"No weight detected in transcript: {transcript!r}")
        self.transcript = transcript


class SpeechCaptureFailedError(PaliersError):
    """Raised when the speech capture collaborator reports an error."""

    pass


class InvalidPayloadError(PaliersError):
    """Raised when a saved or imported payload is not a valid app state."""

    pass


class InvalidSetupError(PaliersError):
    """Raised when setup values are missing or out of range."""

    pass


class SetupLockedError(PaliersError):
    """Raised when setup is saved again without unlocking it first."""

    pass


class NotConfiguredError(PaliersError):
    """Raised when weights are logged before setup."""

    pass


@dataclass(frozen=True)
class Entry:
    """A single weight observation for one day."""

    date: date
    weight: float


@dataclass
class TrackerConfig:
    """Tracker configuration captured by setup."""

    start_date: Optional[date] = None
    start_weight: Optional[float] = None
    goal_weight: Optional[float] = None
    palier_step: float = DEFAULT_PALIER_STEP
    theme: str = "light"

    def __post_init__(self) -> None:
        if self.theme not in VALID_THEMES:
            raise ValueError(f"theme must be one of {VALID_THEMES}, got '{self.theme}'")

    @property
    def is_configured(self) -> bool:
        return bool(self.start_weight) and bool(self.goal_weight)


@dataclass
class MilestoneState:
    """Persisted palier counter."""

    palier_level: int = 0


@dataclass
class MilestoneOutcome:
    """Result of evaluating one weight observation against the paliers."""

    level_delta: int = 0
    celebrate: bool = False


@dataclass
class NextTarget:
    """Next lower palier below the latest weight."""

    target_weight: float
    remaining: float
    reached: bool = False


@dataclass
class WeightDelta:
    """Difference between start and latest weight (positive = lost)."""

    lost: float

    @property
    def direction(self) -> str:
        if self.lost > 0:
            return "lost"
        if self.lost < 0:
            return "gained"
        return "unchanged"
