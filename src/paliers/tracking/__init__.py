"""Weight tracking and palier milestone module.

Key components:
- WeightLog: one weight per day, kept in chronological order
- MilestoneTracker: counts paliers crossed at every multiple of the step
- Voice parsing: first numeral of a transcript, "," or "." as decimal mark
- Tracker: applies mutations to the AppState and saves it
"""

from __future__ import annotations

from paliers.tracking.milestones import MilestoneTracker, next_target, weight_delta
from paliers.tracking.models import (
    Entry,
    InvalidEntryError,
    InvalidPayloadError,
    InvalidSetupError,
    MilestoneOutcome,
    MilestoneState,
    NextTarget,
    NoWeightDetectedError,
    NotConfiguredError,
    PaliersError,
    SetupLockedError,
    SpeechCaptureFailedError,
    TrackerConfig,
    WeightDelta,
)
from paliers.tracking.state import AppState
from paliers.tracking.voice import parse_weight
from paliers.tracking.weight_log import WeightLog

__all__ = [
    "AppState",
    "Entry",
    "InvalidEntryError",
    "InvalidPayloadError",
    "InvalidSetupError",
    "MilestoneOutcome",
    "MilestoneState",
    "MilestoneTracker",
    "NextTarget",
    "NoWeightDetectedError",
    "NotConfiguredError",
    "PaliersError",
    "SetupLockedError",
    "SpeechCaptureFailedError",
    "TrackerConfig",
    "WeightDelta",
    "WeightLog",
    "next_target",
    "parse_weight",
    "weight_delta",
]
