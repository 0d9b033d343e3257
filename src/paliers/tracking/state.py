"""The persisted application state."""

from __future__ import annotations

from dataclasses import dataclass, field

from paliers.tracking.models import MilestoneState, TrackerConfig
from paliers.tracking.weight_log import WeightLog


@dataclass
class AppState:
    """Configuration, milestone counter and weight log, saved as one unit."""

    config: TrackerConfig = field(default_factory=TrackerConfig)
    milestones: MilestoneState = field(default_factory=MilestoneState)
    log: WeightLog = field(default_factory=WeightLog)

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured
