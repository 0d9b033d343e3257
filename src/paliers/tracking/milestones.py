"""Palier (weight-loss milestone) accounting.

Paliers are fixed thresholds at every multiple of the palier step, in
absolute weight: with a 5 kg step they sit at 85, 80, 75, ... A weight
observation crosses paliers when it is lower than the observation that
preceded it and lands below one or more of those multiples:

    crossed = floor(previous / step) - floor(new / step)

The palier level is the running total of crossings. It only ever grows:
gaining weight back does not undo it, and losing the same kilos again
counts again, because each observation is compared with the one just
before it rather than with the historical minimum.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from paliers.tracking.models import (
    MilestoneOutcome,
    MilestoneState,
    NextTarget,
    WeightDelta,
)

# How long the celebration cue stays on screen. Never persisted.
CELEBRATION_SECONDS = 3.0


def crossed_paliers(previous_weight: float, new_weight: float, palier_step: float) -> int:
    """
    Count palier thresholds crossed going from previous_weight to new_weight.

    Returns 0 for a non-positive step or when the weight did not decrease.

    Example:
        >>> crossed_paliers(82.0, 79.5, 5)  # crosses 80
        1
        >>> crossed_paliers(86.0, 74.0, 5)  # crosses 85, 80, 75
        3
    """
    if palier_step <= 0 or new_weight >= previous_weight:
        return 0
    crossed = math.floor(previous_weight / palier_step) - math.floor(new_weight / palier_step)
    return max(crossed, 0)


def next_target(latest_weight: Optional[float], palier_step: float) -> Optional[NextTarget]:
    """
    Find the next palier below the latest weight.

    A weight sitting exactly on a palier has already met it, so the one
    below is returned instead.

    Example:
        >>> next_target(78.2, 5)
        NextTarget(target_weight=75.0, remaining=3.2..., reached=False)
        >>> next_target(80.0, 5).target_weight
        75.0
    """
    if latest_weight is None or palier_step <= 0:
        return None

    target = math.floor(latest_weight / palier_step) * palier_step
    if latest_weight == target:
        target -= palier_step

    remaining = latest_weight - target
    # Only float rounding of floor(w / s) * s can put the target at or above w
    if remaining <= 0:
        return NextTarget(target_weight=float(target), remaining=0.0, reached=True)
    return NextTarget(target_weight=float(target), remaining=remaining)


def weight_delta(start_weight: float, latest_weight: float) -> WeightDelta:
    """Weight lost since start (negative when weight was gained)."""
    return WeightDelta(lost=start_weight - latest_weight)


@dataclass
class MilestoneTracker:
    """
    Evaluates weight observations against the paliers and keeps the level.

    Attributes:
        palier_step: Spacing between paliers (kg). Non-positive disables paliers.
        state: Persisted milestone counter, updated in place
    """

    palier_step: float
    state: MilestoneState

    @property
    def palier_level(self) -> int:
        return self.state.palier_level

    def evaluate(self, previous_weight: Optional[float], new_weight: float) -> MilestoneOutcome:
        """
        Evaluate one observation against the one that preceded it.

        Args:
            previous_weight: Latest weight before this observation (None if first)
            new_weight: The weight just recorded

        Returns:
            MilestoneOutcome with the number of paliers crossed and whether to
            celebrate
        """
        if previous_weight is None:
            return MilestoneOutcome()

        crossed = crossed_paliers(previous_weight, new_weight, self.palier_step)
        if crossed <= 0:
            return MilestoneOutcome()

        self.state.palier_level += crossed
        return MilestoneOutcome(level_delta=crossed, celebrate=True)

    def next_target(self, latest_weight: Optional[float]) -> Optional[NextTarget]:
        return next_target(latest_weight, self.palier_step)
