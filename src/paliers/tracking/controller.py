"""Tracker: owns the AppState, applies mutations and persists them.

Every mutating method validates its input, updates the state in memory and
then saves it through the StateStore. A rejected operation raises before
anything is changed, so the saved state is never partially updated.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Union

from paliers.chart.projector import DEFAULT_DATE_FORMAT, DEFAULT_PADDING, ChartProjection, project
from paliers.persistence.codec import deserialize
from paliers.persistence.store import StateStore, export_to, import_from
from paliers.tracking.milestones import MilestoneTracker
from paliers.tracking.models import (
    DEFAULT_PALIER_STEP,
    VALID_THEMES,
    Entry,
    InvalidSetupError,
    MilestoneOutcome,
    NotConfiguredError,
    SetupLockedError,
    SpeechCaptureFailedError,
)
from paliers.tracking.state import AppState
from paliers.tracking.voice import SpeechCapture, parse_weight
from paliers.tracking.weight_log import coerce_date

logger = logging.getLogger(__name__)


@dataclass
class RecordResult:
    """Outcome of recording one weight observation."""

    entry: Entry
    previous_weight: Optional[float]
    outcome: MilestoneOutcome
    palier_level: int


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and value > 0 and math.isfinite(value)


def _parse_setup_date(value: Union[date, str, None]) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidSetupError("Start date is required")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidSetupError(f"Invalid start date '{value}' (expected YYYY-MM-DD)") from e


class Tracker:
    """Single controller for the application state."""

    def __init__(
        self,
        store: StateStore,
        state: Optional[AppState] = None,
        default_palier_step: float = DEFAULT_PALIER_STEP,
    ):
        self.store = store
        self.default_palier_step = default_palier_step
        self._state = state if state is not None else AppState()
        self._setup_unlocked = not self._state.is_configured
        self._capturing = False

    @classmethod
    def open(cls, store: StateStore, default_palier_step: float = DEFAULT_PALIER_STEP) -> "Tracker":
        """Create a tracker from the saved state."""
        return cls(store, store.load(), default_palier_step=default_palier_step)

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def setup_locked(self) -> bool:
        return not self._setup_unlocked

    def _persist(self) -> None:
        self.store.save(self._state)

    def _milestones(self) -> MilestoneTracker:
        return MilestoneTracker(self._state.config.palier_step, self._state.milestones)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def unlock_setup(self) -> None:
        """Allow the next setup() call to change an existing configuration."""
        self._setup_unlocked = True

    def setup(
        self,
        start_date: Union[date, str, None],
        start_weight: Optional[float],
        goal_weight: Optional[float],
        palier_step: Optional[float] = None,
    ) -> AppState:
        """
        Save the tracker configuration.

        The start weight is also logged at the start date unless an entry
        already exists on that day.

        Raises:
            SetupLockedError: if already configured and not unlocked
            InvalidSetupError: if a value is missing or not positive
        """
        if not self._setup_unlocked:
            raise SetupLockedError("Setup is locked; unlock it before editing")

        parsed_date = _parse_setup_date(start_date)
        if not _is_positive(start_weight):
            raise InvalidSetupError(f"Start weight must be positive, got {start_weight}")
        if not _is_positive(goal_weight):
            raise InvalidSetupError(f"Goal weight must be positive, got {goal_weight}")
        if palier_step is None:
            palier_step = self.default_palier_step
        if not _is_positive(palier_step):
            raise InvalidSetupError(f"Palier step must be positive, got {palier_step}")

        config = self._state.config
        config.start_date = parsed_date
        config.start_weight = float(start_weight)
        config.goal_weight = float(goal_weight)
        config.palier_step = float(palier_step)

        if self._state.log.get(parsed_date) is None:
            self._state.log.upsert(parsed_date, float(start_weight))

        self._setup_unlocked = False
        self._persist()
        logger.info(
            "Setup saved: start %.1f kg on %s, goal %.1f kg, palier step %.1f kg",
            config.start_weight,
            parsed_date,
            config.goal_weight,
            config.palier_step,
        )
        return self._state

    def set_palier_step(self, palier_step: float) -> None:
        """Change the palier spacing. The palier level is kept as is."""
        if not _is_positive(palier_step):
            raise InvalidSetupError(f"Palier step must be positive, got {palier_step}")
        self._state.config.palier_step = float(palier_step)
        self._persist()
        logger.info("Palier step set to %.1f kg", palier_step)

    def set_theme(self, theme: str) -> None:
        if theme not in VALID_THEMES:
            raise InvalidSetupError(f"theme must be one of {VALID_THEMES}, got '{theme}'")
        self._state.config.theme = theme
        self._persist()

    # ------------------------------------------------------------------
    # Weight entries
    # ------------------------------------------------------------------

    def record_weight(self, entry_date: Union[date, str, None], weight: float) -> RecordResult:
        """
        Log a weight for a day and evaluate the paliers.

        The milestone baseline is the latest entry before this write, even
        when the new entry is dated earlier than it.

        Raises:
            NotConfiguredError: if setup has not been saved yet
            InvalidEntryError: if the date is missing or the weight not positive
        """
        if not self._state.is_configured:
            raise NotConfiguredError("Save the setup before logging weights")

        measured_at = coerce_date(entry_date)
        previous_weight = self._state.log.upsert(measured_at, weight)
        outcome = self._milestones().evaluate(previous_weight, float(weight))
        self._persist()

        if outcome.celebrate:
            logger.info(
                "Crossed %d palier(s), level now %d",
                outcome.level_delta,
                self._state.milestones.palier_level,
            )
        logger.info("Logged %.1f kg on %s", weight, measured_at)

        return RecordResult(
            entry=Entry(date=measured_at, weight=float(weight)),
            previous_weight=previous_weight,
            outcome=outcome,
            palier_level=self._state.milestones.palier_level,
        )

    def record_transcript(self, transcript: str, entry_date: Union[date, str, None]) -> RecordResult:
        """Parse a weight out of a transcript and log it."""
        weight = parse_weight(transcript)
        return self.record_weight(entry_date, weight)

    def record_from_capture(
        self, capture: SpeechCapture, entry_date: Union[date, str, None]
    ) -> RecordResult:
        """
        Run one speech capture and log the weight it contains.

        Raises:
            SpeechCaptureFailedError: if a capture is already running or the
                capture itself failed
            NoWeightDetectedError: if the transcript contains no numeral
        """
        if self._capturing:
            raise SpeechCaptureFailedError("A capture is already in progress")

        self._capturing = True
        try:
            transcript = capture.start_capture()
        finally:
            self._capturing = False

        logger.info("Transcript received: %r", transcript)
        return self.record_transcript(transcript, entry_date)

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def replace_state(self, new_state: AppState) -> None:
        """Swap in a complete state (import) and save it."""
        self._state = new_state
        self._setup_unlocked = not new_state.is_configured
        self._persist()
        logger.info(
            "State replaced: %d entries, palier level %d",
            len(new_state.log),
            new_state.milestones.palier_level,
        )

    def import_payload(self, payload: Union[bytes, str]) -> AppState:
        """Decode a backup payload and replace the state with it."""
        self.replace_state(deserialize(payload))
        return self._state

    def import_file(self, path: Path) -> AppState:
        self.replace_state(import_from(path))
        return self._state

    def export_file(self, path: Path) -> Path:
        return export_to(self._state, path)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def chart(
        self,
        padding: float = DEFAULT_PADDING,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> Optional[ChartProjection]:
        config = self._state.config
        return project(
            self._state.log.all(),
            goal_weight=config.goal_weight,
            palier_step=config.palier_step,
            padding=padding,
            date_format=date_format,
        )
