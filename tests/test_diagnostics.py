"""Tests for the progress report."""

from __future__ import annotations

from datetime import date

import pytest

from paliers.tracking.diagnostics import (
    format_next_palier,
    format_progress_report,
    generate_progress_report,
)
from paliers.tracking.models import NextTarget
from paliers.tracking.state import AppState


class TestProgressReport:
    """Tests for generate_progress_report and its formatting."""

    def test_empty_state_has_no_report(self) -> None:
        assert generate_progress_report(AppState()) is None

    def test_report_values(self, tracker) -> None:
        tracker.record_weight(date(2024, 1, 20), 78.2)
        report = generate_progress_report(tracker.state)

        assert report.current_weight == 78.2
        assert report.entry_count == 2
        assert report.delta.lost == pytest.approx(6.8)
        assert report.remaining_to_goal == pytest.approx(8.2)
        assert report.palier_level == 2
        assert report.next_palier.target_weight == 75.0
        assert report.next_palier.remaining == pytest.approx(3.2)

    def test_formatted_report(self, tracker) -> None:
        tracker.record_weight(date(2024, 1, 20), 78.2)
        text = format_progress_report(generate_progress_report(tracker.state))

        assert "78.2 kg" in text
        assert "6.8 kg perdus" in text
        assert "Prochain palier : 75.0 kg, encore 3.2 kg" in text
        assert "Paliers franchis : 2" in text

    def test_goal_reached(self, tracker) -> None:
        tracker.record_weight(date(2024, 3, 1), 69.5)
        text = format_progress_report(generate_progress_report(tracker.state))
        assert "70.0 kg atteint" in text

    def test_weight_gained(self, tracker) -> None:
        tracker.record_weight(date(2024, 1, 2), 86.0)
        text = format_progress_report(generate_progress_report(tracker.state))
        assert "1.0 kg pris" in text


class TestFormatNextPalier:
    """Tests for format_next_palier."""

    def test_disabled(self) -> None:
        assert format_next_palier(None) == "Paliers désactivés"

    def test_reached(self) -> None:
        text = format_next_palier(NextTarget(target_weight=75.0, remaining=0.0, reached=True))
        assert "atteint" in text
