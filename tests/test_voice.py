"""Tests for weight extraction from transcripts."""

from __future__ import annotations

import pytest

from paliers.tracking.models import NoWeightDetectedError, SpeechCaptureFailedError
from paliers.tracking.voice import TextCapture, parse_weight


class TestParseWeight:
    """Tests for parse_weight function."""

    def test_comma_decimal(self) -> None:
        assert parse_weight("80,5 kg") == pytest.approx(80.5)

    def test_dot_decimal(self) -> None:
        assert parse_weight("je pèse 79.2 ce matin") == pytest.approx(79.2)

    def test_integer(self) -> None:
        assert parse_weight("81 kilos") == 81.0

    def test_first_numeral_wins(self) -> None:
        assert parse_weight("78,4 puis 77") == pytest.approx(78.4)

    def test_spelled_out_number_is_not_detected(self) -> None:
        """Words are not digits."""
        with pytest.raises(NoWeightDetectedError):
            parse_weight("quatre vingt virgule cinq")

    def test_empty_transcript(self) -> None:
        with pytest.raises(NoWeightDetectedError):
            parse_weight("")


class TestTextCapture:
    """Tests for TextCapture."""

    def test_returns_transcript(self) -> None:
        assert TextCapture("80,5").start_capture() == "80,5"

    def test_blank_transcript_fails(self) -> None:
        with pytest.raises(SpeechCaptureFailedError):
            TextCapture("   ").start_capture()
