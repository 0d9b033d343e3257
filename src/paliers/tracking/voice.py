"""Weight extraction from speech transcripts.

The speech engine itself is outside this package. It is reached through
the SpeechCapture protocol, which yields exactly one transcript or raises
SpeechCaptureFailedError. Only the transcript text reaches the tracker.
"""

from __future__ import annotations

import re
from typing import Optional, Protocol

from rich.console import Console
from rich.prompt import Prompt

from paliers.tracking.models import NoWeightDetectedError, SpeechCaptureFailedError

# First integer or decimal numeral; "." and "," are both decimal separators
WEIGHT_PATTERN = re.compile(r"\d+([.,]\d+)?")


def parse_weight(transcript: str) -> float:
    """
    Extract the first numeral from a transcript as a weight.

    Example:
        >>> parse_weight("80,5 kg")
        80.5
        >>> parse_weight("je pèse 79.2 ce matin")
        79.2

    Raises:
        NoWeightDetectedError: if the transcript contains no digits
    """
    match = WEIGHT_PATTERN.search(transcript or "")
    if match is None:
        raise NoWeightDetectedError(transcript)
    return float(match.group(0).replace(",", "."))


class SpeechCapture(Protocol):
    """Something that can capture one spoken transcript."""

    def start_capture(self) -> str:
        """Return one transcript, or raise SpeechCaptureFailedError."""
        ...


class TextCapture:
    """Capture that returns a transcript that is already known."""

    def __init__(self, transcript: str):
        self.transcript = transcript

    def start_capture(self) -> str:
        if not self.transcript or not self.transcript.strip():
            raise SpeechCaptureFailedError("no-speech")
        return self.transcript


class PromptCapture:
    """Capture that reads the transcript from the terminal."""

    def __init__(self, console: Optional[Console] = None, locale: str = "fr-FR"):
        self.console = console or Console()
        self.locale = locale

    def start_capture(self) -> str:
        try:
            transcript = Prompt.ask(
                f"[cyan]Dites votre poids[/cyan] ({self.locale})", console=self.console
            )
        except (EOFError, KeyboardInterrupt) as e:
            raise SpeechCaptureFailedError("aborted") from e
        if not transcript.strip():
            raise SpeechCaptureFailedError("no-speech")
        return transcript
