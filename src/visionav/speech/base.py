"""
Speech output interface.

The scheduler only needs two operations: queue a phrase, and drop
everything queued or playing.
"""

from __future__ import annotations

import logging
from typing import List, Protocol


class SpeechSink(Protocol):
    def enqueue(self, text: str) -> None:
        """Queue text for speaking. Must not block."""
        ...

    def stop_all(self) -> None:
        """Stop the current utterance and drop pending ones."""
        ...


class LoggingSpeech:
    """Speech sink that logs instead of speaking (speech disabled / headless)."""

    def __init__(self) -> None:
        self.spoken: List[str] = []

    def enqueue(self, text: str) -> None:
        self.spoken.append(text)
        logging.info(f"[SAY] {text}")

    def stop_all(self) -> None:
        logging.info("[SAY] stop")

    def shutdown(self) -> None:
        pass
