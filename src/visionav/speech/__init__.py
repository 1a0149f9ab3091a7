"""
Speech output sinks.

The pyttsx3-backed sink lives in `speech.tts` and is imported on demand, so
headless runs do not need a TTS driver.
"""

from .base import LoggingSpeech, SpeechSink

__all__ = ["LoggingSpeech", "SpeechSink"]
