"""
Offline TTS speech sink backed by pyttsx3.

- No overlapping speech (single worker thread + FIFO queue)
- enqueue() never blocks the frame loop; phrases are dropped when the
  queue is full
- stop_all() drops pending phrases and interrupts the current one; a phrase
  enqueued before the stop is never spoken, even if already dequeued
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import pyttsx3


@dataclass(frozen=True)
class TtsConfig:
    queue_maxsize: int = 30         # prevent unbounded memory growth
    rate: Optional[int] = None      # words per minute; None = keep default
    volume: Optional[float] = None  # 0.0..1.0; None = keep default
    voice_name_contains: Optional[str] = None


class Pyttsx3Speech:
    """Speech sink speaking queued phrases in order on a worker thread."""

    def __init__(self, config: Optional[TtsConfig] = None) -> None:
        self.config = config or TtsConfig()

        self._q: "queue.Queue[Tuple[int, str]]" = queue.Queue(maxsize=self.config.queue_maxsize)
        self._shutdown = threading.Event()
        self._engine_lock = threading.Lock()
        self._generation = 0

        self._engine = pyttsx3.init()
        self._apply_config()

        self._worker = threading.Thread(target=self._run_worker, name="SpeechWorker", daemon=True)
        self._worker.start()

    def enqueue(self, text: str) -> None:
        text = (text or "").strip()
        if not text or self._shutdown.is_set():
            return
        try:
            self._q.put_nowait((self._generation, text))
        except queue.Full:
            logging.warning(f"Speech queue full, dropping: {text}")

    def stop_all(self) -> None:
        """Drop queued phrases and interrupt the phrase being spoken."""
        self._generation += 1
        self._clear_queue()
        try:
            self._engine.stop()
        except Exception as e:
            logging.warning(f"TTS stop failed: {e}")

    def drain(self, timeout: float = 5.0) -> bool:
        """Wait until every queued phrase was handled. Returns False on timeout."""
        deadline = time.monotonic() + timeout
        while self._q.unfinished_tasks:
            if time.monotonic() >= deadline:
                return False
            time.sleep(0.01)
        return True

    def shutdown(self) -> None:
        """Stop worker and release resources."""
        if self._shutdown.is_set():
            return
        self._shutdown.set()
        self.stop_all()
        self._worker.join(timeout=2.0)

    def _clear_queue(self) -> None:
        try:
            while True:
                self._q.get_nowait()
                self._q.task_done()
        except queue.Empty:
            return

    def _apply_config(self) -> None:
        with self._engine_lock:
            if self.config.rate is not None:
                self._engine.setProperty("rate", int(self.config.rate))
            if self.config.volume is not None:
                self._engine.setProperty("volume", max(0.0, min(1.0, float(self.config.volume))))

            if self.config.voice_name_contains:
                want = self.config.voice_name_contains.lower()
                for voice in self._engine.getProperty("voices") or []:
                    name = (getattr(voice, "name", "") or "").lower()
                    vid = getattr(voice, "id", None)
                    if want in name and vid:
                        self._engine.setProperty("voice", vid)
                        logging.info(f"Using TTS voice: {vid}")
                        break
                else:
                    logging.warning(f"No TTS voice matching {want!r}; using default voice")

    def _run_worker(self) -> None:
        while not self._shutdown.is_set():
            try:
                generation, text = self._q.get(timeout=0.2)
            except queue.Empty:
                continue

            try:
                with self._engine_lock:
                    if generation != self._generation or self._shutdown.is_set():
                        continue
                    self._engine.say(text)
                    self._engine.runAndWait()
            except Exception as e:
                logging.error(f"TTS speak failed: {e}")
            finally:
                self._q.task_done()
