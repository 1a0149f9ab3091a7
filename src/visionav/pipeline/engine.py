"""
Pipeline engine for the visual assistance loop.

Frames are processed one at a time from a single ObservationSource:
gate -> detect -> schedule announcements. Rendering consumers (display
window, web API) read the scheduler's snapshot independently.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import cv2

from ..announce.scheduler import AnnouncementScheduler
from ..errors import ConfigurationError
from ..models.detection import Detection
from ..models.frame import FrameData
from ..models.live import Announcement
from ..observation.base import ObservationSource
from .overlay import draw_overlays, rotate_frame
from .stages.detect import DetectStage
from .stages.validity import FrameValidityGate, FrameVerdict

WINDOW_NAME = "Vision Assist Navigator"


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.

    Attributes:
        max_consecutive_failures: Max frame read failures before stopping.
        stats_log_interval: Seconds between status log messages.
        portrait_only: Skip frames that are not displayed in portrait.
        display: Enable cv2 display window.
    """
    max_consecutive_failures: int = 10
    stats_log_interval: float = 60.0
    portrait_only: bool = False
    display: bool = False


@dataclass
class PipelineStats:
    """Runtime statistics for the pipeline."""
    frame_count: int = 0
    blank_frames: int = 0
    low_variance_frames: int = 0
    skipped_frames: int = 0
    failed_frames: int = 0
    announcement_count: int = 0
    fps: float = 0.0
    start_time: float = field(default_factory=time.time)
    last_frame_ts: Optional[float] = None
    last_stats_log_time: float = field(default_factory=time.time)
    consecutive_failures: int = 0


@dataclass
class FrameResult:
    """Outcome of processing one frame."""
    verdict: Optional[FrameVerdict]
    detections: List[Detection] = field(default_factory=list)
    announcements: List[Announcement] = field(default_factory=list)
    skipped_reason: Optional[str] = None


class FpsMeter:
    """Frames-per-second over windows of at least one second."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._window_start = clock()
        self._frames = 0
        self.fps = 0.0

    def tick(self) -> float:
        self._frames += 1
        now = self._clock()
        elapsed = now - self._window_start
        if elapsed >= 1.0:
            self.fps = float(round(self._frames / elapsed))
            self._frames = 0
            self._window_start = now
        return self.fps


class PipelineEngine:
    """
    Main processing engine.

    Example:
        engine = PipelineEngine(source, gate, detect_stage, scheduler, PipelineConfig())
        engine.run()
    """

    def __init__(
        self,
        source: Optional[ObservationSource],
        gate: FrameValidityGate,
        detect_stage: DetectStage,
        scheduler: AnnouncementScheduler,
        config: Optional[PipelineConfig] = None,
        speech: Any = None,
    ):
        self.source = source
        self.gate = gate
        self.detect_stage = detect_stage
        self.scheduler = scheduler
        self.config = config or PipelineConfig()
        self.speech = speech
        self.stats = PipelineStats()
        self._fps = FpsMeter()
        self._running = False
        self._callbacks: List[Callable[[FrameData, FrameResult], None]] = []

    @property
    def running(self) -> bool:
        return self._running

    def add_callback(self, callback: Callable[[FrameData, FrameResult], None]) -> None:
        """
        Add a callback to be called after each frame is processed.

        Args:
            callback: Function taking (frame_data, result) as arguments.
        """
        self._callbacks.append(callback)

    def run(self) -> None:
        """
        Run the main processing loop until stopped or the source is exhausted.

        Raises:
            ConfigurationError: Propagated after cleanup; configuration
                problems are never retried.
        """
        if self.source is None:
            raise RuntimeError("PipelineEngine.run() needs an observation source")

        self._running = True
        self.stats = PipelineStats()

        try:
            self.source.open()
            logging.info(f"Pipeline started: source={self.source.source_id}")

            while self._running:
                frame_data = self.source.read()

                if frame_data is None:
                    self.stats.consecutive_failures += 1
                    if self.stats.consecutive_failures >= self.config.max_consecutive_failures:
                        logging.error(
                            f"Too many consecutive failures ({self.stats.consecutive_failures}), stopping"
                        )
                        break
                    logging.warning(
                        f"Frame read failed ({self.stats.consecutive_failures}/"
                        f"{self.config.max_consecutive_failures})"
                    )
                    time.sleep(0.5)
                    continue

                self.stats.consecutive_failures = 0
                result = self.process_frame(frame_data)

                for callback in self._callbacks:
                    try:
                        callback(frame_data, result)
                    except Exception as e:
                        logging.warning(f"Callback error: {e}")

                if self.config.display:
                    if not self._handle_display(frame_data):
                        break  # User pressed 'q'

                self._handle_periodic_tasks()

        except KeyboardInterrupt:
            logging.info("Pipeline interrupted by user")
        except ConfigurationError as e:
            logging.error(f"Configuration error, stopping pipeline: {e}")
            raise
        finally:
            self._cleanup()

    def stop(self) -> None:
        """Signal the pipeline to stop after the current frame."""
        self._running = False

    def process_frame(self, frame_data: FrameData, now: Optional[float] = None) -> FrameResult:
        """
        Run one frame through gate, detection and the scheduler.

        Failures inside detection are logged and the frame is dropped without
        touching scheduler state. ConfigurationError is re-raised.
        """
        self.stats.frame_count += 1
        self.stats.last_frame_ts = time.time()
        self.stats.fps = self._fps.tick()

        if self.config.portrait_only and not frame_data.is_portrait:
            self.stats.skipped_frames += 1
            logging.debug("Skipping detection: frame not in portrait orientation")
            return FrameResult(verdict=None, skipped_reason="not_portrait")

        verdict = self.gate.evaluate(frame_data)
        if verdict == FrameVerdict.BLANK:
            self.stats.blank_frames += 1
            self.scheduler.blank(now=now)
            return FrameResult(verdict=verdict, skipped_reason="blank")
        if verdict == FrameVerdict.LOW_VARIANCE:
            self.stats.low_variance_frames += 1
            logging.debug("Skipping detection: image is low variance")
            return FrameResult(verdict=verdict, skipped_reason="low_variance")

        try:
            detections = self.detect_stage.run(frame_data.frame)
        except ConfigurationError:
            raise
        except Exception:
            self.stats.failed_frames += 1
            logging.exception(f"Detection failed on frame {frame_data.frame_index}, skipping")
            return FrameResult(verdict=verdict, skipped_reason="error")

        announcements = self.scheduler.process_frame(
            detections,
            frame_data.width,
            frame_data.height,
            frame_data.rotation_degrees,
            now=now,
        )
        self.stats.announcement_count += len(announcements)
        for announcement in announcements:
            logging.info(f"Announced: {announcement.text}")

        return FrameResult(verdict=verdict, detections=detections, announcements=announcements)

    def _handle_display(self, frame_data: FrameData) -> bool:
        """
        Handle cv2 display window.

        Returns False if user pressed 'q' to quit.
        """
        display = rotate_frame(frame_data.frame.copy(), frame_data.rotation_degrees)
        draw_overlays(
            display,
            self.scheduler.snapshot(),
            self.detect_stage.model_size,
            fps=self.stats.fps,
            now=self.scheduler.now(),
            lifetime_s=self.scheduler.config.detection_lifetime_s,
        )
        cv2.imshow(WINDOW_NAME, display)
        key = cv2.waitKey(1) & 0xFF
        return key not in (ord("q"), 27)

    def _handle_periodic_tasks(self) -> None:
        now = time.time()
        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            logging.info(
                f"Pipeline stats: frames={self.stats.frame_count}, fps={self.stats.fps:.0f}, "
                f"blank={self.stats.blank_frames}, low_variance={self.stats.low_variance_frames}, "
                f"failed={self.stats.failed_frames}, announcements={self.stats.announcement_count}"
            )
            self.stats.last_stats_log_time = now

    def _cleanup(self) -> None:
        """Clean up resources."""
        self._running = False

        if self.source is not None:
            try:
                self.source.close()
            except Exception as e:
                logging.warning(f"Error closing source: {e}")

        self.scheduler.reset()

        if self.speech is not None and hasattr(self.speech, "shutdown"):
            try:
                self.speech.shutdown()
            except Exception as e:
                logging.warning(f"Error shutting down speech: {e}")

        if self.config.display:
            cv2.destroyAllWindows()

        logging.info("Pipeline stopped")
