"""
Announcement scheduler.

Holds the live detection snapshot and the per-label "last spoken" times,
and decides which detections of a frame are due for a spoken announcement.

States:
- IDLE: nothing processed yet
- TRACKING: last frame was valid
- BLANKED: last frame was blank; snapshot and speech state are empty

All mutation happens under a single lock, so two frames can never
interleave their read-modify-write of the speech state. Readers get an
immutable LiveSnapshot swapped in by reference.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..errors import ConfigurationError
from ..geometry.direction import classify_direction
from ..geometry.rotation import validate_rotation
from ..models.detection import Detection
from ..models.live import Announcement, LiveDetection, LiveSnapshot
from ..speech.base import SpeechSink
from ..detection.suppression import collapse_by_label
from .formatter import format_announcement


class SchedulerState(str, Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    BLANKED = "blanked"


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Attributes:
        cooldown_s: Minimum time before the same label is announced again.
        detection_lifetime_s: Age after which the overlay and the API treat
            the snapshot as stale. The scheduler replaces it every valid frame.
        model_size: Side of the model canvas, for direction classification.
    """
    cooldown_s: float = 5.0
    detection_lifetime_s: float = 1.0
    model_size: int = 320


class AnnouncementScheduler:
    """
    Per-label cooldown scheduler for spoken announcements.

    Example:
        scheduler = AnnouncementScheduler(speech, SchedulerConfig(), labels=labels)
        announcements = scheduler.process_frame(detections, 640, 480, 90)
        for live in scheduler.snapshot():
            draw(live)
    """

    def __init__(
        self,
        speech: SpeechSink,
        config: Optional[SchedulerConfig] = None,
        labels: Optional[Iterable[str]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            speech: Sink receiving announcement text.
            config: Scheduler configuration.
            labels: Closed set of labels the speech state may hold. When
                given, detections with other labels are rejected.
            clock: Time source in seconds, used when `now` is not passed.
        """
        self._speech = speech
        self.config = config or SchedulerConfig()
        self._labels = frozenset(labels) if labels is not None else None
        self._clock = clock

        self._lock = threading.Lock()
        self._snapshot = LiveSnapshot()
        self._last_spoken: Dict[str, float] = {}
        self._state = SchedulerState.IDLE

    @property
    def state(self) -> SchedulerState:
        return self._state

    def now(self) -> float:
        """Current time on the scheduler clock (the clock of snapshot.updated_at)."""
        return self._clock()

    def snapshot(self) -> LiveSnapshot:
        """Current live snapshot. Never mutated after publication."""
        return self._snapshot

    def last_spoken(self, label: str) -> Optional[float]:
        with self._lock:
            return self._last_spoken.get(label)

    def speech_state(self) -> Dict[str, float]:
        """Copy of label -> last announcement time."""
        with self._lock:
            return dict(self._last_spoken)

    def process_frame(
        self,
        detections: Sequence[Detection],
        frame_width: int,
        frame_height: int,
        rotation_degrees: int = 0,
        now: Optional[float] = None,
    ) -> List[Announcement]:
        """
        Publish a valid frame's detections and announce those out of cooldown.

        Args:
            detections: Suppressed detections of one frame.
            frame_width: Source frame width in pixels.
            frame_height: Source frame height in pixels.
            rotation_degrees: Frame rotation (0, 90, 180 or 270).
            now: Frame time in seconds; defaults to the scheduler clock.

        Returns:
            Announcements enqueued for this frame.

        Raises:
            ConfigurationError: On an unsupported rotation or a label outside
                the label table. State is left untouched.
        """
        rotation = validate_rotation(rotation_degrees)
        collapsed = collapse_by_label(detections)
        self._check_labels(collapsed)

        announcements: List[Announcement] = []
        with self._lock:
            if now is None:
                now = self._clock()

            self._snapshot = LiveSnapshot(
                detections=tuple(
                    LiveDetection(
                        detection=det,
                        observed_at=now,
                        frame_width=frame_width,
                        frame_height=frame_height,
                        rotation_degrees=rotation,
                    )
                    for det in collapsed
                ),
                updated_at=now,
            )
            if self._state != SchedulerState.TRACKING:
                logging.info(f"Scheduler {self._state.value} -> tracking")
            self._state = SchedulerState.TRACKING

            for det in collapsed:
                last = self._last_spoken.get(det.label)
                if last is not None and now - last < self.config.cooldown_s:
                    continue
                direction = classify_direction(det.x, det.width, frame_width, self.config.model_size)
                text = format_announcement(det, direction)
                self._speech.enqueue(text)
                self._last_spoken[det.label] = now
                announcements.append(
                    Announcement(
                        label=det.label,
                        text=text,
                        spoken_at=now,
                        direction=direction,
                        distance=det.distance,
                    )
                )
                logging.debug(
                    f"Announce {det.label}: conf={det.confidence:.2f} "
                    f"box=({det.x:.0f}, {det.y:.0f}, {det.width:.0f}, {det.height:.0f}) "
                    f"direction={direction or 'ahead'} distance={det.distance}"
                )

        return announcements

    def blank(self, now: Optional[float] = None) -> None:
        """
        Handle a blank frame: drop the snapshot, forget all cooldowns and
        stop any speech in flight.
        """
        with self._lock:
            if now is None:
                now = self._clock()
            self._snapshot = LiveSnapshot(updated_at=now, blanked=True)
            self._last_spoken.clear()
            if self._state != SchedulerState.BLANKED:
                logging.info("Blank frame: speech stopped and announcement state cleared")
            self._state = SchedulerState.BLANKED
            self._speech.stop_all()

    def reset(self) -> None:
        """Tear down all state (pipeline shutdown). Speech is left alone."""
        with self._lock:
            self._snapshot = LiveSnapshot()
            self._last_spoken.clear()
            self._state = SchedulerState.IDLE

    def _check_labels(self, detections: Sequence[Detection]) -> None:
        if self._labels is None:
            return
        unknown = sorted({d.label for d in detections if d.label not in self._labels})
        if unknown:
            raise ConfigurationError(f"Detections carry labels outside the label table: {unknown}")
