"""
Announcement scheduling: which detections get spoken, and how.
"""

from .formatter import format_announcement, format_overlay_label
from .scheduler import AnnouncementScheduler, SchedulerConfig, SchedulerState

__all__ = [
    "format_announcement",
    "format_overlay_label",
    "AnnouncementScheduler",
    "SchedulerConfig",
    "SchedulerState",
]
