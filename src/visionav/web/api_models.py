from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    """
    Pipeline status optimized for polling.
    """
    running: bool = Field(..., description="True if the processing loop is active")
    fps: float = Field(0.0, description="Processed frames per second")
    frames: int = Field(0, description="Frames processed since start")
    blank_frames: int = Field(0, description="Frames rejected as blank")
    low_variance_frames: int = Field(0, description="Frames rejected as low variance")
    announcements: int = Field(0, description="Announcements spoken since start")
    scheduler_state: str = Field(..., description="idle|tracking|blanked")
    last_frame_age_s: Optional[float] = Field(None, description="Seconds since last frame")
    uptime_seconds: int = Field(0, description="Seconds since the pipeline started")
    warnings: List[str] = Field(default_factory=list, description="Active warnings")


class ScreenRectModel(BaseModel):
    x: float
    y: float
    width: float
    height: float


class DetectionView(BaseModel):
    label: str
    confidence: float
    distance_m: Optional[float] = Field(None, description="Estimated distance in meters")
    direction: str = Field("", description="left|right|'' (ahead)")
    overlay_label: str
    screen: Optional[ScreenRectModel] = Field(
        None, description="Box in screen coordinates when a screen size was given"
    )


class DetectionsResponse(BaseModel):
    age_s: Optional[float] = Field(None, description="Seconds since the snapshot was published")
    stale: bool = Field(..., description="True when older than the detection lifetime")
    blanked: bool
    detections: List[DetectionView]
