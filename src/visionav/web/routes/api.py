"""
REST endpoints over the live pipeline.

The engine is attached to app.state by create_app(); handlers only read
the scheduler snapshot and pipeline stats.
"""

from __future__ import annotations

import time
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from ...announce.formatter import format_overlay_label
from ...geometry.direction import classify_direction
from ...geometry.screen import map_to_screen
from ..api_models import DetectionsResponse, DetectionView, ScreenRectModel, StatusResponse

router = APIRouter()


def _engine(request: Request):
    return request.app.state.engine


def _compute_warnings(last_frame_age_s: Optional[float]) -> list[str]:
    """
    Compute warning flags for the status endpoint.

    Thresholds:
    - camera_stale: last_frame_age_s > 2
    - camera_offline: last_frame_age_s > 10
    """
    warnings = []

    if last_frame_age_s is not None:
        if last_frame_age_s > 10:
            warnings.append("camera_offline")
        elif last_frame_age_s > 2:
            warnings.append("camera_stale")
    else:
        # No frame timestamp means camera never started
        warnings.append("camera_offline")

    return warnings


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/status", response_model=StatusResponse)
def status(request: Request):
    engine = _engine(request)
    stats = engine.stats
    now = time.time()

    last_frame_age_s = None
    if stats.last_frame_ts is not None:
        last_frame_age_s = round(now - stats.last_frame_ts, 3)

    return StatusResponse(
        running=engine.running,
        fps=stats.fps,
        frames=stats.frame_count,
        blank_frames=stats.blank_frames,
        low_variance_frames=stats.low_variance_frames,
        announcements=stats.announcement_count,
        scheduler_state=engine.scheduler.state.value,
        last_frame_age_s=last_frame_age_s,
        uptime_seconds=int(now - stats.start_time),
        warnings=_compute_warnings(last_frame_age_s),
    )


@router.get("/detections", response_model=DetectionsResponse)
def detections(
    request: Request,
    screen_width: Optional[float] = Query(None, gt=0),
    screen_height: Optional[float] = Query(None, gt=0),
):
    """
    Current live detections.

    When both screen_width and screen_height are given, each detection also
    carries its box mapped into screen coordinates. A snapshot older than
    the detection lifetime is reported with stale=true.
    """
    if (screen_width is None) != (screen_height is None):
        raise HTTPException(status_code=400, detail="screen_width and screen_height must be given together")

    engine = _engine(request)
    model_size = engine.detect_stage.model_size
    scheduler = engine.scheduler
    snapshot = scheduler.snapshot()
    now = scheduler.now()

    age_s = None
    if snapshot.updated_at is not None:
        age_s = round(now - snapshot.updated_at, 3)

    views = []
    for live in snapshot:
        det = live.detection
        direction = classify_direction(det.x, det.width, live.frame_width, model_size)
        screen = None
        if screen_width is not None:
            rect = map_to_screen(
                det,
                live.frame_width,
                live.frame_height,
                live.rotation_degrees,
                screen_width,
                screen_height,
                model_size=model_size,
            )
            screen = ScreenRectModel(x=rect.x, y=rect.y, width=rect.width, height=rect.height)

        views.append(
            DetectionView(
                label=det.label,
                confidence=det.confidence,
                distance_m=det.distance,
                direction=direction,
                overlay_label=format_overlay_label(det, direction),
                screen=screen,
            )
        )

    return DetectionsResponse(
        age_s=age_s,
        stale=snapshot.is_stale(now, scheduler.config.detection_lifetime_s),
        blanked=snapshot.blanked,
        detections=views,
    )
