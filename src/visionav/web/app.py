"""
FastAPI application factory for the status API.

Routes:
- /api/health -> liveness
- /api/status -> pipeline stats and warnings
- /api/detections -> live snapshot, optionally mapped to a screen
"""

from __future__ import annotations

import logging
import threading

import uvicorn
from fastapi import FastAPI

from .. import __version__
from .routes import api


def create_app(engine) -> FastAPI:
    """Create the FastAPI app bound to a PipelineEngine."""
    app = FastAPI(
        title="Vision Assist Navigator",
        version=__version__,
        description="Status of the on-device visual assistance pipeline",
    )
    app.state.engine = engine
    app.include_router(api.router, prefix="/api")
    return app


def start_web_thread(engine, host: str, port: int) -> threading.Thread:
    """Serve create_app(engine) with uvicorn on a daemon thread."""

    def run_web_app():
        uvicorn.run(
            create_app(engine),
            host=host,
            port=port,
            log_level="info",
        )

    web_thread = threading.Thread(target=run_web_app, name="visionav-web", daemon=True)
    web_thread.start()
    logging.info(f"Status API started on {host}:{port}")
    return web_thread
