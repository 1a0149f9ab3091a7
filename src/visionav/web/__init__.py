"""
Status API for a running pipeline.
"""

from .app import create_app

__all__ = ["create_app"]
