"""
Error types shared across the pipeline.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """
    Raised for setup mistakes that make the pipeline meaningless to run:
    label table / model channel mismatch, unsupported rotation values,
    empty label files, invalid configuration.

    Unlike per-frame failures, these are never swallowed by the engine.
    """
