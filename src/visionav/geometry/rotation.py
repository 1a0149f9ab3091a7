"""
Frame rotation values.
"""

from __future__ import annotations

from ..errors import ConfigurationError

VALID_ROTATIONS = (0, 90, 180, 270)


def validate_rotation(rotation_degrees: int) -> int:
    """
    Check that a rotation is one of 0/90/180/270 and return it.

    Raises:
        ConfigurationError: For any other value.
    """
    if rotation_degrees not in VALID_ROTATIONS:
        raise ConfigurationError(
            f"rotation_degrees must be one of {VALID_ROTATIONS}, got {rotation_degrees!r}"
        )
    return int(rotation_degrees)
