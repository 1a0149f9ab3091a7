"""
Label table loading and real-world object widths used for distance estimates.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Union

from ..errors import ConfigurationError

# Typical object widths in meters, keyed by COCO label
DEFAULT_OBJECT_WIDTHS_M: Mapping[str, float] = MappingProxyType({
    "person": 0.5, "bicycle": 0.6, "car": 1.8, "motorcycle": 0.8, "airplane": 10.0,
    "bus": 2.5, "train": 3.0, "truck": 2.5, "boat": 2.0, "traffic light": 0.3,
    "fire hydrant": 0.4, "stop sign": 0.75, "parking meter": 0.3, "bench": 1.5,
    "bird": 0.2, "cat": 0.3, "dog": 0.4, "horse": 0.8, "sheep": 0.6, "cow": 0.9,
    "elephant": 2.5, "bear": 1.0, "zebra": 0.8, "giraffe": 1.0, "backpack": 0.4,
    "umbrella": 1.0, "handbag": 0.3, "tie": 0.1, "suitcase": 0.5, "frisbee": 0.25,
    "skis": 0.1, "snowboard": 0.3, "sports ball": 0.22, "kite": 1.0, "baseball bat": 0.07,
    "baseball glove": 0.25, "skateboard": 0.2, "surfboard": 0.5, "tennis racket": 0.27,
    "bottle": 0.07, "wine glass": 0.08, "cup": 0.08, "fork": 0.03, "knife": 0.02,
    "spoon": 0.04, "bowl": 0.15, "banana": 0.03, "apple": 0.08, "sandwich": 0.12,
    "orange": 0.08, "broccoli": 0.15, "carrot": 0.03, "hot dog": 0.03, "pizza": 0.3,
    "donut": 0.1, "cake": 0.25, "chair": 0.5, "couch": 1.8, "potted plant": 0.3,
    "bed": 1.5, "dining table": 1.0, "toilet": 0.5, "tv": 0.8, "laptop": 0.35,
    "mouse": 0.06, "remote": 0.05, "keyboard": 0.45, "cell phone": 0.07, "microwave": 0.5,
    "oven": 0.6, "toaster": 0.25, "sink": 0.6, "refrigerator": 0.8, "book": 0.15,
    "clock": 0.3, "vase": 0.15, "scissors": 0.08, "teddy bear": 0.3, "hair drier": 0.08,
    "toothbrush": 0.02,
})


class LabelSizeTable(Mapping[str, float]):
    """
    Read-only mapping label -> real-world width in meters.

    Lookups fall back to a case-insensitive match, so "TV" and "tv" resolve
    to the same entry. Unknown labels have no width (None from width_of).
    """

    def __init__(self, widths: Optional[Mapping[str, float]] = None):
        source = DEFAULT_OBJECT_WIDTHS_M if widths is None else widths
        self._widths: Dict[str, float] = {}
        for label, width in source.items():
            if width <= 0:
                raise ConfigurationError(f"Object width for {label!r} must be positive, got {width}")
            self._widths[label] = float(width)
        self._folded = {label.lower(): width for label, width in self._widths.items()}

    def __getitem__(self, label: str) -> float:
        if label in self._widths:
            return self._widths[label]
        return self._folded[label.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._widths)

    def __len__(self) -> int:
        return len(self._widths)

    def width_of(self, label: str) -> Optional[float]:
        try:
            return self[label]
        except KeyError:
            return None

    def with_overrides(self, overrides: Optional[Mapping[str, float]]) -> "LabelSizeTable":
        """Return a new table with entries replaced/added from overrides."""
        merged = dict(self._widths)
        merged.update(overrides or {})
        return LabelSizeTable(merged)


def load_labels(path: Union[str, Path]) -> List[str]:
    """
    Load a label table, one label per line.

    Lines are stripped and blank lines skipped; line order defines the class
    index.

    Raises:
        ConfigurationError: If the file is missing or yields no labels.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read label file {path}: {e}") from e

    labels = [line.strip() for line in text.splitlines() if line.strip()]
    if not labels:
        raise ConfigurationError(f"Label file {path} is empty")

    logging.info(f"Loaded {len(labels)} labels from {path}")
    return labels
