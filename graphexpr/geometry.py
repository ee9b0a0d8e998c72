"""Circle layout: point index -> canvas coordinate."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from .config import CENTER, RADIUS

Point = Tuple[float, float]


def check_point_count(point_count: int) -> None:
    if isinstance(point_count, bool) or not isinstance(point_count, (int, np.integer)):
        raise TypeError(f"point_count must be an integer, got {type(point_count).__name__}")
    if point_count <= 0:
        raise ValueError(f"point_count must be positive, got {point_count}")


def circle_coordinates(index: int, point_count: int) -> Point:
    check_point_count(point_count)
    angle = 2.0 * math.pi * index / point_count
    return (
        RADIUS * math.sin(angle) + CENTER[0],
        RADIUS * math.cos(angle) + CENTER[1],
    )


def circle_layout(point_count: int) -> np.ndarray:
    """Return an ``(N + 1, 2)`` array of coordinates indexed by point index.

    Row 0 holds the same position as row ``N`` so point indices can be used
    directly without shifting.
    """
    check_point_count(point_count)
    angles = 2.0 * np.pi * np.arange(point_count + 1, dtype=float) / point_count
    layout = np.empty((point_count + 1, 2), dtype=float)
    layout[:, 0] = RADIUS * np.sin(angles) + CENTER[0]
    layout[:, 1] = RADIUS * np.cos(angles) + CENTER[1]
    return layout
