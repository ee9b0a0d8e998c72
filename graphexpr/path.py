"""Path data: ordered move-to/line-to primitives, one pair per segment."""

from __future__ import annotations

from typing import FrozenSet, Iterable, Iterator, Tuple

import numpy as np

from .geometry import Point

Command = Tuple[str, float, float]


def _format_number(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


class PathData:
    """Line segments stored as a ``(k, 2, 2)`` float array.

    ``segments[i, 0]`` is the move-to point and ``segments[i, 1]`` the
    line-to point of segment ``i``.
    """

    def __init__(self, segments=None):
        if segments is None:
            segments = np.empty((0, 2, 2), dtype=float)
        arr = np.array(segments, dtype=float)
        if arr.size == 0:
            arr = arr.reshape(0, 2, 2)
        if arr.ndim != 3 or arr.shape[1:] != (2, 2):
            raise ValueError(f"segments must have shape (k, 2, 2), got {arr.shape}")
        arr.setflags(write=False)
        self._segments = arr

    @classmethod
    def empty(cls) -> "PathData":
        return cls()

    @classmethod
    def from_points(cls, starts: np.ndarray, ends: np.ndarray) -> "PathData":
        return cls(np.stack([starts, ends], axis=1))

    @classmethod
    def concat(cls, parts: Iterable["PathData"]) -> "PathData":
        arrays = [part.segments for part in parts if len(part)]
        if not arrays:
            return cls.empty()
        if len(arrays) == 1:
            return cls(arrays[0])
        return cls(np.concatenate(arrays, axis=0))

    @property
    def segments(self) -> np.ndarray:
        return self._segments

    def __len__(self) -> int:
        return int(self._segments.shape[0])

    def __add__(self, other: "PathData") -> "PathData":
        if not isinstance(other, PathData):
            return NotImplemented
        return PathData.concat((self, other))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathData):
            return NotImplemented
        return np.array_equal(self._segments, other._segments)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PathData(segments={len(self)})"

    def __iter__(self) -> Iterator[Tuple[Point, Point]]:
        for (x0, y0), (x1, y1) in self._segments.tolist():
            yield (x0, y0), (x1, y1)

    def commands(self) -> Iterator[Command]:
        for (x0, y0), (x1, y1) in self._segments.tolist():
            yield ("M", x0, y0)
            yield ("L", x1, y1)

    def to_svg_data(self, precision: int = 3) -> str:
        """Render as the value of an SVG ``<path d="...">`` attribute."""
        return " ".join(
            f"{op} {_format_number(x, precision)},{_format_number(y, precision)}"
            for op, x, y in self.commands()
        )

    def edge_set(self, decimals: int = 6) -> FrozenSet[Tuple[Point, Point]]:
        """Unordered endpoint pairs, rounded, for order-independent comparison."""
        rounded = np.round(self._segments, decimals) + 0.0
        edges = set()
        for start, end in rounded.tolist():
            a, b = tuple(start), tuple(end)
            edges.add((a, b) if a <= b else (b, a))
        return frozenset(edges)
