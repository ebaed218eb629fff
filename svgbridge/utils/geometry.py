"""Leaf-node geometry helpers. No svg/models imports."""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np
from numpy.typing import NDArray
from svgpathtools import CubicBezier, Line, Path

BBox = tuple[float, float, float, float]


def bbox(points: NDArray[np.float64]) -> BBox:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def union_bbox(boxes: Iterable[Optional[BBox]]) -> Optional[BBox]:
    """Smallest box containing every non-None box, or None."""
    present = [b for b in boxes if b is not None]
    if not present:
        return None
    arr = np.array(present, dtype=float)
    return (
        float(arr[:, 0].min()),
        float(arr[:, 1].min()),
        float(arr[:, 2].max()),
        float(arr[:, 3].max()),
    )


def ellipse_bbox(
    cx: float, cy: float, rx: float, ry: float, linear: NDArray[np.float64]
) -> BBox:
    """Exact box of an axis-aligned ellipse mapped by a 2x2 *linear* part.

    The mapped ellipse is cx' + A·(rx cos t, ry sin t); its half-extent per
    axis is the norm of the corresponding row of A·diag(rx, ry).
    """
    scaled = linear @ np.diag([rx, ry])
    half_w = float(np.hypot(scaled[0, 0], scaled[0, 1]))
    half_h = float(np.hypot(scaled[1, 0], scaled[1, 1]))
    return (cx - half_w, cy - half_h, cx + half_w, cy + half_h)


def segments_bbox(
    moves: list[complex], pieces: list[tuple[complex, ...]]
) -> Optional[BBox]:
    """Exact bbox of lines/cubics given as complex control points.

    *pieces* holds (start, end) for lines and (start, c1, c2, end) for cubics.
    Isolated move-to points count as well.
    """
    boxes: list[BBox] = []
    drawable = []
    for piece in pieces:
        if len(piece) == 2:
            drawable.append(Line(*piece))
        else:
            drawable.append(CubicBezier(*piece))
    if drawable:
        xmin, xmax, ymin, ymax = Path(*drawable).bbox()
        boxes.append((xmin, ymin, xmax, ymax))
    if moves:
        pts = np.array([[p.real, p.imag] for p in moves], dtype=float)
        boxes.append(bbox(pts))
    return union_bbox(boxes)
