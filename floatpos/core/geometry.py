# floatpos/core/geometry.py
"""
Geometry helpers: per-side padding, edge arrays, clipping-rect intersection.
"""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np

from floatpos.core.config import SIDES
from floatpos.core.types import Rect

Padding = float | Mapping[str, float]


def side_object_from_padding(padding: Padding) -> dict[str, float]:
    """
    Expand padding to {top, right, bottom, left}. A number applies to every side;
    a mapping may name any subset of sides, the rest default to 0.
    """
    if isinstance(padding, Mapping):
        unknown = set(padding) - set(SIDES)
        if unknown:
            raise ValueError(f"Unexpected padding side(s): {sorted(unknown)}")
        return {side: float(padding.get(side, 0.0)) for side in SIDES}
    value = float(padding)
    return {side: value for side in SIDES}


def rect_from_edges(left: float, top: float, right: float, bottom: float) -> Rect:
    return Rect(x=float(left), y=float(top), width=float(right - left), height=float(bottom - top))


def rect_edges(rects: Sequence[Rect]) -> np.ndarray:
    """(N, 4) array of [left, top, right, bottom]."""
    if not rects:
        return np.zeros((0, 4))
    return np.array([[r.left, r.top, r.right, r.bottom] for r in rects], dtype=np.float64)


def intersect_rects(rects: Sequence[Rect]) -> Rect:
    """
    Largest box inside every rect: max of left/top, min of right/bottom.
    Disjoint inputs give a negative width or height; callers treat that as full overflow.
    """
    if not rects:
        raise ValueError("intersect_rects needs at least one rect")
    edges = rect_edges(rects)
    left = edges[:, 0].max()
    top = edges[:, 1].max()
    right = edges[:, 2].min()
    bottom = edges[:, 3].min()
    return rect_from_edges(left, top, right, bottom)


def translate(rect: Rect, dx: float, dy: float) -> Rect:
    return Rect(x=rect.x + dx, y=rect.y + dy, width=rect.width, height=rect.height)
