# floatpos/core/validate.py
"""
Check how much of a positioned floating box stays inside its clipping rect.
Return (fits, visible_ratio).
"""

from __future__ import annotations

from typing import Any

from shapely.geometry import Polygon, box

from floatpos.core.config import DEFAULT_BOUNDARY, DEFAULT_ROOT_BOUNDARY, VISIBLE_RATIO_TOLERANCE
from floatpos.core.platform import call_platform, maybe_await
from floatpos.core.types import ComputePositionResult, Rect


def rect_to_polygon(rect: Rect) -> Polygon:
    """Box polygon for rect; empty if the rect has no area (e.g. disjoint clip)."""
    if rect.width <= 0 or rect.height <= 0:
        return Polygon()
    return box(rect.left, rect.top, rect.right, rect.bottom)


def visible_ratio(clip: Rect, rect: Rect) -> float:
    """Share of rect's area inside clip, in [0, 1]. A zero-area rect counts as visible when clip covers it."""
    clip_poly = rect_to_polygon(clip)
    rect_poly = rect_to_polygon(rect)
    if rect_poly.is_empty:
        if clip_poly.is_empty:
            return 0.0
        inside = clip.left <= rect.left and rect.right <= clip.right and clip.top <= rect.top and rect.bottom <= clip.bottom
        return 1.0 if inside else 0.0
    if clip_poly.is_empty:
        return 0.0
    return float(rect_poly.intersection(clip_poly).area / rect_poly.area)


def validate_rect_inside_clip(
    clip: Rect,
    rect: Rect,
    tolerance: float = VISIBLE_RATIO_TOLERANCE,
) -> tuple[bool, float]:
    """True if rect is fully inside clip (within tolerance), plus the visible-area ratio."""
    ratio = visible_ratio(clip, rect)
    return ratio >= 1.0 - tolerance, ratio


async def measure_fit(
    platform: Any,
    floating: Any,
    result: ComputePositionResult,
    boundary: Any = DEFAULT_BOUNDARY,
    root_boundary: Any = DEFAULT_ROOT_BOUNDARY,
) -> dict[str, Any]:
    """Fit metrics for a computed position: the floating box in viewport space against its clip."""
    dims = await maybe_await(platform.get_dimensions(floating))
    rect = Rect(x=result.x, y=result.y, width=dims.width, height=dims.height)
    offset_parent = await call_platform(platform, "get_offset_parent", floating)
    rect = await call_platform(
        platform,
        "convert_offset_parent_relative_rect_to_viewport_relative_rect",
        rect=rect,
        offset_parent=offset_parent,
        strategy=result.strategy,
        default=rect,
    )
    clip = await maybe_await(
        platform.get_clipping_rect(
            element=floating, boundary=boundary, root_boundary=root_boundary, strategy=result.strategy
        )
    )
    fits, ratio = validate_rect_inside_clip(clip, rect)
    return {
        "fits": fits,
        "visible_ratio": ratio,
        "floating_viewport_rect": rect.to_dict(),
        "clipping_rect": clip.to_dict(),
    }
