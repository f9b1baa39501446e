# floatpos/core/coords.py
"""
Coordinate solver: base (x, y) for a placement before any middleware runs.
"""

from __future__ import annotations

from floatpos.core.placement import get_alignment, get_length, get_main_axis, get_side
from floatpos.core.types import ElementRects


def compute_coords_from_placement(
    rects: ElementRects,
    placement: str,
    rtl: bool = False,
) -> tuple[float, float]:
    """
    Place the floating box against the reference on the placement's side, centered on
    the other axis; start/end then shift by half the length difference. In RTL the
    horizontal shift is mirrored.
    """
    reference, floating = rects.reference, rects.floating
    common_x = reference.x + reference.width / 2 - floating.width / 2
    common_y = reference.y + reference.height / 2 - floating.height / 2
    axis = get_main_axis(placement)
    length = get_length(axis)
    common_align = getattr(reference, length) / 2 - getattr(floating, length) / 2
    is_vertical = axis == "x"

    side = get_side(placement)
    if side == "top":
        x, y = common_x, reference.y - floating.height
    elif side == "bottom":
        x, y = common_x, reference.y + reference.height
    elif side == "right":
        x, y = reference.x + reference.width, common_y
    elif side == "left":
        x, y = reference.x - floating.width, common_y
    else:
        x, y = reference.x, reference.y

    alignment = get_alignment(placement)
    if alignment is not None:
        sign = -1 if rtl and is_vertical else 1
        shift = common_align * sign * (-1 if alignment == "start" else 1)
        if is_vertical:
            x += shift
        else:
            y += shift

    return x, y
