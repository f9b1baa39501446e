# floatpos/core/placement.py
"""
Placement algebra: split a placement into side/alignment, derive axes,
and compute opposite and fallback placements. All functions are pure.
"""

from __future__ import annotations

import re

from floatpos.core.config import ALIGNMENTS, SIDES
from floatpos.core.types import ElementRects

ALL_PLACEMENTS: tuple[str, ...] = tuple(
    p for side in SIDES for p in (side, f"{side}-start", f"{side}-end")
)

_OPPOSITE_SIDE: dict[str, str] = {"left": "right", "right": "left", "bottom": "top", "top": "bottom"}
_OPPOSITE_ALIGNMENT: dict[str, str] = {"start": "end", "end": "start"}
_SIDE_RE = re.compile(r"left|right|bottom|top")
_ALIGNMENT_RE = re.compile(r"start|end")


def parse_placement(value: str) -> str:
    """Return value unchanged if it is a valid placement; raise ValueError otherwise."""
    if not isinstance(value, str) or value not in ALL_PLACEMENTS:
        raise ValueError(f"Unexpected placement value: {value!r}")
    return value


def get_side(placement: str) -> str:
    return placement.split("-")[0]


def get_alignment(placement: str) -> str | None:
    parts = placement.split("-")
    alignment = parts[1] if len(parts) > 1 else None
    return alignment if alignment in ALIGNMENTS else None


def get_main_axis(placement: str) -> str:
    """"x" for top/bottom sides (alignment runs horizontally), "y" for left/right."""
    return "x" if get_side(placement) in ("top", "bottom") else "y"


def get_length(axis: str) -> str:
    return "height" if axis == "y" else "width"


def get_opposite_placement(placement: str) -> str:
    """Swap top<->bottom and left<->right; alignment is kept."""
    return _SIDE_RE.sub(lambda m: _OPPOSITE_SIDE[m.group(0)], placement)


def get_opposite_alignment_placement(placement: str) -> str:
    """Swap start<->end; side is kept."""
    return _ALIGNMENT_RE.sub(lambda m: _OPPOSITE_ALIGNMENT[m.group(0)], placement)


def get_expanded_placements(placement: str) -> list[str]:
    """The three next-best placements tried by flip for an aligned placement."""
    opposite = get_opposite_placement(placement)
    return [
        get_opposite_alignment_placement(placement),
        opposite,
        get_opposite_alignment_placement(opposite),
    ]


def get_alignment_sides(placement: str, rects: ElementRects, rtl: bool = False) -> tuple[str, str]:
    """
    (main, cross) sides checked for cross-axis overflow. The main side is the one the
    floating element extends past when aligned; it flips when the reference is the longer box.
    """
    alignment = get_alignment(placement)
    axis = get_main_axis(placement)
    length = get_length(axis)

    if axis == "x":
        main = "right" if alignment == ("end" if rtl else "start") else "left"
    else:
        main = "bottom" if alignment == "start" else "top"

    if getattr(rects.reference, length) > getattr(rects.floating, length):
        main = get_opposite_placement(main)

    return main, get_opposite_placement(main)
