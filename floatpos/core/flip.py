# floatpos/core/flip.py
"""
Flip middleware: when the floating element overflows at its placement, try the
fallback placements in order by requesting resets. Once every candidate has
overflowed, settle on the best fit (least positive overflow) or on the initial
placement.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from floatpos.core.config import DEFAULT_FALLBACK_STRATEGY, FALLBACK_STRATEGIES
from floatpos.core.overflow import detect_overflow
from floatpos.core.placement import (
    get_alignment,
    get_alignment_sides,
    get_expanded_placements,
    get_opposite_placement,
    get_side,
    parse_placement,
)
from floatpos.core.platform import call_platform
from floatpos.core.types import Middleware, MiddlewareReturn, PositionState, Reset

logger = logging.getLogger(__name__)


def fallback_candidates(
    initial_placement: str,
    fallback_placements: Sequence[str] | None = None,
    flip_alignment: bool = True,
) -> list[str]:
    """Initial placement followed by the placements to try when it overflows."""
    if fallback_placements is not None:
        fallbacks = list(fallback_placements)
    elif get_alignment(initial_placement) is None or not flip_alignment:
        fallbacks = [get_opposite_placement(initial_placement)]
    else:
        fallbacks = get_expanded_placements(initial_placement)
    return [initial_placement, *fallbacks]


def best_fit_placement(history: Sequence[dict[str, Any]]) -> str | None:
    """Placement with the smallest sum of positive overflows; first seen wins ties."""
    scored = [
        (entry, sum(o for o in entry["overflows"] if o > 0))
        for entry in history
    ]
    scored.sort(key=lambda t: t[1])
    return scored[0][0]["placement"] if scored else None


def flip(
    main_axis: bool = True,
    cross_axis: bool = True,
    fallback_placements: Sequence[str] | None = None,
    fallback_strategy: str = DEFAULT_FALLBACK_STRATEGY,
    flip_alignment: bool = True,
    **detect_overflow_options: Any,
) -> Middleware:
    """
    Change the placement to one that fits. Remaining keyword arguments are passed to
    detect_overflow (boundary, root_boundary, element_context, alt_boundary, padding).
    """
    if fallback_strategy not in FALLBACK_STRATEGIES:
        raise ValueError(f"Unexpected fallback strategy: {fallback_strategy!r}")
    if fallback_placements is not None:
        for p in fallback_placements:
            parse_placement(p)

    async def fn(state: PositionState) -> MiddlewareReturn:
        placement = state.placement
        initial = state.initial_placement
        placements = fallback_candidates(initial, fallback_placements, flip_alignment)

        overflow = await detect_overflow(state, **detect_overflow_options)
        overflows: list[float] = []
        if main_axis:
            overflows.append(overflow.side(get_side(placement)))
        if cross_axis:
            rtl = bool(await call_platform(state.platform, "is_rtl", state.elements.floating, default=False))
            main, cross = get_alignment_sides(placement, state.rects, rtl)
            overflows.extend([overflow.side(main), overflow.side(cross)])

        flip_data = state.middleware_data.get("flip", {})
        history = [*flip_data.get("overflows", []), {"placement": placement, "overflows": overflows}]

        if all(o <= 0 for o in overflows):
            return MiddlewareReturn()

        next_index = flip_data.get("index", 0) + 1
        if next_index < len(placements):
            next_placement = placements[next_index]
            logger.debug("flip: %s overflows %s; trying %s", placement, overflows, next_placement)
            return MiddlewareReturn(
                data={"index": next_index, "overflows": history},
                reset=Reset(placement=next_placement),
            )

        reset_placement = "bottom"
        if fallback_strategy == "bestFit":
            reset_placement = best_fit_placement(history) or reset_placement
        elif fallback_strategy == "initialPlacement":
            reset_placement = initial

        if placement != reset_placement:
            logger.debug("flip: candidates exhausted; settling on %s (%s)", reset_placement, fallback_strategy)
            return MiddlewareReturn(reset=Reset(placement=reset_placement))
        return MiddlewareReturn()

    options = {
        "main_axis": main_axis,
        "cross_axis": cross_axis,
        "fallback_placements": fallback_placements,
        "fallback_strategy": fallback_strategy,
        "flip_alignment": flip_alignment,
        **detect_overflow_options,
    }
    return Middleware(name="flip", fn=fn, options=options)
