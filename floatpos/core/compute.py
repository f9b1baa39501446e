# floatpos/core/compute.py
"""
Positioning pipeline: measure rects, solve base coordinates, then run the
middleware in order. A middleware may request a reset, which re-solves with a
new placement and/or rects and restarts from the first middleware. Resets are
capped at MAX_RESETS; later requests are ignored and reported in warnings.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Sequence

from floatpos.core.config import (
    DEBUG,
    DEFAULT_PLACEMENT,
    DEFAULT_STRATEGY,
    MAX_RESETS,
    STRATEGIES,
)
from floatpos.core.coords import compute_coords_from_placement
from floatpos.core.error_codes import RESET_LIMIT_REACHED
from floatpos.core.placement import parse_placement
from floatpos.core.platform import call_platform, maybe_await
from floatpos.core.types import (
    ComputePositionResult,
    ElementRects,
    Elements,
    Middleware,
    MiddlewareReturn,
    PositionState,
    Reset,
)

logger = logging.getLogger(__name__)


def _merge_data(
    middleware_data: Mapping[str, Mapping[str, Any]],
    name: str,
    data: Mapping[str, Any] | None,
) -> dict[str, dict[str, Any]]:
    """New mapping with data shallow-merged over the previous entry for name."""
    merged = {key: dict(value) for key, value in middleware_data.items()}
    merged[name] = {**merged.get(name, {}), **(dict(data) if data else {})}
    return merged


async def _measure(platform: Any, reference: Any, floating: Any, strategy: str) -> ElementRects:
    return await maybe_await(
        platform.get_element_rects(reference=reference, floating=floating, strategy=strategy)
    )


async def compute_position(
    reference: Any,
    floating: Any,
    *,
    platform: Any,
    placement: str = DEFAULT_PLACEMENT,
    strategy: str = DEFAULT_STRATEGY,
    middleware: Sequence[Middleware | None] = (),
) -> ComputePositionResult:
    """
    Coordinates that place floating next to reference. Falsy middleware entries are
    skipped so callers can include them conditionally. Platform errors propagate.
    """
    parse_placement(placement)
    if strategy not in STRATEGIES:
        raise ValueError(f"Unexpected strategy value: {strategy!r}")

    valid_middleware = [m for m in middleware if m]
    rtl = bool(await call_platform(platform, "is_rtl", floating, default=False))
    rects = await _measure(platform, reference, floating, strategy)
    x, y = compute_coords_from_placement(rects, placement, rtl)

    state = PositionState(
        x=x,
        y=y,
        placement=placement,
        initial_placement=placement,
        strategy=strategy,
        rects=rects,
        middleware_data={},
        elements=Elements(reference=reference, floating=floating),
        platform=platform,
    )
    reset_count = 0
    warnings: list[str] = []

    index = 0
    while index < len(valid_middleware):
        mw = valid_middleware[index]
        result = await maybe_await(mw.fn(state))
        if result is None:
            result = MiddlewareReturn()

        state = replace(
            state,
            x=state.x if result.x is None else result.x,
            y=state.y if result.y is None else result.y,
            middleware_data=_merge_data(state.middleware_data, mw.name, result.data),
        )
        if DEBUG:
            logger.debug("%s -> x=%.2f y=%.2f placement=%s", mw.name, state.x, state.y, state.placement)

        if not result.reset:
            index += 1
            continue

        if reset_count >= MAX_RESETS:
            if RESET_LIMIT_REACHED not in warnings:
                logger.warning(
                    "Reset limit (%d) reached; ignoring reset from middleware %r", MAX_RESETS, mw.name
                )
                warnings.append(RESET_LIMIT_REACHED)
            index += 1
            continue

        reset_count += 1
        live_placement = state.placement
        rects = state.rects
        reset = result.reset
        if isinstance(reset, Reset):
            if reset.placement:
                live_placement = parse_placement(reset.placement)
            if reset.rects is True:
                rects = await _measure(platform, reference, floating, strategy)
            elif isinstance(reset.rects, ElementRects):
                rects = reset.rects
        else:
            rects = await _measure(platform, reference, floating, strategy)

        x, y = compute_coords_from_placement(rects, live_placement, rtl)
        state = replace(state, x=x, y=y, placement=live_placement, rects=rects)
        logger.debug("reset %d from %r: placement=%s", reset_count, mw.name, live_placement)
        index = 0

    return ComputePositionResult(
        x=state.x,
        y=state.y,
        placement=state.placement,
        strategy=strategy,
        middleware_data={key: dict(value) for key, value in state.middleware_data.items()},
        reset_count=reset_count,
        warnings=warnings,
    )
