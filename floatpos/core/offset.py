# floatpos/core/offset.py
"""
Offset middleware: displaces the floating element from its reference along the
main axis and, optionally, along the alignment axis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

from floatpos.core.placement import get_alignment, get_main_axis, get_side
from floatpos.core.platform import call_platform, maybe_await
from floatpos.core.types import Middleware, MiddlewareReturn, PositionState


@dataclass(frozen=True)
class OffsetOptions:
    main_axis: float = 0.0
    cross_axis: float = 0.0
    alignment_axis: float | None = None


OffsetValue = Union[float, Mapping[str, Any], OffsetOptions]
OffsetInput = Union[OffsetValue, Callable[[PositionState], Any]]


def _to_options(raw: OffsetValue) -> OffsetOptions:
    if isinstance(raw, OffsetOptions):
        return raw
    if isinstance(raw, Mapping):
        return OffsetOptions(**raw)
    return OffsetOptions(main_axis=float(raw))


async def convert_value_to_coords(state: PositionState, value: OffsetInput) -> tuple[float, float]:
    """(dx, dy) for the current placement. Cross-axis direction mirrors in RTL."""
    placement = state.placement
    side = get_side(placement)
    alignment = get_alignment(placement)
    is_vertical = get_main_axis(placement) == "x"
    rtl = bool(await call_platform(state.platform, "is_rtl", state.elements.floating, default=False))
    main_axis_multi = -1 if side in ("left", "top") else 1
    cross_axis_multi = -1 if rtl and is_vertical else 1

    raw = await maybe_await(value(state)) if callable(value) else value
    options = _to_options(raw)

    main_axis = options.main_axis
    cross_axis = options.cross_axis
    if alignment and isinstance(options.alignment_axis, (int, float)):
        cross_axis = -options.alignment_axis if alignment == "end" else options.alignment_axis

    if is_vertical:
        return cross_axis * cross_axis_multi, main_axis * main_axis_multi
    return main_axis * main_axis_multi, cross_axis * cross_axis_multi


def offset(value: OffsetInput = 0.0) -> Middleware:
    """
    A number is the main-axis distance. A mapping/OffsetOptions may set main_axis,
    cross_axis and alignment_axis (overrides cross_axis for aligned placements,
    negated for end). A callable receives the state and returns either form.
    """

    async def fn(state: PositionState) -> MiddlewareReturn:
        dx, dy = await convert_value_to_coords(state, value)
        return MiddlewareReturn(x=state.x + dx, y=state.y + dy, data={"x": dx, "y": dy})

    return Middleware(name="offset", fn=fn, options=value)
