# floatpos/core/overflow.py
"""
Overflow detection: how far an element sticks out of its clipping boundary, per side.
"""

from __future__ import annotations

import logging
from typing import Any

from floatpos.core.config import (
    DEFAULT_BOUNDARY,
    DEFAULT_ELEMENT_CONTEXT,
    DEFAULT_PADDING,
    DEFAULT_ROOT_BOUNDARY,
    ELEMENT_CONTEXTS,
)
from floatpos.core.geometry import Padding, side_object_from_padding
from floatpos.core.platform import call_platform, maybe_await
from floatpos.core.types import Overflow, PositionState, Rect

logger = logging.getLogger(__name__)


async def _resolve_clipping_element(state: PositionState, element: Any) -> Any:
    """Virtual elements are measured against their context element, else the document element."""
    platform = state.platform
    is_element = await call_platform(platform, "is_element", element, default=True)
    if is_element:
        return element
    context = getattr(element, "context_element", None)
    if context is not None:
        return context
    return await call_platform(platform, "get_document_element", state.elements.floating)


async def detect_overflow(
    state: PositionState,
    boundary: Any = DEFAULT_BOUNDARY,
    root_boundary: Any = DEFAULT_ROOT_BOUNDARY,
    element_context: str = DEFAULT_ELEMENT_CONTEXT,
    alt_boundary: bool = False,
    padding: Padding = DEFAULT_PADDING,
) -> Overflow:
    """
    Signed overflow of the floating (or reference) element against the clipping rect.
    With alt_boundary, the clipping ancestors of the other element are used instead.
    """
    if element_context not in ELEMENT_CONTEXTS:
        raise ValueError(f"Unexpected element context: {element_context!r}")

    platform = state.platform
    pad = side_object_from_padding(padding)
    alt_context = "reference" if element_context == "floating" else "floating"
    element = getattr(state.elements, alt_context if alt_boundary else element_context)

    clipping = await maybe_await(
        platform.get_clipping_rect(
            element=await _resolve_clipping_element(state, element),
            boundary=boundary,
            root_boundary=root_boundary,
            strategy=state.strategy,
        )
    )

    if element_context == "floating":
        rect = Rect(x=state.x, y=state.y, width=state.rects.floating.width, height=state.rects.floating.height)
    else:
        rect = state.rects.reference

    if getattr(platform, "convert_offset_parent_relative_rect_to_viewport_relative_rect", None) is not None:
        offset_parent = await call_platform(platform, "get_offset_parent", state.elements.floating)
        rect = await call_platform(
            platform,
            "convert_offset_parent_relative_rect_to_viewport_relative_rect",
            rect=rect,
            offset_parent=offset_parent,
            strategy=state.strategy,
        )

    overflow = Overflow(
        top=clipping.top - rect.top + pad["top"],
        right=rect.right - clipping.right + pad["right"],
        bottom=rect.bottom - clipping.bottom + pad["bottom"],
        left=clipping.left - rect.left + pad["left"],
    )
    logger.debug("overflow %s for %s at %s", overflow, element_context, state.placement)
    return overflow
