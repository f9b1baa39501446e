# floatpos/core/platform.py
"""
Platform adapter contract: everything host-specific (measuring boxes, finding
offset parents and clipping rects, text direction) goes through one object.
Capabilities may be plain functions or coroutines.
"""

from __future__ import annotations

import inspect
from typing import Any, Protocol, runtime_checkable

from floatpos.core.types import Dimensions, ElementRects, Rect


@runtime_checkable
class Platform(Protocol):
    def get_element_rects(self, reference: Any, floating: Any, strategy: str) -> ElementRects: ...

    def get_clipping_rect(self, element: Any, boundary: Any, root_boundary: Any, strategy: str) -> Rect: ...

    def get_dimensions(self, element: Any) -> Dimensions: ...

    def get_offset_parent(self, element: Any) -> Any: ...

    def convert_offset_parent_relative_rect_to_viewport_relative_rect(
        self, rect: Rect, offset_parent: Any, strategy: str
    ) -> Rect: ...

    def is_rtl(self, element: Any) -> bool: ...


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def call_platform(platform: Any, name: str, *args: Any, default: Any = None, **kwargs: Any) -> Any:
    """Call an optional capability; return default when the platform does not provide it."""
    fn = getattr(platform, name, None)
    if fn is None:
        return default
    return await maybe_await(fn(*args, **kwargs))
