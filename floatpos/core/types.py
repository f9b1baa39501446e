# floatpos/core/types.py
"""
Dataclasses for rectangles, pipeline state, and middleware return values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal, Mapping, Union


Side = Literal["top", "right", "bottom", "left"]
Alignment = Literal["start", "end"]
Placement = Literal[
    "top", "top-start", "top-end",
    "right", "right-start", "right-end",
    "bottom", "bottom-start", "bottom-end",
    "left", "left-start", "left-end",
]
Strategy = Literal["absolute", "fixed"]
Axis = Literal["x", "y"]
Length = Literal["width", "height"]
ElementContext = Literal["floating", "reference"]


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in pixel space."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Dimensions:
    width: float
    height: float


@dataclass(frozen=True)
class ElementRects:
    """Reference rect relative to the floating element's offset parent; floating rect at (0, 0)."""
    reference: Rect
    floating: Rect


@dataclass(frozen=True)
class Elements:
    reference: Any
    floating: Any


@dataclass(frozen=True)
class Overflow:
    """
    Signed distances past the clipping boundary, per side.
    Positive = overflowing by that many px, negative = room left, 0 = flush.
    """
    top: float
    right: float
    bottom: float
    left: float

    def side(self, name: str) -> float:
        return getattr(self, name)

    def to_dict(self) -> dict:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


@dataclass(frozen=True)
class Reset:
    """Restart request: optional new placement; rects=True re-measures, an ElementRects is used verbatim."""
    placement: str | None = None
    rects: bool | ElementRects | None = None


@dataclass(frozen=True)
class MiddlewareReturn:
    x: float | None = None
    y: float | None = None
    data: Mapping[str, Any] | None = None
    reset: bool | Reset | None = None


@dataclass(frozen=True)
class PositionState:
    """Snapshot handed to each middleware. A new one is built for every step."""
    x: float
    y: float
    placement: str
    initial_placement: str
    strategy: str
    rects: ElementRects
    middleware_data: Mapping[str, Mapping[str, Any]]
    elements: Elements
    platform: Any


MiddlewareFn = Callable[[PositionState], Union[MiddlewareReturn, Awaitable[MiddlewareReturn]]]


@dataclass(frozen=True)
class Middleware:
    """A named adjustment step. options is kept for introspection only."""
    name: str
    fn: MiddlewareFn
    options: Any = None


@dataclass
class ComputePositionResult:
    x: float
    y: float
    placement: str
    strategy: str
    middleware_data: dict[str, dict[str, Any]] = field(default_factory=dict)
    reset_count: int = 0
    warnings: list[str] = field(default_factory=list)
