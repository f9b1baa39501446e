# floatpos/core/scene.py
"""
In-memory laid-out element tree: the host model measured by ScenePlatform.
Node rects are viewport-relative bounding boxes (what a browser reports for
getBoundingClientRect); layout sizes, borders, scroll state and the styles that
matter for positioning are stored alongside.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Iterator, Mapping

from floatpos.core.error_codes import ELEMENT_NOT_FOUND, SCENE_INVALID
from floatpos.core.types import Rect


@dataclass
class Style:
    """Computed style values used by offset-parent and clipping resolution."""
    position: str = "static"
    display: str = "block"
    overflow_x: str = "visible"
    overflow_y: str = "visible"
    direction: str | None = None  # None = inherited
    transform: str = "none"
    perspective: str = "none"
    will_change: str = "auto"
    contain: str = "none"
    filter: str = "none"
    backdrop_filter: str = "none"

    @property
    def overflow(self) -> str:
        return self.overflow_x if self.overflow_x == self.overflow_y else f"{self.overflow_x} {self.overflow_y}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Style:
        """Build from a dict; "overflow" is shorthand for both axes."""
        values = dict(data or {})
        shorthand = values.pop("overflow", None)
        if shorthand is not None:
            values.setdefault("overflow_x", shorthand)
            values.setdefault("overflow_y", shorthand)
        unknown = set(values) - _STYLE_FIELDS
        if unknown:
            raise ValueError(f"{SCENE_INVALID}: unknown style key(s) {sorted(unknown)}")
        return cls(**values)


_STYLE_FIELDS = frozenset(f.name for f in fields(Style))


@dataclass(frozen=True)
class VisualViewport:
    width: float
    height: float
    offset_left: float = 0.0
    offset_top: float = 0.0


class Window:
    """The scene's window: owns the page scroll offsets."""

    def __init__(self, scene: Scene) -> None:
        self.scene = scene

    @property
    def page_x_offset(self) -> float:
        return self.scene.scroll_x

    @property
    def page_y_offset(self) -> float:
        return self.scene.scroll_y

    def __repr__(self) -> str:
        return "Window()"


@dataclass(eq=False)
class Node:
    name: str
    rect: Rect
    scene: Scene = field(repr=False)
    parent: Node | None = field(default=None, repr=False)
    tag: str = "div"
    style: Style = field(default_factory=Style)
    offset_width: float | None = None
    offset_height: float | None = None
    client_left: float = 0.0
    client_top: float = 0.0
    client_width: float | None = None
    client_height: float | None = None
    scroll_left: float = 0.0
    scroll_top: float = 0.0
    scroll_width: float | None = None
    scroll_height: float | None = None
    children: list[Node] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.rect.width < 0 or self.rect.height < 0:
            raise ValueError(f"{SCENE_INVALID}: {self.name!r} has negative size")
        self.tag = self.tag.lower()
        if self.offset_width is None:
            self.offset_width = self.rect.width
        if self.offset_height is None:
            self.offset_height = self.rect.height
        if self.client_width is None:
            self.client_width = max(0.0, self.offset_width - 2 * self.client_left)
        if self.client_height is None:
            self.client_height = max(0.0, self.offset_height - 2 * self.client_top)
        if self.scroll_width is None:
            self.scroll_width = self.client_width
        if self.scroll_height is None:
            self.scroll_height = self.client_height

    @property
    def direction(self) -> str:
        node: Node | None = self
        while node is not None:
            if node.style.direction:
                return node.style.direction
            node = node.parent
        return self.scene.direction

    def ancestors(self) -> Iterator[Node]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


@dataclass(frozen=True)
class VirtualElement:
    """A reference that is not part of the tree (e.g. a cursor position or text range)."""
    rect: Rect
    context_element: Node | None = None

    def get_bounding_client_rect(self) -> Rect:
        return self.rect


class Scene:
    """
    Root of the element tree. html and body are created from the viewport size and
    page scroll; every other node hangs below body unless a parent is given.
    """

    def __init__(
        self,
        viewport_width: float,
        viewport_height: float,
        scroll_x: float = 0.0,
        scroll_y: float = 0.0,
        document_width: float | None = None,
        document_height: float | None = None,
        layout_viewport: bool = True,
        visual_viewport: VisualViewport | None = None,
        use_visual_viewport: bool = True,
        direction: str = "ltr",
    ) -> None:
        if viewport_width < 0 or viewport_height < 0:
            raise ValueError(f"{SCENE_INVALID}: viewport has negative size")
        self.scroll_x = float(scroll_x)
        self.scroll_y = float(scroll_y)
        self.layout_viewport = layout_viewport
        self.direction = direction
        if use_visual_viewport and visual_viewport is None:
            visual_viewport = VisualViewport(width=viewport_width, height=viewport_height)
        self.visual_viewport = visual_viewport if use_visual_viewport else None
        self.window = Window(self)
        doc_w = float(document_width if document_width is not None else viewport_width)
        doc_h = float(document_height if document_height is not None else viewport_height)

        self._nodes: dict[str, Node] = {}
        self.html = self._register(Node(
            name="html",
            rect=Rect(-self.scroll_x, -self.scroll_y, viewport_width, doc_h),
            scene=self,
            tag="html",
            client_width=viewport_width,
            client_height=viewport_height,
            scroll_left=self.scroll_x,
            scroll_top=self.scroll_y,
            scroll_width=doc_w,
            scroll_height=doc_h,
        ))
        self.body = self._register(Node(
            name="body",
            rect=Rect(-self.scroll_x, -self.scroll_y, viewport_width, doc_h),
            scene=self,
            parent=self.html,
            tag="body",
            scroll_width=doc_w,
            scroll_height=doc_h,
        ))
        self.html.children.append(self.body)

    def _register(self, node: Node) -> Node:
        if node.name in self._nodes:
            raise ValueError(f"{SCENE_INVALID}: duplicate element name {node.name!r}")
        self._nodes[node.name] = node
        return node

    def add(
        self,
        name: str,
        rect: Rect,
        parent: Node | str | None = None,
        tag: str = "div",
        style: Style | Mapping[str, Any] | None = None,
        **attrs: Any,
    ) -> Node:
        """Append an element. attrs are Node layout fields (offset_width, client_left, scroll_top, ...)."""
        parent_node = self.get(parent) if isinstance(parent, str) else (parent or self.body)
        if not isinstance(style, Style):
            style = Style.from_mapping(style)
        node = self._register(Node(name=name, rect=rect, scene=self, parent=parent_node, tag=tag, style=style, **attrs))
        parent_node.children.append(node)
        return node

    def get(self, name: str) -> Node:
        try:
            return self._nodes[name]
        except KeyError:
            raise KeyError(f"{ELEMENT_NOT_FOUND}: {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())
