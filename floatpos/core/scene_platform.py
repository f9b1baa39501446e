# floatpos/core/scene_platform.py
"""
Platform adapter over a Scene. Resolves offset parents, containing blocks,
clipping ancestors, viewport and document rects the way a browser lays them out,
so the engine can be driven without a live document.
"""

from __future__ import annotations

import math
import re
from typing import Any, Sequence

from floatpos.core.geometry import intersect_rects, translate
from floatpos.core.scene import Node, Scene, VirtualElement, VisualViewport, Window
from floatpos.core.types import Dimensions, ElementRects, Rect

_OVERFLOW_RE = re.compile(r"auto|scroll|overlay|hidden")
_LAST_TRAVERSABLE = ("html", "body", "#document")


def _round(value: float) -> float:
    """Half-up rounding, as layout engines report integer box sizes."""
    return math.floor(value + 0.5)


def node_name(node: Any) -> str:
    if isinstance(node, Node):
        return node.tag
    return ""


def is_overflow_element(node: Node) -> bool:
    style = node.style
    return bool(_OVERFLOW_RE.search(style.overflow_x + style.overflow_y)) and style.display not in ("inline", "contents")


def is_table_element(node: Node) -> bool:
    return node.tag in ("table", "td", "th")


def is_containing_block(node: Node) -> bool:
    """Properties that make an element the containing block of fixed/absolute descendants."""
    style = node.style
    return (
        style.transform != "none"
        or style.perspective != "none"
        or style.backdrop_filter != "none"
        or style.filter != "none"
        or any(value in style.will_change for value in ("transform", "perspective", "filter"))
        or any(value in style.contain for value in ("paint", "layout", "strict", "content"))
    )


def is_last_traversable_node(node: Any) -> bool:
    return node_name(node) in _LAST_TRAVERSABLE


def get_parent_node(node: Node) -> Node:
    if node.tag == "html":
        return node
    return node.parent or node.scene.html


class ScenePlatform:
    """Implements the Platform protocol for a Scene."""

    def __init__(self, scene: Scene) -> None:
        self.scene = scene

    # ----- element helpers -----

    def is_element(self, value: Any) -> bool:
        return isinstance(value, Node)

    def get_document_element(self, element: Any) -> Node:
        return self.scene.html

    def is_rtl(self, element: Any) -> bool:
        if isinstance(element, VirtualElement):
            element = element.context_element
        if element is None:
            return self.scene.direction == "rtl"
        return element.direction == "rtl"

    def get_dimensions(self, element: Any) -> Dimensions:
        if isinstance(element, Node):
            return Dimensions(width=element.offset_width, height=element.offset_height)
        rect = self.get_bounding_client_rect(element)
        return Dimensions(width=rect.width, height=rect.height)

    def get_bounding_client_rect(
        self,
        element: Any,
        include_scale: bool = False,
        is_fixed_strategy: bool = False,
    ) -> Rect:
        if isinstance(element, VirtualElement):
            client_rect = element.get_bounding_client_rect()
        else:
            client_rect = element.rect

        scale_x = scale_y = 1.0
        if include_scale and isinstance(element, Node):
            if element.offset_width > 0:
                scale_x = _round(client_rect.width) / element.offset_width or 1.0
            if element.offset_height > 0:
                scale_y = _round(client_rect.height) / element.offset_height or 1.0

        vv = self.scene.visual_viewport
        add_visual_offsets = not self.scene.layout_viewport and is_fixed_strategy and vv is not None
        x = (client_rect.x + (vv.offset_left if add_visual_offsets else 0.0)) / scale_x
        y = (client_rect.y + (vv.offset_top if add_visual_offsets else 0.0)) / scale_y
        return Rect(x=x, y=y, width=client_rect.width / scale_x, height=client_rect.height / scale_y)

    def is_scaled(self, node: Node) -> bool:
        rect = self.get_bounding_client_rect(node)
        return _round(rect.width) != node.offset_width or _round(rect.height) != node.offset_height

    def get_node_scroll(self, node: Any) -> tuple[float, float]:
        if isinstance(node, Node):
            return node.scroll_left, node.scroll_top
        return self.scene.window.page_x_offset, self.scene.window.page_y_offset

    def get_window_scroll_bar_x(self, element: Any) -> float:
        return self.get_bounding_client_rect(self.scene.html).left + self.get_node_scroll(element)[0]

    # ----- offset parent -----

    def _true_offset_parent(self, node: Any) -> Node | None:
        """Nearest positioned ancestor, table cell or body; None for fixed elements."""
        if not isinstance(node, Node) or node.style.position == "fixed":
            return None
        if node.style.display == "none" or node.tag in ("html", "body"):
            return None
        for ancestor in node.ancestors():
            if ancestor.style.position != "static" or is_table_element(ancestor) or ancestor.tag == "body":
                return ancestor
        return None

    def _containing_block(self, node: Node) -> Node | None:
        current = get_parent_node(node)
        while isinstance(current, Node) and not is_last_traversable_node(current):
            if is_containing_block(current):
                return current
            current = get_parent_node(current)
        return None

    def get_offset_parent(self, element: Any) -> Node | Window:
        window = self.scene.window
        if not isinstance(element, Node):
            return window
        offset_parent = self._true_offset_parent(element)
        while offset_parent is not None and is_table_element(offset_parent) and offset_parent.style.position == "static":
            offset_parent = self._true_offset_parent(offset_parent)

        if offset_parent is not None and (
            offset_parent.tag == "html"
            or (
                offset_parent.tag == "body"
                and offset_parent.style.position == "static"
                and not is_containing_block(offset_parent)
            )
        ):
            return window
        return offset_parent or self._containing_block(element) or window

    # ----- offset-parent-relative rects -----

    def _offset_parent_adjustments(
        self, offset_parent: Any, strategy: str, include_scroll_bar: bool
    ) -> tuple[tuple[float, float], tuple[float, float]]:
        """(scroll, offsets) between viewport space and the offset parent's padding box."""
        is_element = isinstance(offset_parent, Node)
        html = self.scene.html
        scroll = (0.0, 0.0)
        offsets = (0.0, 0.0)
        if is_element or strategy != "fixed":
            if node_name(offset_parent) != "body" or is_overflow_element(html):
                scroll = self.get_node_scroll(offset_parent)
            if is_element:
                offset_rect = self.get_bounding_client_rect(offset_parent, True)
                offsets = (offset_rect.x + offset_parent.client_left, offset_rect.y + offset_parent.client_top)
            elif include_scroll_bar:
                offsets = (self.get_window_scroll_bar_x(html), 0.0)
        return scroll, offsets

    def get_rect_relative_to_offset_parent(self, element: Any, offset_parent: Any, strategy: str) -> Rect:
        is_element = isinstance(offset_parent, Node)
        rect = self.get_bounding_client_rect(
            element,
            is_element and self.is_scaled(offset_parent),
            strategy == "fixed",
        )
        (scroll_left, scroll_top), (off_x, off_y) = self._offset_parent_adjustments(offset_parent, strategy, True)
        return Rect(
            x=rect.left + scroll_left - off_x,
            y=rect.top + scroll_top - off_y,
            width=rect.width,
            height=rect.height,
        )

    def convert_offset_parent_relative_rect_to_viewport_relative_rect(
        self, rect: Rect, offset_parent: Any, strategy: str
    ) -> Rect:
        if offset_parent is self.scene.html:
            return rect
        (scroll_left, scroll_top), (off_x, off_y) = self._offset_parent_adjustments(offset_parent, strategy, False)
        return translate(rect, off_x - scroll_left, off_y - scroll_top)

    def get_element_rects(self, reference: Any, floating: Any, strategy: str) -> ElementRects:
        dims = self.get_dimensions(floating)
        return ElementRects(
            reference=self.get_rect_relative_to_offset_parent(reference, self.get_offset_parent(floating), strategy),
            floating=Rect(x=0.0, y=0.0, width=dims.width, height=dims.height),
        )

    # ----- clipping -----

    def get_viewport_rect(self, strategy: str) -> Rect:
        html = self.scene.html
        vv: VisualViewport | None = self.scene.visual_viewport
        width, height = html.client_width, html.client_height
        x = y = 0.0
        if vv is not None:
            width, height = vv.width, vv.height
            if self.scene.layout_viewport or strategy == "fixed":
                x, y = vv.offset_left, vv.offset_top
        return Rect(x=x, y=y, width=width, height=height)

    def get_document_rect(self) -> Rect:
        """Entire scrollable document area, shifted left for RTL documents."""
        html, body = self.scene.html, self.scene.body
        scroll_left, scroll_top = self.get_node_scroll(html)
        width = max(html.scroll_width, html.client_width, body.scroll_width, body.client_width)
        height = max(html.scroll_height, html.client_height, body.scroll_height, body.client_height)
        x = -scroll_left + self.get_window_scroll_bar_x(html)
        y = -scroll_top
        if body.direction == "rtl":
            x += max(html.client_width, body.client_width) - width
        return Rect(x=x, y=y, width=width, height=height)

    def get_inner_bounding_client_rect(self, node: Node, strategy: str) -> Rect:
        rect = self.get_bounding_client_rect(node, False, strategy == "fixed")
        return Rect(
            x=rect.left + node.client_left,
            y=rect.top + node.client_top,
            width=node.client_width,
            height=node.client_height,
        )

    def get_client_rect_from_clipping_ancestor(self, ancestor: Any, strategy: str) -> Rect:
        if ancestor == "viewport":
            return self.get_viewport_rect(strategy)
        if isinstance(ancestor, Node):
            return self.get_inner_bounding_client_rect(ancestor, strategy)
        if isinstance(ancestor, Rect):
            return ancestor
        return self.get_document_rect()

    def _nearest_overflow_ancestor(self, node: Node) -> Node:
        parent = get_parent_node(node)
        while True:
            if is_last_traversable_node(parent):
                return self.scene.body
            if is_overflow_element(parent):
                return parent
            parent = get_parent_node(parent)

    def get_overflow_ancestors(self, node: Node) -> list[Any]:
        """Scrollable ancestors up to body, then window, visual viewport and (if scrollable) body."""
        result: list[Any] = []
        current = node
        while True:
            scrollable = self._nearest_overflow_ancestor(current)
            if scrollable is self.scene.body:
                result.append(self.scene.window)
                if self.scene.visual_viewport is not None:
                    result.append(self.scene.visual_viewport)
                if is_overflow_element(scrollable):
                    result.append(scrollable)
                return result
            result.append(scrollable)
            current = scrollable

    def get_clipping_element_ancestors(self, element: Node) -> list[Node]:
        """Overflow ancestors that clip the element, minus static non-containing blocks skipped by absolute/fixed."""
        result = [
            el for el in self.get_overflow_ancestors(element)
            if isinstance(el, Node) and el.tag != "body"
        ]
        current: Any = element
        containing_style = None
        while isinstance(current, Node) and not is_last_traversable_node(current):
            style = current.style
            if (
                style.position == "static"
                and containing_style is not None
                and containing_style.position in ("absolute", "fixed")
                and not is_containing_block(current)
            ):
                result = [ancestor for ancestor in result if ancestor is not current]
            else:
                containing_style = style
            current = get_parent_node(current)
        return result

    def get_clipping_rect(self, element: Any, boundary: Any, root_boundary: Any, strategy: str) -> Rect:
        """Area the element can be visible in: intersection of every clipping ancestor and the root boundary."""
        if boundary == "clippingAncestors":
            ancestors: list[Any] = self.get_clipping_element_ancestors(element) if isinstance(element, Node) else []
        elif isinstance(boundary, Sequence) and not isinstance(boundary, str):
            ancestors = list(boundary)
        else:
            ancestors = [boundary]
        rects = [
            self.get_client_rect_from_clipping_ancestor(ancestor, strategy)
            for ancestor in [*ancestors, root_boundary]
        ]
        return intersect_rects(rects)
