# tests/test_scene_platform.py
"""
ScenePlatform: offset parents, containing blocks, element rects relative to the
offset parent, clipping rects, viewport/document rects and text direction.
"""

from __future__ import annotations

import pytest

from floatpos.core.platform import Platform
from floatpos.core.scene import Scene, VirtualElement, VisualViewport
from floatpos.core.scene_platform import ScenePlatform, is_containing_block, is_overflow_element
from floatpos.core.types import Rect


def test_body_child_offset_parent_is_window() -> None:
    scene = Scene(800, 600)
    tip = scene.add("tip", Rect(0, 0, 10, 10), style={"position": "absolute"})
    assert ScenePlatform(scene).get_offset_parent(tip) is scene.window


def test_positioned_ancestor_is_offset_parent() -> None:
    scene = Scene(800, 600)
    box = scene.add("box", Rect(10, 10, 100, 100), style={"position": "relative"})
    tip = scene.add("tip", Rect(0, 0, 10, 10), parent=box, style={"position": "absolute"})
    assert ScenePlatform(scene).get_offset_parent(tip) is box


def test_fixed_element_inside_transformed_ancestor() -> None:
    scene = Scene(800, 600)
    card = scene.add("card", Rect(200, 150, 400, 300), style={"transform": "scale(1)"})
    hint = scene.add("hint", Rect(0, 0, 140, 40), parent=card, style={"position": "fixed"})
    assert ScenePlatform(scene).get_offset_parent(hint) is card


def test_fixed_element_without_containing_block_uses_window() -> None:
    scene = Scene(800, 600)
    card = scene.add("card", Rect(200, 150, 400, 300))
    hint = scene.add("hint", Rect(0, 0, 140, 40), parent=card, style={"position": "fixed"})
    assert ScenePlatform(scene).get_offset_parent(hint) is scene.window


def test_static_table_cell_is_skipped() -> None:
    scene = Scene(800, 600)
    cell = scene.add("cell", Rect(0, 0, 50, 50), tag="td")
    tip = scene.add("tip", Rect(0, 0, 10, 10), parent=cell, style={"position": "absolute"})
    assert ScenePlatform(scene).get_offset_parent(tip) is scene.window


def test_positioned_table_cell_is_kept() -> None:
    scene = Scene(800, 600)
    cell = scene.add("cell", Rect(0, 0, 50, 50), tag="td", style={"position": "relative"})
    tip = scene.add("tip", Rect(0, 0, 10, 10), parent=cell, style={"position": "absolute"})
    assert ScenePlatform(scene).get_offset_parent(tip) is cell


@pytest.mark.parametrize(
    "style,expected",
    [
        ({}, False),
        ({"transform": "rotate(3deg)"}, True),
        ({"perspective": "100px"}, True),
        ({"filter": "blur(2px)"}, True),
        ({"backdrop_filter": "blur(2px)"}, True),
        ({"will_change": "transform"}, True),
        ({"will_change": "opacity"}, False),
        ({"contain": "paint"}, True),
        ({"contain": "size"}, False),
    ],
)
def test_containing_block_styles(style: dict, expected: bool) -> None:
    scene = Scene(100, 100)
    node = scene.add("n", Rect(0, 0, 10, 10), style=style)
    assert is_containing_block(node) is expected


def test_overflow_element_detection() -> None:
    scene = Scene(100, 100)
    assert is_overflow_element(scene.add("a", Rect(0, 0, 1, 1), style={"overflow": "hidden"}))
    assert is_overflow_element(scene.add("b", Rect(0, 0, 1, 1), style={"overflow_y": "scroll"}))
    assert not is_overflow_element(scene.add("c", Rect(0, 0, 1, 1)))
    assert not is_overflow_element(scene.add("d", Rect(0, 0, 1, 1), style={"overflow": "auto", "display": "inline"}))


def test_element_rects_relative_to_offset_parent() -> None:
    scene = Scene(1024, 768)
    panel = scene.add("panel", Rect(100, 100, 300, 200), style={"overflow": "auto", "position": "relative"},
                      scroll_height=900)
    trigger = scene.add("trigger", Rect(150, 260, 80, 24), parent=panel)
    popover = scene.add("popover", Rect(0, 0, 120, 90), parent=panel, style={"position": "absolute"})
    rects = ScenePlatform(scene).get_element_rects(trigger, popover, "absolute")
    assert rects.reference == Rect(50, 160, 80, 24)
    assert rects.floating == Rect(0, 0, 120, 90)

    panel.scroll_top = 40
    rects = ScenePlatform(scene).get_element_rects(trigger, popover, "absolute")
    assert rects.reference.y == 200


def test_element_rects_include_border_of_offset_parent() -> None:
    scene = Scene(800, 600)
    card = scene.add("card", Rect(200, 150, 400, 300), style={"transform": "none", "position": "relative"},
                     client_left=1, client_top=1)
    anchor = scene.add("anchor", Rect(260, 200, 60, 20), parent=card)
    hint = scene.add("hint", Rect(0, 0, 140, 40), parent=card, style={"position": "absolute"})
    rects = ScenePlatform(scene).get_element_rects(anchor, hint, "absolute")
    assert rects.reference == Rect(59, 49, 60, 20)


def test_element_rects_page_scroll() -> None:
    scene = Scene(800, 600, scroll_y=100, document_height=2000)
    button = scene.add("button", Rect(10, 50, 20, 20))
    tip = scene.add("tip", Rect(0, 0, 10, 10), style={"position": "absolute"})
    platform = ScenePlatform(scene)
    assert platform.get_element_rects(button, tip, "absolute").reference.y == 150
    assert platform.get_element_rects(button, tip, "fixed").reference.y == 50


def test_scaled_offset_parent_divides_out_scale() -> None:
    scene = Scene(800, 600)
    zoom = scene.add("zoom", Rect(0, 0, 200, 200), style={"position": "relative"}, offset_width=100, offset_height=100)
    ref = scene.add("ref", Rect(50, 50, 20, 20), parent=zoom, offset_width=10, offset_height=10)
    tip = scene.add("tip", Rect(0, 0, 10, 10), parent=zoom, style={"position": "absolute"})
    platform = ScenePlatform(scene)
    assert platform.is_scaled(zoom)
    assert platform.get_element_rects(ref, tip, "absolute").reference == Rect(25, 25, 10, 10)


def test_convert_rect_back_to_viewport() -> None:
    scene = Scene(800, 600)
    box = scene.add("box", Rect(100, 50, 200, 200), style={"position": "relative"}, scroll_top=30)
    platform = ScenePlatform(scene)
    out = platform.convert_offset_parent_relative_rect_to_viewport_relative_rect(Rect(10, 10, 5, 5), box, "absolute")
    assert out == Rect(110, 30, 5, 5)
    assert platform.convert_offset_parent_relative_rect_to_viewport_relative_rect(
        Rect(1, 2, 3, 4), scene.html, "absolute"
    ) == Rect(1, 2, 3, 4)


def test_clipping_rect_of_body_child_is_viewport() -> None:
    scene = Scene(800, 600)
    tip = scene.add("tip", Rect(0, 0, 10, 10), style={"position": "absolute"})
    clip = ScenePlatform(scene).get_clipping_rect(tip, "clippingAncestors", "viewport", "absolute")
    assert clip == Rect(0, 0, 800, 600)


def test_clipping_rect_intersects_scroll_container() -> None:
    scene = Scene(1024, 768)
    panel = scene.add("panel", Rect(100, 100, 300, 200), style={"overflow": "auto", "position": "relative"})
    popover = scene.add("popover", Rect(0, 0, 120, 90), parent=panel, style={"position": "absolute"})
    clip = ScenePlatform(scene).get_clipping_rect(popover, "clippingAncestors", "viewport", "absolute")
    assert clip == Rect(100, 100, 300, 200)


def test_static_overflow_container_does_not_clip_absolute_child() -> None:
    scene = Scene(800, 600)
    box = scene.add("box", Rect(0, 0, 100, 100), style={"overflow": "hidden"})
    tip = scene.add("tip", Rect(0, 0, 10, 10), parent=box, style={"position": "absolute"})
    platform = ScenePlatform(scene)
    assert platform.get_clipping_element_ancestors(tip) == []
    assert platform.get_clipping_rect(tip, "clippingAncestors", "viewport", "absolute") == Rect(0, 0, 800, 600)


def test_nested_clipping_ancestors() -> None:
    scene = Scene(800, 600)
    outer = scene.add("outer", Rect(0, 0, 400, 400), style={"overflow": "hidden"})
    inner = scene.add("inner", Rect(200, 200, 400, 400), parent=outer, style={"overflow": "scroll"})
    tip = scene.add("tip", Rect(0, 0, 10, 10), parent=inner)
    platform = ScenePlatform(scene)
    assert platform.get_clipping_element_ancestors(tip) == [inner, outer]
    assert platform.get_clipping_rect(tip, "clippingAncestors", "viewport", "absolute") == Rect(200, 200, 200, 200)


def test_explicit_boundary_rect_and_document_root() -> None:
    scene = Scene(800, 600, document_height=1500)
    tip = scene.add("tip", Rect(0, 0, 10, 10))
    platform = ScenePlatform(scene)
    assert platform.get_clipping_rect(tip, Rect(50, 50, 100, 100), "viewport", "absolute") == Rect(50, 50, 100, 100)
    assert platform.get_clipping_rect(tip, [], "document", "absolute") == Rect(0, 0, 800, 1500)


def test_disjoint_boundary_gives_negative_size() -> None:
    scene = Scene(800, 600)
    tip = scene.add("tip", Rect(0, 0, 10, 10))
    clip = ScenePlatform(scene).get_clipping_rect(tip, Rect(900, 0, 50, 50), "viewport", "absolute")
    assert clip.width < 0


def test_document_rect_rtl_shift() -> None:
    scene = Scene(800, 600, document_width=1200, direction="rtl")
    rect = ScenePlatform(scene).get_document_rect()
    assert rect.x == -400
    assert rect.width == 1200


def test_viewport_rect_visual_viewport_offsets() -> None:
    vv = VisualViewport(width=400, height=300, offset_left=20, offset_top=10)
    scene = Scene(800, 600, visual_viewport=vv, layout_viewport=False)
    platform = ScenePlatform(scene)
    assert platform.get_viewport_rect("absolute") == Rect(0, 0, 400, 300)
    assert platform.get_viewport_rect("fixed") == Rect(20, 10, 400, 300)


def test_viewport_rect_without_visual_viewport() -> None:
    scene = Scene(800, 600, use_visual_viewport=False)
    assert ScenePlatform(scene).get_viewport_rect("absolute") == Rect(0, 0, 800, 600)


def test_is_rtl_inherits_direction() -> None:
    scene = Scene(800, 600)
    box = scene.add("box", Rect(0, 0, 10, 10), style={"direction": "rtl"})
    child = scene.add("child", Rect(0, 0, 5, 5), parent=box)
    platform = ScenePlatform(scene)
    assert platform.is_rtl(child) is True
    assert platform.is_rtl(scene.body) is False
    assert platform.is_rtl(VirtualElement(Rect(0, 0, 1, 1), context_element=child)) is True
    assert platform.is_rtl(VirtualElement(Rect(0, 0, 1, 1))) is False


def test_virtual_reference_rect() -> None:
    scene = Scene(800, 600)
    tip = scene.add("tip", Rect(0, 0, 10, 10), style={"position": "absolute"})
    cursor = VirtualElement(Rect(300, 200, 0, 0))
    platform = ScenePlatform(scene)
    assert platform.is_element(cursor) is False
    assert platform.get_element_rects(cursor, tip, "absolute").reference == Rect(300, 200, 0, 0)


def test_scene_rejects_bad_input() -> None:
    scene = Scene(800, 600)
    scene.add("a", Rect(0, 0, 1, 1))
    with pytest.raises(ValueError):
        scene.add("a", Rect(0, 0, 1, 1))
    with pytest.raises(ValueError):
        scene.add("b", Rect(0, 0, -1, 1))
    with pytest.raises(ValueError):
        scene.add("c", Rect(0, 0, 1, 1), style={"colour": "red"})
    with pytest.raises(KeyError):
        scene.get("missing")


def test_scene_platform_satisfies_protocol() -> None:
    assert isinstance(ScenePlatform(Scene(10, 10)), Platform)
