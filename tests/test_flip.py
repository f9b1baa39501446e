# tests/test_flip.py
"""
Flip middleware: candidate order, best-fit selection, and end-to-end runs on
small scenes (reference near the top edge, a cramped viewport, a scroll box).
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from floatpos.core.compute import compute_position
from floatpos.core.flip import best_fit_placement, fallback_candidates, flip
from floatpos.core.offset import offset
from floatpos.core.scene import Scene
from floatpos.core.scene_platform import ScenePlatform
from floatpos.core.types import ComputePositionResult, Rect


def _near_top() -> Scene:
    scene = Scene(800, 600)
    scene.add("button", Rect(350, 4, 100, 30))
    scene.add("tooltip", Rect(0, 0, 160, 48), style={"position": "absolute"})
    return scene


def _cramped() -> Scene:
    scene = Scene(220, 140)
    scene.add("chip", Rect(80, 55, 60, 30))
    scene.add("dialog", Rect(0, 0, 200, 120), style={"position": "absolute"})
    return scene


def _scroll_box() -> Scene:
    scene = Scene(1024, 768)
    scene.add("panel", Rect(100, 100, 300, 200), style={"overflow": "auto", "position": "relative"}, scroll_height=900)
    scene.add("trigger", Rect(150, 260, 80, 24), parent="panel")
    scene.add("popover", Rect(0, 0, 120, 90), parent="panel", style={"position": "absolute"})
    return scene


def _position(scene: Scene, reference: str, floating: str, **kwargs: Any) -> ComputePositionResult:
    return asyncio.run(
        compute_position(scene.get(reference), scene.get(floating), platform=ScenePlatform(scene), **kwargs)
    )


def test_candidates_unaligned_uses_opposite_only() -> None:
    assert fallback_candidates("top") == ["top", "bottom"]
    assert fallback_candidates("left") == ["left", "right"]


def test_candidates_aligned_expands() -> None:
    assert fallback_candidates("top-start") == ["top-start", "top-end", "bottom-start", "bottom-end"]


def test_candidates_without_alignment_flip() -> None:
    assert fallback_candidates("top-start", flip_alignment=False) == ["top-start", "bottom-start"]


def test_candidates_explicit_fallbacks() -> None:
    assert fallback_candidates("left", ["right", "top"]) == ["left", "right", "top"]


def test_best_fit_ignores_negative_overflow_and_keeps_first_on_tie() -> None:
    history = [
        {"placement": "left", "overflows": [120, -10, -10]},
        {"placement": "top", "overflows": [65, -500, -10]},
        {"placement": "bottom", "overflows": [65, -10, -10]},
    ]
    assert best_fit_placement(history) == "top"
    assert best_fit_placement([]) is None


def test_flip_rejects_bad_options() -> None:
    with pytest.raises(ValueError):
        flip(fallback_strategy="closest")
    with pytest.raises(ValueError):
        flip(fallback_placements=["top", "center"])


def test_flip_to_opposite_side_near_top() -> None:
    result = _position(_near_top(), "button", "tooltip", placement="top", middleware=[flip()])
    assert result.placement == "bottom"
    assert (result.x, result.y) == (320, 34)
    assert result.reset_count == 1
    assert result.middleware_data["flip"] == {
        "index": 1,
        "overflows": [{"placement": "top", "overflows": [44, -320, -320]}],
    }
    assert result.warnings == []


def test_no_flip_when_placement_fits() -> None:
    result = _position(_near_top(), "button", "tooltip", placement="bottom", middleware=[flip()])
    assert result.placement == "bottom"
    assert result.reset_count == 0
    assert result.middleware_data["flip"] == {}


def test_aligned_placement_tries_alignment_first() -> None:
    result = _position(_near_top(), "button", "tooltip", placement="top-start", middleware=[flip()])
    assert result.placement == "bottom-start"
    assert (result.x, result.y) == (350, 34)
    assert result.reset_count == 2
    tried = [entry["placement"] for entry in result.middleware_data["flip"]["overflows"]]
    assert tried == ["top-start", "top-end"]


def test_main_axis_disabled_keeps_overflowing_placement() -> None:
    result = _position(_near_top(), "button", "tooltip", placement="top", middleware=[flip(main_axis=False)])
    assert result.placement == "top"
    assert result.y == -44


def test_offset_reapplied_after_flip() -> None:
    result = _position(_near_top(), "button", "tooltip", placement="top", middleware=[offset(10), flip()])
    assert result.placement == "bottom"
    assert result.y == 44


def test_best_fit_when_nothing_fits() -> None:
    result = _position(
        _cramped(), "chip", "dialog", placement="left",
        middleware=[flip(fallback_placements=["right", "top", "bottom"])],
    )
    assert result.placement == "top"
    assert (result.x, result.y) == (10, -65)
    assert result.reset_count == 4
    assert result.warnings == []
    history = result.middleware_data["flip"]["overflows"]
    assert [entry["placement"] for entry in history] == ["left", "right", "top"]
    assert history[0]["overflows"] == [120, -10, -10]


def test_initial_placement_fallback_when_nothing_fits() -> None:
    result = _position(
        _cramped(), "chip", "dialog", placement="left",
        middleware=[flip(fallback_placements=["right", "top", "bottom"], fallback_strategy="initialPlacement")],
    )
    assert result.placement == "left"
    assert (result.x, result.y) == (-120, 10)
    assert result.reset_count == 4
    assert result.warnings == []


def test_flip_inside_scroll_container() -> None:
    result = _position(_scroll_box(), "trigger", "popover", placement="bottom", middleware=[flip()])
    assert result.placement == "top"
    assert (result.x, result.y) == (30, 70)
    assert result.middleware_data["flip"]["overflows"][0]["overflows"][0] == 74


def test_flip_padding_counts_as_overflow() -> None:
    result = _position(_near_top(), "button", "tooltip", placement="bottom", middleware=[flip(padding=600)])
    assert result.placement == "bottom"
    assert result.reset_count == 2
    history = result.middleware_data["flip"]["overflows"]
    assert history == [{"placement": "bottom", "overflows": [82, 280, 280]}]
