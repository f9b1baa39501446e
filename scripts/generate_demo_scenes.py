#!/usr/bin/env python3
"""
Generate demo scene JSON files for the floatpos runner.

Scenes:
  near_top        reference hugging the viewport top (flip top -> bottom)
  scroll_box      popover inside a clipping scroll container
  rtl_menu        right-to-left document with an aligned menu
  transformed     fixed floating element inside a transformed ancestor
  cramped         viewport too small for every placement (best fit)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

# Output directory
OUTPUT_DIR = Path(__file__).parent.parent / "docs" / "assets" / "scenes"


def save_scene(filename: str, scene: dict[str, Any]) -> None:
    """Save scene to JSON file."""
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    path = OUTPUT_DIR / filename
    path.write_text(json.dumps(scene, indent=2), encoding="utf-8")
    print(f"Created: {path.name}")


def element(name: str, rect: list[float], parent: str | None = None, **extra: Any) -> dict[str, Any]:
    out: dict[str, Any] = {"name": name, "rect": rect}
    if parent:
        out["parent"] = parent
    out.update(extra)
    return out


def near_top() -> dict[str, Any]:
    return {
        "viewport": {"width": 800, "height": 600},
        "elements": [
            element("button", [350, 4, 100, 30]),
            element("tooltip", [0, 0, 160, 48], style={"position": "absolute"}),
        ],
    }


def scroll_box() -> dict[str, Any]:
    return {
        "viewport": {"width": 1024, "height": 768},
        "elements": [
            element("panel", [100, 100, 300, 200], style={"overflow": "auto", "position": "relative"},
                    scroll_height=900),
            element("trigger", [150, 260, 80, 24], parent="panel"),
            element("popover", [0, 0, 120, 90], parent="panel", style={"position": "absolute"}),
        ],
    }


def rtl_menu() -> dict[str, Any]:
    return {
        "viewport": {"width": 800, "height": 600},
        "direction": "rtl",
        "elements": [
            element("menu-button", [600, 40, 120, 32]),
            element("menu", [0, 0, 200, 240], style={"position": "absolute"}),
        ],
    }


def transformed() -> dict[str, Any]:
    return {
        "viewport": {"width": 800, "height": 600},
        "elements": [
            element("card", [200, 150, 400, 300], style={"transform": "translateX(0)"}, client_left=1, client_top=1),
            element("anchor", [260, 200, 60, 20], parent="card"),
            element("hint", [0, 0, 140, 40], parent="card", style={"position": "fixed"}),
        ],
    }


def cramped() -> dict[str, Any]:
    return {
        "viewport": {"width": 220, "height": 140},
        "elements": [
            element("chip", [80, 55, 60, 30]),
            element("dialog", [0, 0, 200, 120], style={"position": "absolute"}),
        ],
    }


def main() -> None:
    save_scene("near_top.json", near_top())
    save_scene("scroll_box.json", scroll_box())
    save_scene("rtl_menu.json", rtl_menu())
    save_scene("transformed.json", transformed())
    save_scene("cramped.json", cramped())


if __name__ == "__main__":
    main()
