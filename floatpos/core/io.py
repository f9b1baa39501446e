# floatpos/core/io.py
"""
Load and validate a scene from JSON.
Elements are listed parent-first; each names its parent (default: body).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from floatpos.core.error_codes import SCENE_INVALID
from floatpos.core.scene import Scene, VisualViewport
from floatpos.core.types import Rect

_NODE_ATTRS = (
    "offset_width",
    "offset_height",
    "client_left",
    "client_top",
    "client_width",
    "client_height",
    "scroll_left",
    "scroll_top",
    "scroll_width",
    "scroll_height",
)


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def parse_rect(data: Any) -> Rect:
    """Accept {x, y, width, height} or [x, y, width, height]."""
    if isinstance(data, Mapping):
        try:
            return Rect(float(data["x"]), float(data["y"]), float(data["width"]), float(data["height"]))
        except KeyError as e:
            raise ValueError(f"{SCENE_INVALID}: rect missing {e.args[0]!r}") from None
    if isinstance(data, (list, tuple)) and len(data) == 4:
        return Rect(*(float(v) for v in data))
    raise ValueError(f"{SCENE_INVALID}: rect must be an object or 4-list, got {data!r}")


def scene_from_dict(data: Mapping[str, Any]) -> Scene:
    """
    Build a Scene. Keys: viewport {width, height}, scroll {x, y}, document {width, height},
    layout_viewport, visual_viewport {width, height, offset_left, offset_top} or null,
    direction, elements [...].
    """
    if "viewport" not in data:
        raise ValueError(f"{SCENE_INVALID}: missing 'viewport'")
    viewport = data["viewport"]
    scroll = data.get("scroll") or {}
    document = data.get("document") or {}

    use_visual_viewport = True
    visual_viewport = None
    if "visual_viewport" in data:
        vv = data["visual_viewport"]
        if vv is None:
            use_visual_viewport = False
        else:
            visual_viewport = VisualViewport(
                width=float(vv["width"]),
                height=float(vv["height"]),
                offset_left=float(vv.get("offset_left", 0.0)),
                offset_top=float(vv.get("offset_top", 0.0)),
            )

    scene = Scene(
        viewport_width=float(viewport["width"]),
        viewport_height=float(viewport["height"]),
        scroll_x=float(scroll.get("x", 0.0)),
        scroll_y=float(scroll.get("y", 0.0)),
        document_width=document.get("width"),
        document_height=document.get("height"),
        layout_viewport=bool(data.get("layout_viewport", True)),
        visual_viewport=visual_viewport,
        use_visual_viewport=use_visual_viewport,
        direction=data.get("direction", "ltr"),
    )

    for i, el in enumerate(data.get("elements", [])):
        name = el.get("name")
        if not name:
            raise ValueError(f"{SCENE_INVALID}: element #{i} has no name")
        parent = el.get("parent")
        if parent is not None and parent not in scene:
            raise ValueError(f"{SCENE_INVALID}: parent {parent!r} of {name!r} not defined before it")
        attrs = {k: float(el[k]) for k in _NODE_ATTRS if k in el}
        scene.add(
            name,
            parse_rect(el.get("rect")),
            parent=parent,
            tag=el.get("tag", "div"),
            style=el.get("style"),
            **attrs,
        )
    return scene


def load_scene(path: str | Path, repo_root: Path | None = None) -> Scene:
    """
    Load a scene JSON file.
    Raises FileNotFoundError if path is missing, ValueError if the scene is malformed.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Scene file not found: {resolved}")
    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{SCENE_INVALID}: {e}") from e
    if not isinstance(data, Mapping):
        raise ValueError(f"{SCENE_INVALID}: top level must be an object")
    return scene_from_dict(data)
