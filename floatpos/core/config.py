# floatpos/core/config.py
"""
Central configuration for floating-element positioning.
All defaults live here; no magic values in other modules.
"""

from __future__ import annotations
import os

# ----- Placement defaults -----
DEFAULT_PLACEMENT: str = "bottom"
"""Placement used when the caller does not pass one."""

DEFAULT_STRATEGY: str = "absolute"
"""Positioning strategy passed through to the platform ("absolute" or "fixed")."""

SIDES: tuple[str, ...] = ("top", "right", "bottom", "left")
ALIGNMENTS: tuple[str, ...] = ("start", "end")
STRATEGIES: tuple[str, ...] = ("absolute", "fixed")

# ----- Pipeline -----
MAX_RESETS: int = 50
"""Upper bound on middleware resets per compute_position call. Further resets are ignored."""

# ----- Overflow detection -----
DEFAULT_BOUNDARY: str = "clippingAncestors"
"""Boundary keyword: clip against every clipping ancestor of the element."""

DEFAULT_ROOT_BOUNDARY: str = "viewport"
"""Root boundary keyword: "viewport" or "document"."""

DEFAULT_ELEMENT_CONTEXT: str = "floating"
ELEMENT_CONTEXTS: tuple[str, ...] = ("floating", "reference")

DEFAULT_PADDING: float = 0.0
"""Uniform inset (px) applied to every side of the clipping rect."""

# ----- Flip -----
DEFAULT_FALLBACK_STRATEGY: str = "bestFit"
FALLBACK_STRATEGIES: tuple[str, ...] = ("bestFit", "initialPlacement")

# ----- Reporting -----
REPORTS_DIR: str = "reports"

VISIBLE_RATIO_TOLERANCE: float = 1e-6
"""Tolerance on the visible-area ratio when deciding that a box fits its clip."""

# ----- Debug flags -----
DEBUG: bool = os.environ.get("FLOATPOS_DEBUG", "").lower() in ("1", "true", "yes")
"""Log every middleware step at DEBUG level. Set env FLOATPOS_DEBUG=1 to enable."""
