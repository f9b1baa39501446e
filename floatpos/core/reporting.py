# floatpos/core/reporting.py
"""
Create reports/<run_name>/ and write position.json and run_metadata.json.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from floatpos.core.config import (
    DEFAULT_BOUNDARY,
    DEFAULT_FALLBACK_STRATEGY,
    DEFAULT_PLACEMENT,
    DEFAULT_ROOT_BOUNDARY,
    DEFAULT_STRATEGY,
    MAX_RESETS,
    REPORTS_DIR,
)
from floatpos.core.types import ComputePositionResult

SCHEMA_VERSION = "1"


def _jsonable(value: Any) -> Any:
    """middleware_data holds plain dicts/lists/numbers; anything else is stringified."""
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def position_to_dict(
    result: ComputePositionResult,
    reference: str = "",
    floating: str = "",
    metrics: dict[str, Any] | None = None,
) -> dict:
    """Exact structure for position.json."""
    return {
        "schema_version": SCHEMA_VERSION,
        "input": {"reference": reference, "floating": floating, "strategy": result.strategy},
        "result": {
            "x": result.x,
            "y": result.y,
            "placement": result.placement,
            "reset_count": result.reset_count,
        },
        "middleware_data": _jsonable(result.middleware_data),
        "metrics": dict(metrics or {}),
        "warnings": list(result.warnings),
    }


def run_metadata_dict(
    run_name: str,
    scene_path: str,
    reference: str,
    floating: str,
    placement: str,
    strategy: str,
    middleware: list[str],
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "scene_path": scene_path,
        "reference": reference,
        "floating": floating,
        "placement": placement,
        "strategy": strategy,
        "middleware": middleware,
        "config": {
            "DEFAULT_PLACEMENT": DEFAULT_PLACEMENT,
            "DEFAULT_STRATEGY": DEFAULT_STRATEGY,
            "MAX_RESETS": MAX_RESETS,
            "DEFAULT_BOUNDARY": DEFAULT_BOUNDARY,
            "DEFAULT_ROOT_BOUNDARY": DEFAULT_ROOT_BOUNDARY,
            "DEFAULT_FALLBACK_STRATEGY": DEFAULT_FALLBACK_STRATEGY,
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_position_json(report_dir: Path, data: dict) -> Path:
    """Write position.json to report_dir. Returns path to file."""
    path = report_dir / "position.json"
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(report_dir: Path, metadata: dict) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    return path
