# floatpos/core/runner.py
"""
CLI entrypoint: load a scene, compute the floating element's position with the
requested middleware, measure fit, and write position.json / run_metadata.json.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from floatpos.core.compute import compute_position
from floatpos.core.config import (
    DEFAULT_FALLBACK_STRATEGY,
    DEFAULT_PLACEMENT,
    DEFAULT_STRATEGY,
    FALLBACK_STRATEGIES,
    REPORTS_DIR,
    STRATEGIES,
)
from floatpos.core.error_codes import ELEMENT_NOT_FOUND, RUN_FAILED, SCENE_INVALID, user_message
from floatpos.core.flip import flip
from floatpos.core.io import load_scene
from floatpos.core.offset import offset
from floatpos.core.placement import ALL_PLACEMENTS
from floatpos.core.reporting import (
    ensure_report_dir,
    position_to_dict,
    run_metadata_dict,
    write_position_json,
    write_run_metadata_json,
)
from floatpos.core.scene_platform import ScenePlatform
from floatpos.core.types import Middleware
from floatpos.core.validate import measure_fit

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compute a floating element's position inside a scene.")
    p.add_argument("--scene", type=str, required=True, help="Scene JSON path (repo-relative)")
    p.add_argument("--reference", type=str, required=True, help="Reference element name")
    p.add_argument("--floating", type=str, required=True, help="Floating element name")
    p.add_argument("--placement", type=str, default=DEFAULT_PLACEMENT, choices=ALL_PLACEMENTS, help="Requested placement")
    p.add_argument("--strategy", type=str, default=DEFAULT_STRATEGY, choices=STRATEGIES, help="Positioning strategy")
    p.add_argument("--offset", type=float, default=None, help="Main-axis offset (px)")
    p.add_argument("--flip", action="store_true", help="Enable the flip middleware")
    p.add_argument(
        "--fallback-strategy", type=str, default=DEFAULT_FALLBACK_STRATEGY, choices=FALLBACK_STRATEGIES,
        dest="fallback_strategy", help="Flip fallback when every placement overflows",
    )
    p.add_argument("--padding", type=float, default=0.0, help="Overflow padding (px) for flip")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    return p.parse_args(argv)


def build_middleware(args: argparse.Namespace) -> list[Middleware | None]:
    """offset runs before flip so flipped placements are re-offset after each reset."""
    return [
        offset(args.offset) if args.offset is not None else None,
        flip(fallback_strategy=args.fallback_strategy, padding=args.padding) if args.flip else None,
    ]


async def _run(args: argparse.Namespace, repo_root: Path) -> tuple[dict, list[str]]:
    try:
        scene = load_scene(args.scene, repo_root=repo_root)
    except FileNotFoundError as e:
        logger.error("%s", e)
        raise SystemExit(user_message(RUN_FAILED)) from e
    except ValueError as e:
        logger.error("%s", e)
        raise SystemExit(user_message(SCENE_INVALID)) from e
    try:
        reference = scene.get(args.reference)
        floating = scene.get(args.floating)
    except KeyError as e:
        logger.error("%s", e)
        raise SystemExit(user_message(ELEMENT_NOT_FOUND)) from e

    platform = ScenePlatform(scene)
    middleware = build_middleware(args)
    result = await compute_position(
        reference,
        floating,
        platform=platform,
        placement=args.placement,
        strategy=args.strategy,
        middleware=middleware,
    )
    metrics = await measure_fit(platform, floating, result)
    data = position_to_dict(result, reference=args.reference, floating=args.floating, metrics=metrics)
    names = [m.name for m in middleware if m]
    return data, names


def main(argv: list[str] | None = None) -> None:
    log_level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, log_level_name, logging.INFO))

    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    data, names = asyncio.run(_run(args, repo_root))

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    position_path = write_position_json(report_dir, data)
    metadata_path = write_run_metadata_json(
        report_dir,
        run_metadata_dict(
            args.run_name, args.scene, args.reference, args.floating, args.placement, args.strategy, names
        ),
    )
    for p in (position_path, metadata_path):
        print(p)
    print("Placement used:", data["result"]["placement"])
    for key in data["warnings"]:
        print(user_message(key), file=sys.stderr)
    if data["warnings"]:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
