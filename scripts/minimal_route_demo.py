#!/usr/bin/env python3
"""Minimal end-to-end demo: build a synthetic route, generate waypoints, and plot them."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys


def _resolve_src_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "src"


SRC_DIR = _resolve_src_dir()
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from route_cinematics.config import RouteCinematicsConfig  # noqa: E402
from route_cinematics.pipeline import run  # noqa: E402
from route_cinematics.polyline import encode_polyline  # noqa: E402
from route_cinematics.visualization import plot_waypoints  # noqa: E402


def _demo_directions(origin_lat: float, origin_lng: float) -> dict:
    """A two-leg staircase route expressed as a directions payload."""
    d = 0.0015
    corners = [
        (origin_lat, origin_lng),
        (origin_lat + d, origin_lng),
        (origin_lat + d, origin_lng + d),
        (origin_lat + 2 * d, origin_lng + d),
        (origin_lat + 2 * d, origin_lng + 2 * d),
    ]
    steps = [
        {"polyline": {"points": encode_polyline([a, b])}}
        for a, b in zip(corners[:-1], corners[1:])
    ]
    return {
        "routes": [
            {
                "overview_polyline": {"points": encode_polyline(corners)},
                "legs": [{"steps": steps[:2]}, {"steps": steps[2:]}],
            }
        ]
    }


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Minimal standalone waypoint generation + visualization script."
    )
    parser.add_argument(
        "--directions-json",
        type=Path,
        default=None,
        help="Directions payload; a synthetic loop is used when omitted.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("outputs/minimal_demo"),
        help="Output directory for waypoints and plots.",
    )
    parser.add_argument(
        "--interval-distance",
        type=float,
        default=20.0,
        help="Waypoint spacing in meters.",
    )
    parser.add_argument(
        "--smoothness",
        type=int,
        default=4,
        help="Spline smoothness.",
    )
    args = parser.parse_args()

    if args.directions_json is not None:
        payload = json.loads(args.directions_json.read_text(encoding="utf-8"))
    else:
        payload = _demo_directions(48.8566, 2.3522)

    cfg = RouteCinematicsConfig(output_dir=args.output_dir)
    cfg.resampling.interval_distance = args.interval_distance
    cfg.resampling.smoothness = args.smoothness
    cfg.resampling.__post_init__()

    artifacts = run(cfg, payload, output_dir=cfg.output_dir)
    print(f"Wrote {artifacts.num_waypoints} waypoints to {artifacts.output_file}")

    plot_path = cfg.output_dir / "waypoints.png"
    try:
        plot_waypoints(
            artifacts.waypoints,
            title=f"{artifacts.num_waypoints} waypoints",
            viz_config=cfg.viz,
            output_path=plot_path,
        )
    except ImportError as exc:
        print(f"Skipping plot: {exc}")
        return
    print(f"Saved plot to {plot_path}")


if __name__ == "__main__":
    main()
