"""Command-line entrypoints for route_cinematics."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from importlib import metadata

from .config import (
    SUPPORTED_CROSSFADE_MODES,
    SUPPORTED_HEADING_POLICIES,
    SUPPORTED_ROUTE_SOURCES,
    RouteCinematicsConfig,
)
from .polyline import decode_polyline
from .pipeline import extract_route_path, run_route_path


def _package_version() -> str:
    try:
        return metadata.version("route-cinematics")
    except metadata.PackageNotFoundError:
        return "0.1.0"


def _configure_logging(log_level: str) -> None:
    level_name = (log_level or "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ValueError(
            f"Invalid --log-level: {log_level!r}. "
            "Allowed values: DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    logging.basicConfig(level=level, format="%(message)s", force=True)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--version",
        action="version",
        version=f"rcin {_package_version()}",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Python logging level.",
    )
    parser.add_argument(
        "--config-json",
        type=Path,
        default=None,
        help="Optional JSON file serialized from RouteCinematicsConfig.",
    )


def _build_waypoints_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcin",
        description=(
            "Turn a driving route into evenly spaced, oriented camera waypoints. "
            "For frame interpolation use: `rcin enhance ...`."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _add_common_arguments(parser)
    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument(
        "--directions-json",
        type=Path,
        default=None,
        help="Directions response JSON holding routes/legs/steps.",
    )
    source_group.add_argument(
        "--polyline",
        type=str,
        default=None,
        help="A single encoded polyline for the whole route.",
    )
    parser.add_argument(
        "--route-source",
        type=str,
        default=None,
        help=f"Which polyline shape to read: {' | '.join(SUPPORTED_ROUTE_SOURCES)}.",
    )
    parser.add_argument(
        "--interval-distance",
        type=float,
        default=None,
        help="Waypoint spacing in meters.",
    )
    parser.add_argument(
        "--smoothness",
        type=int,
        default=None,
        help="Spline smoothness (>= 1).",
    )
    parser.add_argument(
        "--heading-policy",
        type=str,
        default=None,
        help=f"Heading policy: {' | '.join(SUPPORTED_HEADING_POLICIES)}.",
    )
    parser.add_argument(
        "--no-spline",
        action="store_true",
        help="Resample the raw route without Catmull-Rom smoothing.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory for waypoints.json (defaults to the config output_dir).",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Also write waypoints.png (requires matplotlib).",
    )
    return parser


def _build_enhance_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcin enhance",
        description="Insert interpolated and crossfaded frames between captured stills.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--frames-dir",
        type=Path,
        required=True,
        help="Directory of captured stills, ordered by filename.",
    )
    parser.add_argument(
        "--frame-interpolation",
        type=int,
        default=None,
        help="Frames per original gap (1 disables interpolation).",
    )
    parser.add_argument(
        "--crossfade-strength",
        type=float,
        default=None,
        help="Crossfade frame opacity in [0, 1] (0 disables it).",
    )
    parser.add_argument(
        "--crossfade-mode",
        type=str,
        default=None,
        help=f"Crossfade compositing: {' | '.join(SUPPORTED_CROSSFADE_MODES)}.",
    )
    blur_group = parser.add_mutually_exclusive_group()
    blur_group.add_argument("--motion-blur", dest="motion_blur", action="store_true", default=None)
    blur_group.add_argument("--no-motion-blur", dest="motion_blur", action="store_false")
    parser.add_argument(
        "--frame-rate",
        type=float,
        default=None,
        help="Original capture frame rate; output fps is scaled by frames per gap.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for blending.",
    )
    output_group = parser.add_mutually_exclusive_group(required=True)
    output_group.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output MP4 path.",
    )
    output_group.add_argument(
        "--frames-output-dir",
        type=Path,
        default=None,
        help="Write the enhanced sequence as numbered PNG files instead of a video.",
    )
    return parser


def _parse_cli_args(argv: list[str] | None = None) -> tuple[str, argparse.Namespace]:
    tokens = list(sys.argv[1:] if argv is None else argv)
    command = "waypoints"
    if tokens and tokens[0] in {"waypoints", "enhance"}:
        command = tokens[0]
        tokens = tokens[1:]

    if command == "enhance":
        return command, _build_enhance_parser().parse_args(tokens)
    return command, _build_waypoints_parser().parse_args(tokens)


def _load_config(args: argparse.Namespace) -> RouteCinematicsConfig:
    if args.config_json is not None:
        return RouteCinematicsConfig.from_json(args.config_json)
    return RouteCinematicsConfig()


def build_config(args: argparse.Namespace) -> RouteCinematicsConfig:
    """Apply CLI overrides on top of the (optional) JSON config and re-validate."""
    config = _load_config(args)
    resampling = config.resampling
    if getattr(args, "route_source", None) is not None:
        config.route_source = args.route_source
    if getattr(args, "interval_distance", None) is not None:
        resampling.interval_distance = args.interval_distance
    if getattr(args, "smoothness", None) is not None:
        resampling.smoothness = args.smoothness
    if getattr(args, "heading_policy", None) is not None:
        resampling.heading_policy = args.heading_policy
    if getattr(args, "no_spline", False):
        resampling.apply_spline = False
    if getattr(args, "output_dir", None) is not None:
        config.output_dir = args.output_dir

    enhancement = config.enhancement
    if getattr(args, "frame_interpolation", None) is not None:
        enhancement.frame_interpolation = args.frame_interpolation
    if getattr(args, "crossfade_strength", None) is not None:
        enhancement.crossfade_strength = args.crossfade_strength
    if getattr(args, "crossfade_mode", None) is not None:
        enhancement.crossfade_mode = args.crossfade_mode
    if getattr(args, "motion_blur", None) is not None:
        enhancement.motion_blur = args.motion_blur
    if getattr(args, "workers", None) is not None:
        enhancement.max_workers = args.workers
    if getattr(args, "frame_rate", None) is not None:
        config.frame_rate = args.frame_rate

    config.__post_init__()
    resampling.__post_init__()
    enhancement.__post_init__()
    return config


def _run_waypoints(args: argparse.Namespace) -> None:
    config = build_config(args)
    if args.polyline is not None:
        route_path = decode_polyline(args.polyline, precision=config.polyline_precision)
    elif args.directions_json is not None:
        payload = json.loads(args.directions_json.read_text(encoding="utf-8"))
        route_path = extract_route_path(config, payload)
    else:
        raise ValueError("Provide --directions-json or --polyline.")
    if len(route_path) < 2:
        logging.getLogger(__name__).warning(
            "Route has %s point(s); writing an empty waypoint list.", len(route_path)
        )

    artifacts = run_route_path(config, route_path, output_dir=config.output_dir)

    print(f"Route points: {artifacts.num_route_points} ({artifacts.num_smoothed_points} after smoothing)")
    print(f"Route length: {artifacts.route_length_m:.1f} m")
    print(
        f"Waypoints: {artifacts.num_waypoints} every {config.resampling.interval_distance:g} m "
        f"({config.resampling.heading_policy} headings) -> {artifacts.output_file}"
    )
    if args.plot and artifacts.waypoints:
        from .visualization import plot_waypoints

        plot_path = config.output_dir / "waypoints.png"
        plot_waypoints(
            artifacts.waypoints,
            route_points=route_path,
            title=f"{artifacts.num_waypoints} waypoints, {artifacts.route_length_m:.0f} m",
            viz_config=config.viz,
            output_path=plot_path,
        )
        print(f"Plot: {plot_path}")
    if artifacts.warnings:
        print("Warnings:")
        for warning in artifacts.warnings:
            print(f"  - {warning}")


def _run_enhance(args: argparse.Namespace) -> None:
    from .enhance import FrameSequenceEnhancer
    from .frame_io import list_frame_files, read_frames, write_frame_sequence, write_video

    config = build_config(args)
    paths = list_frame_files(args.frames_dir)
    if not paths:
        raise ValueError(f"No images found in {args.frames_dir}")
    frames = read_frames(paths)
    enhanced = FrameSequenceEnhancer(config.enhancement).enhance(frames)
    delay_ms = config.frame_delay_ms

    print(f"Frames: {len(frames)} -> {len(enhanced)} (delay {delay_ms:.1f} ms/frame)")
    if args.output is not None:
        output = write_video(enhanced, args.output, fps=1000.0 / delay_ms)
        print(f"Video: {output}")
    else:
        written = write_frame_sequence(enhanced, args.frames_output_dir)
        print(f"Wrote {len(written)} frames to {args.frames_output_dir}")


def main() -> None:
    command, args = _parse_cli_args()
    try:
        _configure_logging(getattr(args, "log_level", "INFO"))
        if command == "enhance":
            _run_enhance(args)
            return
        _run_waypoints(args)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        raise SystemExit(130) from None
    except Exception as exc:  # noqa: BLE001
        logger = logging.getLogger(__name__)
        if logging.getLogger().handlers:
            logger.error("Error: %s", exc)
            if logger.isEnabledFor(logging.DEBUG):
                logger.exception("Detailed traceback")
        else:
            print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from None


if __name__ == "__main__":
    main()
