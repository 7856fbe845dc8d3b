"""Public pipeline entrypoints for route camera-path workflows."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from .artifacts import RouteCameraArtifacts, write_waypoints
from .config import RouteCinematicsConfig
from .directions import path_from_overview, path_from_steps
from .geo import GeoPoint
from .validation import validate_waypoints
from .waypoints import WaypointGenerator


logger = logging.getLogger(__name__)

PathSource = Callable[[Mapping[str, Any], int, int], list[GeoPoint]]

PATH_SOURCES: dict[str, PathSource] = {
    "overview": lambda payload, route_index, precision: path_from_overview(
        payload, route_index=route_index, precision=precision
    ),
    "steps": lambda payload, route_index, precision: path_from_steps(
        payload, route_index=route_index, precision=precision
    ),
}


def register_path_source(name: str, source: PathSource) -> None:
    """Register or override a route path source at runtime."""
    PATH_SOURCES[name] = source


def extract_route_path(
    config: RouteCinematicsConfig,
    directions_payload: Mapping[str, Any],
) -> list[GeoPoint]:
    source = PATH_SOURCES.get(config.route_source)
    if source is None:
        allowed = ", ".join(sorted(PATH_SOURCES))
        raise ValueError(f"Unknown route source: {config.route_source!r}. Allowed values: {allowed}.")
    return source(directions_payload, config.route_index, config.polyline_precision)


def run_route_path(
    config: RouteCinematicsConfig,
    route_path: Any,
    output_dir: Optional[Path] = None,
) -> RouteCameraArtifacts:
    """Generate waypoints for an already flattened route path."""
    camera_path = WaypointGenerator(config.resampling).build(route_path)
    waypoints = camera_path.waypoints

    artifacts = RouteCameraArtifacts(
        route_source=config.route_source,
        num_route_points=len(camera_path.route),
        num_smoothed_points=len(camera_path.smoothed),
        route_length_m=camera_path.route_length_m,
        waypoints=waypoints,
        output_dir=output_dir,
    )
    artifacts.warnings.extend(
        validate_waypoints(waypoints, interval_distance=config.resampling.interval_distance)
    )
    for warning in artifacts.warnings:
        logger.warning(warning)

    if output_dir is not None:
        artifacts.output_file = write_waypoints(
            waypoints,
            Path(output_dir) / "waypoints",
            capture=config.capture,
        )
        logger.info("Saved %s waypoints to %s", len(waypoints), artifacts.output_file)
    return artifacts


def run(
    config: RouteCinematicsConfig,
    directions_payload: Mapping[str, Any],
    output_dir: Optional[Path] = None,
) -> RouteCameraArtifacts:
    """Run flattening, smoothing, resampling, and heading estimation for a directions payload."""
    route_path = extract_route_path(config, directions_payload)
    logger.debug("Route source %r produced %s points.", config.route_source, len(route_path))
    return run_route_path(config, route_path, output_dir=output_dir)
