"""Public programmatic API for route camera-path workflows."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from .config import FrameEnhancementConfig, ResamplingConfig, RouteCinematicsConfig
from .directions import path_from_directions
from .enhance import FrameSequenceEnhancer
from .frames import Frame
from .polyline import decode_polyline
from .waypoints import Waypoint, generate_waypoints


def generate_waypoints_from_directions(
    directions_payload: Mapping[str, Any],
    config: Optional[RouteCinematicsConfig] = None,
) -> list[Waypoint]:
    """Flatten a directions payload and turn it into camera waypoints."""
    cfg = config or RouteCinematicsConfig()
    path = path_from_directions(
        directions_payload,
        source=cfg.route_source,
        route_index=cfg.route_index,
        precision=cfg.polyline_precision,
    )
    return generate_waypoints(path, cfg.resampling)


def generate_waypoints_from_polyline(
    encoded_polyline: str,
    resampling: Optional[ResamplingConfig] = None,
    precision: int = 5,
) -> list[Waypoint]:
    """Decode a single encoded polyline and turn it into camera waypoints."""
    return generate_waypoints(decode_polyline(encoded_polyline, precision=precision), resampling)


def enhance_frame_sequence(
    frames: Sequence[Frame],
    enhancement: Optional[FrameEnhancementConfig] = None,
) -> list[Frame]:
    """Insert interpolated/crossfaded frames between captured stills."""
    return FrameSequenceEnhancer(enhancement).enhance(frames)
