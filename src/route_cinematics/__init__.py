"""Cinematic camera paths along driving routes."""

from .api import (
    enhance_frame_sequence,
    generate_waypoints_from_directions,
    generate_waypoints_from_polyline,
)
from .artifacts import RouteCameraArtifacts, read_waypoints, write_waypoints
from .config import (
    CaptureConfig,
    FrameEnhancementConfig,
    ResamplingConfig,
    RouteCinematicsConfig,
    RouteVisualizationConfig,
)
from .directions import flatten_steps, path_from_directions, path_from_overview, path_from_steps
from .enhance import FrameSequenceEnhancer, frame_delay_ms
from .errors import BufferLengthMismatch, DecodeError, InsufficientPathError
from .frames import Frame, blend_frames, lighten_composite, motion_blur, screen_composite
from .geo import GeoPoint, haversine_distance, initial_bearing
from .heading import HeadingEstimator
from .pipeline import extract_route_path, register_path_source, run, run_route_path
from .polyline import decode_polyline, encode_polyline
from .resample import ResampledPath, resample_path
from .spline import CatmullRomSpline, smooth_path
from .validation import validate_waypoints
from .visualization import plot_waypoints
from .waypoints import CameraPath, Waypoint, WaypointGenerator, generate_waypoints

__all__ = [
    "blend_frames",
    "BufferLengthMismatch",
    "CameraPath",
    "CaptureConfig",
    "CatmullRomSpline",
    "decode_polyline",
    "DecodeError",
    "encode_polyline",
    "enhance_frame_sequence",
    "extract_route_path",
    "flatten_steps",
    "Frame",
    "frame_delay_ms",
    "FrameEnhancementConfig",
    "FrameSequenceEnhancer",
    "generate_waypoints",
    "generate_waypoints_from_directions",
    "generate_waypoints_from_polyline",
    "GeoPoint",
    "haversine_distance",
    "HeadingEstimator",
    "initial_bearing",
    "InsufficientPathError",
    "lighten_composite",
    "motion_blur",
    "path_from_directions",
    "path_from_overview",
    "path_from_steps",
    "plot_waypoints",
    "read_waypoints",
    "register_path_source",
    "resample_path",
    "ResampledPath",
    "ResamplingConfig",
    "RouteCameraArtifacts",
    "RouteCinematicsConfig",
    "RouteVisualizationConfig",
    "run",
    "run_route_path",
    "screen_composite",
    "smooth_path",
    "validate_waypoints",
    "Waypoint",
    "WaypointGenerator",
    "write_waypoints",
]
