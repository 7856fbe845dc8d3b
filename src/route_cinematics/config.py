"""Configuration models for route camera-path and frame enhancement workflows."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import json
import math
from pathlib import Path
from typing import Any

from .spline import segments_for_smoothness, tension_for_smoothness


SUPPORTED_ROUTE_SOURCES = ("steps", "overview")
SUPPORTED_HEADING_POLICIES = ("momentum", "local")
SUPPORTED_EASINGS = ("linear", "cubic")
SUPPORTED_CROSSFADE_MODES = ("screen", "lighten", "alpha")


def _serialize_paths(payload: Any) -> Any:
    if isinstance(payload, Path):
        return str(payload)
    if isinstance(payload, list):
        return [_serialize_paths(v) for v in payload]
    if isinstance(payload, dict):
        return {k: _serialize_paths(v) for k, v in payload.items()}
    return payload


def _validate_choice(field_name: str, value: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        allowed_str = ", ".join(allowed)
        raise ValueError(f"Invalid `{field_name}`: {value!r}. Allowed values: {allowed_str}.")


def _validate_int(field_name: str, value: Any, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"`{field_name}` must be an integer; got {type(value).__name__}.")
    if value < minimum:
        raise ValueError(f"`{field_name}` must be >= {minimum}.")


def _validate_finite(field_name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"`{field_name}` must be a finite number; got {value!r}.")


@dataclass
class ResamplingConfig:
    """Path smoothing, resampling, and heading options."""

    interval_distance: float = 20.0  # [m] great-circle spacing between waypoints.
    smoothness: int = 4  # [-] spline samples per span and heading look-ahead scale.
    heading_policy: str = "momentum"  # momentum | local.
    easing: str = "linear"  # linear | cubic in-segment interpolation.
    apply_spline: bool = True  # densify with Catmull-Rom before resampling.

    def __post_init__(self) -> None:
        _validate_finite("interval_distance", self.interval_distance)
        if self.interval_distance <= 0:
            raise ValueError("`interval_distance` must be > 0.")
        _validate_int("smoothness", self.smoothness, 1)
        _validate_choice("heading_policy", self.heading_policy, SUPPORTED_HEADING_POLICIES)
        _validate_choice("easing", self.easing, SUPPORTED_EASINGS)

    @property
    def tension(self) -> float:
        return tension_for_smoothness(self.smoothness)

    @property
    def spline_segments(self) -> int:
        return segments_for_smoothness(self.smoothness)


@dataclass
class CaptureConfig:
    """Still-image request parameters forwarded to the imagery provider."""

    image_width: int = 640  # [px]
    image_height: int = 640  # [px]
    fov: float = 90.0  # [deg] horizontal field-of-view.
    pitch: float = 0.0  # [deg] camera pitch.

    def __post_init__(self) -> None:
        _validate_int("image_width", self.image_width, 1)
        _validate_int("image_height", self.image_height, 1)
        _validate_finite("fov", self.fov)
        if self.fov <= 0 or self.fov > 120:
            raise ValueError("`fov` must be in (0, 120] degrees.")
        _validate_finite("pitch", self.pitch)
        if not -90.0 <= self.pitch <= 90.0:
            raise ValueError("`pitch` must be in [-90, 90] degrees.")


@dataclass
class FrameEnhancementConfig:
    """Interpolation and crossfade options for captured frame sequences."""

    frame_interpolation: int = 2  # [frames] per original gap; 1 disables interpolation.
    crossfade_strength: float = 0.3  # [0, 1] opacity of the crossfade frame; 0 disables it.
    crossfade_mode: str = "screen"  # screen | lighten | alpha.
    motion_blur: bool = True  # blur the source frame before interpolated blends.
    motion_blur_sigma: float = 2.0  # [px] Gaussian sigma at blend ratio 1.
    max_workers: int = 1  # worker threads for per-gap blending.

    def __post_init__(self) -> None:
        _validate_int("frame_interpolation", self.frame_interpolation, 1)
        _validate_finite("crossfade_strength", self.crossfade_strength)
        if not 0.0 <= self.crossfade_strength <= 1.0:
            raise ValueError("`crossfade_strength` must be in [0, 1].")
        _validate_choice("crossfade_mode", self.crossfade_mode, SUPPORTED_CROSSFADE_MODES)
        _validate_finite("motion_blur_sigma", self.motion_blur_sigma)
        if self.motion_blur_sigma < 0:
            raise ValueError("`motion_blur_sigma` must be >= 0.")
        _validate_int("max_workers", self.max_workers, 1)

    @property
    def frames_per_gap(self) -> int:
        """Frames emitted per original gap, counting the source frame."""
        return self.frame_interpolation + (1 if self.crossfade_strength > 0 else 0)


@dataclass
class RouteVisualizationConfig:
    """Visual style for route/waypoint plots."""

    route_color: str = "#9E9E9E"
    route_linewidth: float = 1.0
    path_color: str = "#D500F9"
    path_linewidth: float = 2.0
    start_color: str = "#00E676"
    end_color: str = "#F44336"
    marker_size: float = 120.0
    arrow_color: str = "#AA00FF"
    arrow_length_fraction: float = 0.03  # [-] arrow length relative to the plot extent.
    max_arrows: int = 50


@dataclass
class RouteCinematicsConfig:
    """Top-level single config for a route-to-frames run."""

    route_source: str = "steps"  # steps | overview.
    route_index: int = 0
    polyline_precision: int = 5
    frame_rate: float = 20.0  # [frames/s] of original captures.
    output_dir: Path = Path("outputs/route_cinematics")
    resampling: ResamplingConfig = field(default_factory=ResamplingConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    enhancement: FrameEnhancementConfig = field(default_factory=FrameEnhancementConfig)
    viz: RouteVisualizationConfig = field(default_factory=RouteVisualizationConfig)

    def __post_init__(self) -> None:
        _validate_choice("route_source", self.route_source, SUPPORTED_ROUTE_SOURCES)
        _validate_int("route_index", self.route_index, 0)
        _validate_int("polyline_precision", self.polyline_precision, 0)
        _validate_finite("frame_rate", self.frame_rate)
        if self.frame_rate <= 0:
            raise ValueError("`frame_rate` must be > 0.")
        self.output_dir = Path(self.output_dir)

    @property
    def frame_delay_ms(self) -> float:
        """Per-frame display time of the enhanced sequence."""
        return 1000.0 / self.frame_rate / self.enhancement.frames_per_gap

    def to_dict(self) -> dict[str, Any]:
        raw = asdict(self)
        return _serialize_paths(raw)

    def to_json(self, output_path: Path) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "RouteCinematicsConfig":
        raw = dict(payload)
        resampling_raw = dict(raw.pop("resampling", {}) or {})
        capture_raw = dict(raw.pop("capture", {}) or {})
        enhancement_raw = dict(raw.pop("enhancement", {}) or {})
        viz_raw = dict(raw.pop("viz", {}) or {})
        if "output_dir" in raw:
            raw["output_dir"] = Path(raw["output_dir"])
        return cls(
            resampling=ResamplingConfig(**resampling_raw),
            capture=CaptureConfig(**capture_raw),
            enhancement=FrameEnhancementConfig(**enhancement_raw),
            viz=RouteVisualizationConfig(**viz_raw),
            **raw,
        )

    @classmethod
    def from_json(cls, input_path: Path) -> "RouteCinematicsConfig":
        payload = json.loads(input_path.read_text())
        return cls.from_dict(payload)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "RouteCinematicsConfig":
        """
        Build a config from a flat camelCase settings payload, e.g.
        ``{"intervalDistance": 20, "smoothness": 4, "frameRate": 20, ...}``.
        Unknown keys are rejected.
        """
        mapping = {
            "intervalDistance": ("resampling", "interval_distance"),
            "smoothness": ("resampling", "smoothness"),
            "imageWidth": ("capture", "image_width"),
            "imageHeight": ("capture", "image_height"),
            "frameInterpolation": ("enhancement", "frame_interpolation"),
            "crossfadeStrength": ("enhancement", "crossfade_strength"),
            "motionBlur": ("enhancement", "motion_blur"),
            "frameRate": (None, "frame_rate"),
        }
        unknown = sorted(set(settings) - set(mapping))
        if unknown:
            raise ValueError(f"Unknown settings keys: {', '.join(unknown)}.")
        nested: dict[str, Any] = {}
        for key, value in settings.items():
            section, name = mapping[key]
            if section is None:
                nested[name] = value
            else:
                nested.setdefault(section, {})[name] = value
        return cls.from_dict(nested)
