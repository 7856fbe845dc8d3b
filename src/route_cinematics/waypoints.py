"""Route path to camera waypoint orchestration."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
from typing import Any, Optional

import numpy as np

from .config import CaptureConfig, ResamplingConfig
from .geo import as_latlng_array, normalize_heading
from .heading import HeadingEstimator
from .resample import ResampledPath, resample_path
from .spline import smooth_path


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Waypoint:
    """A resampled route position plus viewing heading."""

    lat: float
    lng: float
    heading: float  # [deg] in [0, 360).

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Waypoint":
        return cls(
            lat=float(payload["lat"]),
            lng=float(payload["lng"]),
            heading=float(normalize_heading(float(payload["heading"]))),
        )

    def capture_params(self, capture: Optional[CaptureConfig] = None) -> dict[str, str]:
        """Query parameters for a street-level still at this waypoint."""
        cfg = capture or CaptureConfig()
        return {
            "size": f"{cfg.image_width}x{cfg.image_height}",
            "location": f"{self.lat},{self.lng}",
            "heading": repr(self.heading),
            "pitch": repr(float(cfg.pitch)),
            "fov": repr(float(cfg.fov)),
        }


@dataclass(frozen=True)
class CameraPath:
    """Intermediate products of one waypoint generation run."""

    route: np.ndarray  # (N, 2) flattened route path.
    smoothed: np.ndarray  # (N', 2) path actually resampled.
    resampled: ResampledPath
    headings: np.ndarray  # (M,) [deg]

    @property
    def waypoints(self) -> list[Waypoint]:
        return [
            Waypoint(lat=float(pos[0]), lng=float(pos[1]), heading=float(heading))
            for pos, heading in zip(self.resampled.positions, self.headings)
        ]

    @property
    def route_length_m(self) -> float:
        if len(self.resampled) == 0:
            return 0.0
        return float(self.resampled.distances[-1])


class WaypointGenerator:
    """Smooth, resample, and orient a route path."""

    def __init__(self, config: Optional[ResamplingConfig] = None) -> None:
        self.config = config or ResamplingConfig()
        self._heading_estimator = HeadingEstimator(self.config)

    def build(self, path: Any) -> CameraPath:
        route = as_latlng_array(path)
        if len(route) < 2:
            logger.debug("Route path has %s point(s); no waypoints generated.", len(route))
            empty = ResampledPath.empty()
            return CameraPath(route=route, smoothed=route.copy(), resampled=empty, headings=np.empty(0))

        if self.config.apply_spline:
            smoothed = smooth_path(route, self.config.smoothness)
        else:
            smoothed = route.copy()
        resampled = resample_path(
            smoothed,
            self.config.interval_distance,
            easing=self.config.easing,
        )
        headings = self._heading_estimator.estimate(resampled, smoothed)
        logger.debug(
            "Generated %s waypoints from %s route points (%s after smoothing).",
            len(resampled),
            len(route),
            len(smoothed),
        )
        return CameraPath(route=route, smoothed=smoothed, resampled=resampled, headings=headings)

    def generate(self, path: Any) -> list[Waypoint]:
        return self.build(path).waypoints


def generate_waypoints(path: Any, config: Optional[ResamplingConfig] = None) -> list[Waypoint]:
    """Turn a route path into evenly spaced, oriented camera waypoints."""
    return WaypointGenerator(config).generate(path)
