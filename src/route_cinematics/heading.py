"""Camera heading estimation for resampled waypoints."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .config import ResamplingConfig
from .geo import (
    as_latlng_array,
    ease_cubic,
    haversine_distance,
    initial_bearing,
    normalize_heading,
    wrap_heading_delta,
)
from .resample import ResampledPath


logger = logging.getLogger(__name__)

# [m] look-at targets closer than this are treated as coincident with the camera.
_MIN_LOOK_DISTANCE_M = 1e-6


def _bearing_or_none(origin: np.ndarray, target: np.ndarray) -> Optional[float]:
    if float(haversine_distance(origin, target)) <= _MIN_LOOK_DISTANCE_M:
        return None
    return float(initial_bearing(origin, target))


def blend_headings(
    previous: float,
    raw: float,
    momentum: float,
    smoothness: int,
) -> float:
    """
    Move *previous* toward *raw* along the shortest arc.

    The step is ``wrap(raw - previous) * ease(momentum) * damping`` where the
    damping factor is ``max(0.3, 1 - smoothness * 0.1)``.
    """
    previous = float(normalize_heading(previous))
    raw = float(normalize_heading(raw))
    diff = float(wrap_heading_delta(raw - previous))
    damping = max(0.3, 1.0 - smoothness * 0.1)
    blended = previous + diff * float(ease_cubic(momentum)) * damping
    return float(normalize_heading(blended))


class HeadingEstimator:
    """Assign a viewing heading to every resampled waypoint."""

    def __init__(self, config: ResamplingConfig) -> None:
        self.config = config

    def estimate(self, resampled: ResampledPath, path: np.ndarray) -> np.ndarray:
        """
        Compute headings in [0, 360) for each sample of *resampled*.

        Args:
            resampled: Samples produced by :func:`resample_path` on *path*.
            path: The (smoothed) route path the samples were taken from.
        """
        if len(resampled) == 0:
            return np.empty(0, dtype=float)
        policy = self.config.heading_policy
        if policy == "local":
            headings = self._local_headings(resampled.positions)
        elif policy == "momentum":
            headings = self._momentum_headings(resampled, as_latlng_array(path))
        else:
            raise ValueError(f"Unsupported heading_policy: {policy!r}. Expected one of: local, momentum.")
        return np.asarray(normalize_heading(headings), dtype=float).reshape(-1)

    @staticmethod
    def _local_headings(positions: np.ndarray) -> np.ndarray:
        count = len(positions)
        raw: list[Optional[float]] = [
            _bearing_or_none(positions[k], positions[k + 1]) for k in range(count - 1)
        ]
        first_defined = next((h for h in raw if h is not None), 0.0)

        headings = np.zeros(count, dtype=float)
        previous = first_defined
        for k in range(count - 1):
            if raw[k] is not None:
                previous = raw[k]
            headings[k] = previous
        headings[-1] = previous
        return headings

    @staticmethod
    def _segment_bearing(path: np.ndarray, index: int) -> Optional[float]:
        if index < 0 or index + 1 >= len(path):
            return None
        return _bearing_or_none(path[index], path[index + 1])

    def _momentum_headings(self, resampled: ResampledPath, path: np.ndarray) -> np.ndarray:
        smoothness = self.config.smoothness
        last_index = len(path) - 1
        headings = np.zeros(len(resampled), dtype=float)

        previous = 0.0
        for k, (position, seg_idx) in enumerate(zip(resampled.positions, resampled.segment_indices)):
            i = int(seg_idx)
            if k == 0:
                look_index = min(i + max(3, smoothness), last_index)
            else:
                look_index = i + min(smoothness * 2, last_index - i)

            raw = _bearing_or_none(position, path[look_index])
            if raw is None:
                raw = self._segment_bearing(path, i)

            if k == 0:
                heading = raw if raw is not None else self._first_defined_bearing(path)
            elif raw is None:
                heading = previous
            else:
                momentum = min(k * 0.1, 0.8)
                heading = blend_headings(previous, raw, momentum, smoothness)

            headings[k] = heading
            previous = heading
        return headings

    @staticmethod
    def _first_defined_bearing(path: np.ndarray) -> float:
        for idx in range(len(path) - 1):
            bearing = _bearing_or_none(path[idx], path[idx + 1])
            if bearing is not None:
                return bearing
        logger.debug("Route path has no non-degenerate segment; defaulting heading to 0.")
        return 0.0
