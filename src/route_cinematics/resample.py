"""Arc-length resampling of route paths at a fixed great-circle interval."""

from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from .config import SUPPORTED_EASINGS
from .geo import as_latlng_array, ease_cubic, haversine_distance, interpolate_great_circle


logger = logging.getLogger(__name__)

# [m] segments at or below this length are treated as duplicate points.
_MIN_SEGMENT_M = 1e-9
# [m] slack when comparing running distance against the next sample target.
_DISTANCE_EPS = 1e-6
# [-] interior samples closer than this fraction of an interval to the end are dropped.
_TAIL_MERGE_FRACTION = 0.5


@dataclass(frozen=True)
class ResampledPath:
    """Samples placed along a route path."""

    positions: np.ndarray  # (M, 2) [lat, lng] degrees.
    segment_indices: np.ndarray  # (M,) index i of the bracketing source segment [i, i+1].
    distances: np.ndarray  # (M,) [m] arc length from the path start.

    def __len__(self) -> int:
        return len(self.positions)

    @classmethod
    def empty(cls) -> "ResampledPath":
        return cls(
            positions=np.empty((0, 2), dtype=float),
            segment_indices=np.empty(0, dtype=int),
            distances=np.empty(0, dtype=float),
        )


def resample_path(
    points: np.ndarray,
    interval_distance: float,
    easing: str = "linear",
) -> ResampledPath:
    """
    Emit a sample every *interval_distance* meters along the path.

    The first and last path points are always included. Zero-length
    segments are skipped without emitting samples.
    """
    if not np.isfinite(interval_distance) or interval_distance <= 0:
        raise ValueError(f"`interval_distance` must be a finite value > 0; got {interval_distance}.")
    if easing not in SUPPORTED_EASINGS:
        allowed = ", ".join(SUPPORTED_EASINGS)
        raise ValueError(f"Unsupported easing: {easing!r}. Allowed values: {allowed}.")

    pts = as_latlng_array(points)
    if len(pts) < 2:
        return ResampledPath.empty()

    seg_lengths = np.atleast_1d(haversine_distance(pts[:-1], pts[1:]))

    positions: list[np.ndarray] = [pts[0].copy()]
    segment_indices: list[int] = [0]
    distances: list[float] = [0.0]

    travelled = 0.0
    next_sample = 1
    skipped = 0
    for i, seg in enumerate(seg_lengths):
        seg = float(seg)
        if seg <= _MIN_SEGMENT_M:
            skipped += 1
            logger.debug("Skipping zero-length segment %s.", i)
            continue
        while travelled + seg + _DISTANCE_EPS >= next_sample * interval_distance:
            target = next_sample * interval_distance
            ratio = min(max((target - travelled) / seg, 0.0), 1.0)
            if easing == "cubic":
                ratio = float(ease_cubic(ratio))
            positions.append(interpolate_great_circle(pts[i], pts[i + 1], ratio))
            segment_indices.append(i)
            distances.append(target)
            next_sample += 1
        travelled += seg

    if travelled <= _MIN_SEGMENT_M:
        logger.debug("Route path has zero length; emitting a single sample.")
        return ResampledPath(
            positions=pts[:1].copy(),
            segment_indices=np.zeros(1, dtype=int),
            distances=np.zeros(1, dtype=float),
        )

    if len(positions) > 1 and travelled - distances[-1] < interval_distance * _TAIL_MERGE_FRACTION:
        positions.pop()
        segment_indices.pop()
        distances.pop()

    positions.append(pts[-1].copy())
    segment_indices.append(len(pts) - 2)
    distances.append(travelled)

    logger.debug(
        "Resampled %.1fm path into %s samples at %.1fm (%s zero-length segments skipped).",
        travelled,
        len(positions),
        interval_distance,
        skipped,
    )
    return ResampledPath(
        positions=np.asarray(positions, dtype=float),
        segment_indices=np.asarray(segment_indices, dtype=int),
        distances=np.asarray(distances, dtype=float),
    )
