"""Spline primitives used to densify route paths before resampling."""

from __future__ import annotations

import logging

import numpy as np


logger = logging.getLogger(__name__)


def tension_for_smoothness(smoothness: int) -> float:
    """Higher smoothness gives lower tension and gentler curvature."""
    return max(0.1, 1.0 - smoothness * 0.2)


def segments_for_smoothness(smoothness: int) -> int:
    return max(2, int(smoothness))


class CatmullRomSpline:
    """
    Uniform Catmull-Rom spline with a tension-scaled tangent.
    Passes through every control point; edge spans reuse the edge point as
    their missing neighbor.
    """

    def __init__(self, points: np.ndarray, tension: float = 0.5):
        """
        Args:
            points: Array of shape (N, 2) holding ``[lat, lng]`` rows.
            tension: Tangent scale applied to ``p2 - p0`` and ``p3 - p1``.
        """
        pts = np.asarray(points, dtype=float)
        if pts.ndim != 2:
            raise ValueError(f"`points` must be a 2D array of shape (N, 2); got ndim={pts.ndim}.")
        if pts.shape[1] != 2:
            raise ValueError(f"`points` must have shape (N, 2); got shape={pts.shape}.")
        if not np.all(np.isfinite(pts)):
            raise ValueError("`points` contains non-finite values (NaN/Inf).")
        if not np.isfinite(tension) or tension <= 0:
            raise ValueError(f"`tension` must be a finite value > 0; got {tension}.")
        self.points = pts
        self.tension = float(tension)

    @property
    def num_spans(self) -> int:
        return max(0, len(self.points) - 1)

    def _span_controls(self) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        n = len(self.points)
        idx = np.arange(n - 1)
        p0 = self.points[np.maximum(idx - 1, 0)]
        p1 = self.points[idx]
        p2 = self.points[idx + 1]
        p3 = self.points[np.minimum(idx + 2, n - 1)]
        return p0, p1, p2, p3

    def evaluate(self, t_values: np.ndarray) -> np.ndarray:
        """
        Evaluate every span at the local parameters *t_values*.

        Returns:
            Array of shape (num_spans, len(t_values), 2).
        """
        t = np.asarray(t_values, dtype=float).reshape(1, -1, 1)
        if self.num_spans == 0:
            return np.empty((0, t.shape[1], 2), dtype=float)
        p0, p1, p2, p3 = (arr[:, None, :] for arr in self._span_controls())
        v0 = (p2 - p0) * self.tension
        v1 = (p3 - p1) * self.tension
        t2 = t * t
        t3 = t2 * t
        return (
            p1
            + v0 * t
            + (3.0 * (p2 - p1) - 2.0 * v0 - v1) * t2
            + (2.0 * (p1 - p2) + v0 + v1) * t3
        )

    def densify(self, segments: int) -> np.ndarray:
        """Insert *segments* evenly spaced spline samples inside every span."""
        if segments < 1:
            raise ValueError("`segments` must be >= 1.")
        if len(self.points) < 2:
            return np.array(self.points, dtype=float, copy=True)
        t_values = np.arange(1, segments + 1, dtype=float) / float(segments + 1)
        interior = self.evaluate(t_values)
        starts = self.points[:-1, None, :]
        spans = np.concatenate([starts, interior], axis=1).reshape(-1, 2)
        return np.vstack([spans, self.points[-1:]])


def smooth_path(points: np.ndarray, smoothness: int) -> np.ndarray:
    """
    Densify a route path with a Catmull-Rom spline.

    Latitude and longitude are interpolated independently (planar
    approximation, not valid near the poles or across the antimeridian).
    Paths of two or fewer points are returned unchanged. Repeated points
    (e.g. step join points) are splined like any other; the resampler
    skips the zero-length segments they leave.
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(pts) <= 2:
        return np.array(pts, dtype=float, copy=True)
    spline = CatmullRomSpline(pts, tension=tension_for_smoothness(smoothness))
    dense = spline.densify(segments_for_smoothness(smoothness))
    logger.debug("Smoothed %s route points into %s.", len(pts), len(dense))
    return dense
