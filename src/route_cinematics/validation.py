"""Waypoint sequence post-generation validation helpers."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import numpy as np

from .geo import haversine_distance


logger = logging.getLogger(__name__)

# [-] allowed relative deviation of interior spacing from the configured interval.
_SPACING_TOLERANCE = 0.05
# [m] consecutive waypoints closer than this count as duplicates.
_DUPLICATE_DISTANCE_M = 1e-3


def _as_row(waypoint: Any) -> Optional[np.ndarray]:
    try:
        if isinstance(waypoint, dict):
            raw = (waypoint["lat"], waypoint["lng"], waypoint["heading"])
        else:
            raw = (waypoint.lat, waypoint.lng, waypoint.heading)
        return np.asarray(raw, dtype=float)
    except (KeyError, AttributeError, TypeError, ValueError):
        return None


def validate_waypoints(
    waypoints: Sequence[Any],
    interval_distance: Optional[float] = None,
) -> list[str]:
    """
    Validate a waypoint sequence and return warning strings.

    The function is non-throwing and intended for debug/QA hardening.
    """
    warnings: list[str] = []
    if not waypoints:
        return warnings

    invalid_shape_count = 0
    non_finite_count = 0
    out_of_range_count = 0
    bad_heading_count = 0

    rows: list[np.ndarray] = []
    for waypoint in waypoints:
        row = _as_row(waypoint)
        if row is None:
            invalid_shape_count += 1
            continue
        if not np.all(np.isfinite(row)):
            non_finite_count += 1
            continue
        lat, lng, heading = (float(v) for v in row)
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            out_of_range_count += 1
        if not 0.0 <= heading < 360.0:
            bad_heading_count += 1
        rows.append(row)

    duplicate_count = 0
    irregular_spacing_count = 0
    if len(rows) >= 2:
        positions = np.asarray(rows, dtype=float)[:, :2]
        gaps = np.atleast_1d(haversine_distance(positions[:-1], positions[1:]))
        duplicate_count = int(np.sum(gaps < _DUPLICATE_DISTANCE_M))
        if interval_distance is not None and interval_distance > 0 and len(gaps) > 2:
            # The final gap ends at the route endpoint and is irregular by construction.
            interior = gaps[:-1]
            tolerance_m = interval_distance * _SPACING_TOLERANCE
            irregular_spacing_count = int(
                np.sum(np.abs(interior - interval_distance) > tolerance_m)
            )
            logger.debug(
                "Interior spacing: mean=%.2fm min=%.2fm max=%.2fm.",
                float(np.mean(interior)),
                float(np.min(interior)),
                float(np.max(interior)),
            )

    if invalid_shape_count:
        warnings.append(f"{invalid_shape_count} waypoint(s) missing lat/lng/heading.")
    if non_finite_count:
        warnings.append(f"{non_finite_count} waypoint(s) contain NaN/Inf values.")
    if out_of_range_count:
        warnings.append(f"{out_of_range_count} waypoint(s) lie outside valid lat/lng ranges.")
    if bad_heading_count:
        warnings.append(f"{bad_heading_count} waypoint(s) have headings outside [0, 360).")
    if duplicate_count:
        warnings.append(f"{duplicate_count} consecutive waypoint pair(s) share the same position.")
    if irregular_spacing_count:
        warnings.append(
            f"{irregular_spacing_count} waypoint gap(s) deviate from the {interval_distance:g}m "
            f"interval by more than {_SPACING_TOLERANCE:.0%}."
        )
    return warnings
