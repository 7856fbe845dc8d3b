"""Spherical geodesy helpers over ``[lat, lng]`` degree arrays."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Iterable

import numpy as np


EARTH_RADIUS_M = 6_378_137.0


@dataclass(frozen=True)
class GeoPoint:
    """Immutable geographic coordinate in degrees."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(f"GeoPoint coordinates must be finite; got ({self.lat}, {self.lng}).")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"`lat` must be in [-90, 90]; got {self.lat}.")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"`lng` must be in [-180, 180]; got {self.lng}.")

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


def as_latlng_array(points: Any) -> np.ndarray:
    """
    Convert a route path into an ``(N, 2)`` float array of ``[lat, lng]``.

    Accepts GeoPoint-like objects (``.lat`` / ``.lng``), ``{"lat", "lng"}``
    mappings, ``(lat, lng)`` pairs or an existing array.
    """
    if isinstance(points, np.ndarray):
        arr = np.asarray(points, dtype=float)
    else:
        rows: list[tuple[float, float]] = []
        for point in points:
            if hasattr(point, "lat") and hasattr(point, "lng"):
                rows.append((float(point.lat), float(point.lng)))
            elif isinstance(point, dict):
                rows.append((float(point["lat"]), float(point["lng"])))
            else:
                lat, lng = point
                rows.append((float(lat), float(lng)))
        arr = np.asarray(rows, dtype=float).reshape(-1, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Route path must have shape (N, 2); got shape={arr.shape}.")
    return arr


def to_geopoints(points: Iterable[Iterable[float]]) -> list[GeoPoint]:
    return [GeoPoint(lat=float(lat), lng=float(lng)) for lat, lng in points]


def haversine_distance(a: np.ndarray, b: np.ndarray) -> np.ndarray | float:
    """Great-circle distance in meters between ``[lat, lng]`` rows of *a* and *b*."""
    a = np.radians(np.asarray(a, dtype=float))
    b = np.radians(np.asarray(b, dtype=float))
    dlat = b[..., 0] - a[..., 0]
    dlng = b[..., 1] - a[..., 1]
    h = np.sin(dlat / 2.0) ** 2 + np.cos(a[..., 0]) * np.cos(b[..., 0]) * np.sin(dlng / 2.0) ** 2
    h = np.clip(h, 0.0, 1.0)
    dist = 2.0 * EARTH_RADIUS_M * np.arcsin(np.sqrt(h))
    if np.ndim(dist) == 0:
        return float(dist)
    return dist


def initial_bearing(a: np.ndarray, b: np.ndarray) -> np.ndarray | float:
    """Initial great-circle bearing from *a* to *b*, degrees in [0, 360)."""
    a = np.radians(np.asarray(a, dtype=float))
    b = np.radians(np.asarray(b, dtype=float))
    dlng = b[..., 1] - a[..., 1]
    y = np.sin(dlng) * np.cos(b[..., 0])
    x = np.cos(a[..., 0]) * np.sin(b[..., 0]) - np.sin(a[..., 0]) * np.cos(b[..., 0]) * np.cos(dlng)
    return normalize_heading(np.degrees(np.arctan2(y, x)))


def interpolate_great_circle(a: np.ndarray, b: np.ndarray, fraction: float) -> np.ndarray:
    """Point at *fraction* of the great-circle arc from *a* to *b*."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    lat1, lng1 = np.radians(a)
    lat2, lng2 = np.radians(b)
    angle = haversine_distance(a, b) / EARTH_RADIUS_M
    if angle < 1e-12:
        return a.copy()
    sin_angle = math.sin(angle)
    wa = math.sin((1.0 - fraction) * angle) / sin_angle
    wb = math.sin(fraction * angle) / sin_angle
    x = wa * math.cos(lat1) * math.cos(lng1) + wb * math.cos(lat2) * math.cos(lng2)
    y = wa * math.cos(lat1) * math.sin(lng1) + wb * math.cos(lat2) * math.sin(lng2)
    z = wa * math.sin(lat1) + wb * math.sin(lat2)
    lat = math.atan2(z, math.sqrt(x * x + y * y))
    lng = math.atan2(y, x)
    return np.array([math.degrees(lat), math.degrees(lng)], dtype=float)


def normalize_heading(heading: np.ndarray | float) -> np.ndarray | float:
    """Wrap degrees into [0, 360)."""
    wrapped = np.mod(heading, 360.0)
    # np.mod can round tiny negative inputs up to exactly 360.0.
    wrapped = np.where(wrapped >= 360.0, 0.0, wrapped)
    if np.ndim(wrapped) == 0:
        return float(wrapped)
    return wrapped


def wrap_heading_delta(delta: np.ndarray | float) -> np.ndarray | float:
    """Wrap an angular difference into [-180, 180)."""
    wrapped = (np.asarray(delta, dtype=float) + 180.0) % 360.0 - 180.0
    if np.ndim(wrapped) == 0:
        return float(wrapped)
    return wrapped


def ease_cubic(t: np.ndarray | float) -> np.ndarray | float:
    """Smoothstep easing ``t²(3 - 2t)``."""
    return t * t * (3.0 - 2.0 * t)


def path_length(points: np.ndarray) -> float:
    pts = as_latlng_array(points)
    if len(pts) < 2:
        return 0.0
    return float(np.sum(haversine_distance(pts[:-1], pts[1:])))
