"""Flatten directions payloads into a single ordered route path."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from .config import SUPPORTED_ROUTE_SOURCES
from .errors import recoverable_payload_exceptions
from .geo import GeoPoint
from .polyline import decode_polyline


logger = logging.getLogger(__name__)
_PAYLOAD_EXCEPTIONS = recoverable_payload_exceptions()


def _polyline_text(step: Any) -> Optional[str]:
    if isinstance(step, str):
        return step
    if not isinstance(step, Mapping):
        return None
    polyline = step.get("polyline")
    if isinstance(polyline, str):
        return polyline
    if isinstance(polyline, Mapping):
        points = polyline.get("points")
        if isinstance(points, str):
            return points
    return None


def flatten_steps(steps: Iterable[Any], precision: int = 5) -> list[GeoPoint]:
    """
    Decode per-step polylines and concatenate them in step order.

    Join points between consecutive steps are kept as-is; the resampler
    handles the resulting zero-length segments.
    """
    path: list[GeoPoint] = []
    for index, step in enumerate(steps or []):
        text = _polyline_text(step)
        if not text:
            logger.debug("Step %s has no polyline; skipping.", index)
            continue
        path.extend(decode_polyline(text, precision=precision))
    return path


def _select_route(payload: Mapping[str, Any], route_index: int) -> Optional[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"Directions payload must be a mapping; got {type(payload).__name__}.")
    try:
        route = payload["routes"][route_index]
    except _PAYLOAD_EXCEPTIONS:
        logger.warning("Directions payload has no route at index %s.", route_index)
        return None
    if not isinstance(route, Mapping):
        logger.warning("Route %s is not a mapping; ignoring it.", route_index)
        return None
    return route


def path_from_steps(
    payload: Mapping[str, Any],
    route_index: int = 0,
    precision: int = 5,
) -> list[GeoPoint]:
    """Concatenate the step polylines of every leg of one route."""
    route = _select_route(payload, route_index)
    if route is None:
        return []
    legs = route.get("legs") or []
    steps: list[Any] = []
    for leg_index, leg in enumerate(legs):
        try:
            steps.extend(leg["steps"] or [])
        except _PAYLOAD_EXCEPTIONS:
            logger.warning("Leg %s has no steps; skipping.", leg_index)
    if not steps:
        logger.warning("Route %s has no steps; returning an empty path.", route_index)
        return []
    return flatten_steps(steps, precision=precision)


def path_from_overview(
    payload: Mapping[str, Any],
    route_index: int = 0,
    precision: int = 5,
) -> list[GeoPoint]:
    """Decode the single overview polyline of one route."""
    route = _select_route(payload, route_index)
    if route is None:
        return []
    text = _polyline_text({"polyline": route.get("overview_polyline")})
    if not text:
        logger.warning("Route %s has no overview polyline; returning an empty path.", route_index)
        return []
    return decode_polyline(text, precision=precision)


def path_from_directions(
    payload: Mapping[str, Any],
    source: str = "steps",
    route_index: int = 0,
    precision: int = 5,
) -> list[GeoPoint]:
    """Build a route path from a directions payload using the given source shape."""
    if source == "steps":
        return path_from_steps(payload, route_index=route_index, precision=precision)
    if source == "overview":
        return path_from_overview(payload, route_index=route_index, precision=precision)
    allowed = ", ".join(SUPPORTED_ROUTE_SOURCES)
    raise ValueError(f"Unknown route source: {source!r}. Allowed values: {allowed}.")
