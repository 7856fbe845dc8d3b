"""Encoded polyline codec (delta + base-64 text encoding of coordinates)."""

from __future__ import annotations

import math
from typing import Any, Iterable

from .errors import DecodeError
from .geo import GeoPoint, as_latlng_array


_CHUNK_BITS = 5
_CHUNK_MASK = 0x1F
_CONTINUATION = 0x20
_ASCII_OFFSET = 63
_MAX_VALUE_BITS = 32


def _decode_value(text: str, index: int) -> tuple[int, int]:
    """Decode one signed varint starting at *index*; return (value, next_index)."""
    result = 0
    shift = 0
    while True:
        if index >= len(text):
            raise DecodeError(f"Polyline truncated inside a value at offset {index}.")
        chunk = ord(text[index]) - _ASCII_OFFSET
        if chunk < 0 or chunk > 0x3F:
            raise DecodeError(f"Invalid polyline character {text[index]!r} at offset {index}.")
        index += 1
        result |= (chunk & _CHUNK_MASK) << shift
        shift += _CHUNK_BITS
        if shift > _MAX_VALUE_BITS + _CHUNK_BITS:
            raise DecodeError(f"Polyline value overflows {_MAX_VALUE_BITS} bits at offset {index}.")
        if chunk < _CONTINUATION:
            break
    if result >> 1 >= 1 << (_MAX_VALUE_BITS - 1):
        raise DecodeError(f"Polyline value overflows {_MAX_VALUE_BITS} bits at offset {index}.")
    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode_polyline(text: str, precision: int = 5) -> list[GeoPoint]:
    """
    Decode an encoded polyline into an ordered list of points.

    Raises:
        DecodeError: on characters outside the alphabet, truncated values,
            an odd number of encoded values, overflow, or coordinates outside
            the valid latitude/longitude ranges.
    """
    if not isinstance(text, str):
        raise DecodeError(f"Encoded polyline must be a string; got {type(text).__name__}.")
    if precision < 0:
        raise ValueError("`precision` must be >= 0.")
    factor = 10.0 ** precision

    points: list[GeoPoint] = []
    index = 0
    lat = 0
    lng = 0
    while index < len(text):
        d_lat, index = _decode_value(text, index)
        if index >= len(text):
            raise DecodeError("Polyline ends after a latitude without its longitude.")
        d_lng, index = _decode_value(text, index)
        lat += d_lat
        lng += d_lng
        try:
            points.append(GeoPoint(lat=lat / factor, lng=lng / factor))
        except ValueError as exc:
            raise DecodeError(f"Decoded coordinate out of range at point {len(points)}: {exc}") from exc
    return points


def _round_half_away(value: float) -> int:
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chunks: list[str] = []
    while value >= _CONTINUATION:
        chunks.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _ASCII_OFFSET))
        value >>= _CHUNK_BITS
    chunks.append(chr(value + _ASCII_OFFSET))
    return "".join(chunks)


def encode_polyline(points: Iterable[Any], precision: int = 5) -> str:
    """Encode points (GeoPoints, mappings, or ``(lat, lng)`` pairs) as polyline text."""
    if precision < 0:
        raise ValueError("`precision` must be >= 0.")
    factor = 10.0 ** precision
    pts = as_latlng_array(list(points))
    out: list[str] = []
    prev_lat = 0
    prev_lng = 0
    for lat, lng in pts:
        lat_i = _round_half_away(float(lat) * factor)
        lng_i = _round_half_away(float(lng) * factor)
        out.append(_encode_value(lat_i - prev_lat))
        out.append(_encode_value(lng_i - prev_lng))
        prev_lat, prev_lng = lat_i, lng_i
    return "".join(out)
