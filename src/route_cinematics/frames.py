"""RGBA frame buffers and per-pixel compositing primitives."""

from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from .errors import BufferLengthMismatch


logger = logging.getLogger(__name__)

_CHANNELS = 4
# [px] blur sigmas below this leave the frame visually unchanged.
_MIN_BLUR_SIGMA = 0.1


@dataclass(frozen=True, eq=False)
class Frame:
    """Packed RGBA image, ``pixels`` has shape (height, width, 4) and dtype uint8."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != _CHANNELS:
            raise ValueError(f"`pixels` must have shape (H, W, 4); got shape={pixels.shape}.")
        if pixels.dtype != np.uint8:
            raise ValueError(f"`pixels` must be uint8; got dtype={pixels.dtype}.")
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def nbytes(self) -> int:
        return int(self.pixels.nbytes)

    @classmethod
    def from_buffer(cls, data: bytes, width: int, height: int) -> "Frame":
        """Wrap a packed row-major RGBA buffer."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Frame dimensions must be > 0; got {width}x{height}.")
        expected = width * height * _CHANNELS
        if len(data) != expected:
            raise BufferLengthMismatch(
                f"Buffer holds {len(data)} bytes; {width}x{height} RGBA needs {expected}."
            )
        pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, _CHANNELS)
        return cls(pixels.copy())

    def to_bytes(self) -> bytes:
        return np.ascontiguousarray(self.pixels).tobytes()

    def same_pixels(self, other: "Frame") -> bool:
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))


def check_compatible(a: Frame, b: Frame) -> None:
    if a.nbytes != b.nbytes or a.pixels.shape != b.pixels.shape:
        raise BufferLengthMismatch(
            f"Frames must match to be blended: {a.width}x{a.height} ({a.nbytes} bytes) "
            f"vs {b.width}x{b.height} ({b.nbytes} bytes)."
        )


def _check_unit_interval(name: str, value: float) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"`{name}` must be in [0, 1]; got {value}.")
    return value


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def _composite(a: Frame, rgb: np.ndarray) -> Frame:
    out = np.empty_like(a.pixels)
    out[..., :3] = _round_half_up(rgb)
    out[..., 3] = a.pixels[..., 3]
    return Frame(out)


def blend_frames(a: Frame, b: Frame, ratio: float) -> Frame:
    """
    Linear per-channel blend: RGB ``a * (1 - ratio) + b * ratio``, alpha from *a*.

    Raises:
        BufferLengthMismatch: if the frames differ in size.
    """
    check_compatible(a, b)
    ratio = _check_unit_interval("ratio", ratio)
    rgb_a = a.pixels[..., :3].astype(np.float64)
    rgb_b = b.pixels[..., :3].astype(np.float64)
    return _composite(a, rgb_a * (1.0 - ratio) + rgb_b * ratio)


def screen_composite(a: Frame, b: Frame, opacity: float) -> Frame:
    """Draw *b* over *a* with a screen blend at *opacity*; brightens toward a flare."""
    check_compatible(a, b)
    opacity = _check_unit_interval("opacity", opacity)
    rgb_a = a.pixels[..., :3].astype(np.float64)
    rgb_b = b.pixels[..., :3].astype(np.float64)
    screened = 255.0 - (255.0 - rgb_a) * (255.0 - rgb_b) / 255.0
    return _composite(a, rgb_a + (screened - rgb_a) * opacity)


def lighten_composite(a: Frame, b: Frame, opacity: float) -> Frame:
    """Draw *b* over *a* keeping the lighter channel, at *opacity*."""
    check_compatible(a, b)
    opacity = _check_unit_interval("opacity", opacity)
    rgb_a = a.pixels[..., :3].astype(np.float64)
    rgb_b = b.pixels[..., :3].astype(np.float64)
    lighter = np.maximum(rgb_a, rgb_b)
    return _composite(a, rgb_a + (lighter - rgb_a) * opacity)


def motion_blur(frame: Frame, sigma: float) -> Frame:
    """Gaussian-blur *frame*; sigmas below 0.1px return the frame unchanged."""
    if sigma < _MIN_BLUR_SIGMA:
        return frame
    import cv2

    blurred = cv2.GaussianBlur(frame.pixels, (0, 0), sigmaX=float(sigma), sigmaY=float(sigma))
    return Frame(np.ascontiguousarray(blurred, dtype=np.uint8))


COMPOSITORS = {
    "screen": screen_composite,
    "lighten": lighten_composite,
    "alpha": blend_frames,
}
