"""Frame sequence enhancement: interpolated and crossfaded in-between frames."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Optional, Sequence

from .config import FrameEnhancementConfig
from .errors import BufferLengthMismatch
from .frames import COMPOSITORS, Frame, blend_frames, motion_blur


logger = logging.getLogger(__name__)


def frame_delay_ms(frame_rate: float, enhancement: Optional[FrameEnhancementConfig] = None) -> float:
    """Display time per enhanced frame so playback lasts ``originals / frame_rate``."""
    if frame_rate <= 0:
        raise ValueError("`frame_rate` must be > 0.")
    cfg = enhancement or FrameEnhancementConfig()
    return 1000.0 / frame_rate / cfg.frames_per_gap


class FrameSequenceEnhancer:
    """Insert in-between frames into an ordered capture sequence."""

    def __init__(self, config: Optional[FrameEnhancementConfig] = None) -> None:
        self.config = config or FrameEnhancementConfig()

    @staticmethod
    def _check_uniform_size(frames: Sequence[Frame]) -> None:
        first = frames[0]
        for index, frame in enumerate(frames[1:], start=1):
            if frame.pixels.shape != first.pixels.shape:
                raise BufferLengthMismatch(
                    f"Frame {index} is {frame.width}x{frame.height}; "
                    f"expected {first.width}x{first.height} like frame 0."
                )

    def gap_frames(self, a: Frame, b: Frame) -> list[Frame]:
        """Frames inserted between *a* and *b* (excluding both)."""
        cfg = self.config
        inserted: list[Frame] = []
        steps = cfg.frame_interpolation
        for j in range(1, steps):
            ratio = j / steps
            source = motion_blur(a, ratio * cfg.motion_blur_sigma) if cfg.motion_blur else a
            inserted.append(blend_frames(source, b, ratio))
        if cfg.crossfade_strength > 0:
            compositor = COMPOSITORS[cfg.crossfade_mode]
            inserted.append(compositor(a, b, cfg.crossfade_strength))
        return inserted

    def enhance(self, frames: Sequence[Frame]) -> list[Frame]:
        """
        Return the enlarged sequence ``[A, in-betweens(A, B), B, ...]``.

        Raises:
            BufferLengthMismatch: if frames differ in dimensions.
        """
        frames = list(frames)
        if len(frames) < 2:
            return frames
        self._check_uniform_size(frames)

        pairs = list(zip(frames[:-1], frames[1:]))
        if self.config.max_workers > 1 and len(pairs) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                # map() yields in submission order regardless of completion order.
                gaps = list(pool.map(lambda pair: self.gap_frames(*pair), pairs))
        else:
            gaps = [self.gap_frames(a, b) for a, b in pairs]

        enhanced: list[Frame] = []
        for source, inserted in zip(frames[:-1], gaps):
            enhanced.append(source)
            enhanced.extend(inserted)
        enhanced.append(frames[-1])
        logger.debug("Enhanced %s frames into %s.", len(frames), len(enhanced))
        return enhanced
