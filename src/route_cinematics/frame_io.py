"""Read captured stills and write enhanced sequences with OpenCV."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np

from .frames import Frame


logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".bmp", ".webp")


def list_frame_files(frames_dir: Path) -> list[Path]:
    """Image files in *frames_dir*, sorted by name (capture order)."""
    frames_dir = Path(frames_dir)
    if not frames_dir.is_dir():
        raise FileNotFoundError(f"Frames directory not found: {frames_dir}")
    return sorted(
        p for p in frames_dir.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES
    )


def read_frame(path: Path) -> Frame:
    import cv2

    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError(f"Failed to decode image: {path}")
    if image.dtype != np.uint8:
        raise ValueError(f"Only 8-bit images are supported: {path} has dtype {image.dtype}.")
    if image.ndim == 2:
        rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    elif image.shape[2] == 3:
        rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    else:
        rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    return Frame(np.ascontiguousarray(rgba))


def read_frames(paths: Sequence[Path]) -> list[Frame]:
    frames = [read_frame(p) for p in paths]
    logger.debug("Read %s frames.", len(frames))
    return frames


def write_frame_sequence(frames: Sequence[Frame], output_dir: Path) -> list[Path]:
    """Write frames as ``frame_000000.png`` ... into *output_dir*."""
    import cv2

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for index, frame in enumerate(frames):
        path = output_dir / f"frame_{index:06d}.png"
        if not cv2.imwrite(str(path), cv2.cvtColor(frame.pixels, cv2.COLOR_RGBA2BGRA)):
            raise RuntimeError(f"Failed to write frame {index} to {path}")
        written.append(path)
    logger.info("Wrote %d frames to %s", len(written), output_dir)
    return written


def write_video(frames: Sequence[Frame], output_path: Path, fps: float) -> Path:
    """Encode frames into an MP4 at *fps* frames per second."""
    import cv2

    if not frames:
        raise ValueError("No frames to encode.")
    if fps <= 0:
        raise ValueError("`fps` must be > 0.")
    width, height = frames[0].width, frames[0].height

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fourcc = cv2.VideoWriter_fourcc(*"mp4v")  # type: ignore[attr-defined]
    writer = cv2.VideoWriter(str(output_path), fourcc, float(fps), (width, height))
    if not writer.isOpened():
        raise RuntimeError(f"Failed to open video writer for {output_path}")

    logger.info("Encoding %d video frames at %.2ffps (%dx%d) ...", len(frames), fps, width, height)
    try:
        for index, frame in enumerate(frames):
            if frame.width != width or frame.height != height:
                raise ValueError(
                    f"Frame {index} is {frame.width}x{frame.height}; expected {width}x{height}."
                )
            writer.write(cv2.cvtColor(frame.pixels, cv2.COLOR_RGBA2BGR))
    finally:
        writer.release()
    return output_path
